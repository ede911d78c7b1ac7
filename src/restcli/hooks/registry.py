"""Hook registry -- collect appenders from installed packages.

Packages contribute appenders to the ``restcli`` host command by declaring
an entry point in the ``restcli.hooks`` group::

    [project.entry-points."restcli.hooks"]
    github = "my_package.hooks:GitHubHooks"

The entry point must resolve to a callable (typically a class) returning a
:class:`HookProvider`: an object with ``option_appenders()`` and
``header_appenders()`` methods.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Protocol, Sequence

from restcli.hooks.appenders import HeaderAppender, OptionAppender

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "restcli.hooks"
"""The entry-point group name used for hook discovery."""


class HookProvider(Protocol):
    def option_appenders(self) -> Sequence[OptionAppender]: ...

    def header_appenders(self) -> Sequence[HeaderAppender]: ...


class HookRegistry:
    """Collects option and header appenders from registered providers.

    Example::

        registry = HookRegistry()
        registry.discover()
        cli = RestCli(
            spec,
            option_appenders=registry.option_appenders(),
            header_appenders=registry.header_appenders(),
        )
    """

    def __init__(self) -> None:
        self._providers: dict[str, HookProvider] = {}

    def discover(self) -> list[str]:
        """Load every provider registered in the ``restcli.hooks`` group.

        Returns:
            The names of the providers that were loaded. Providers that fail
            to load are logged as warnings and skipped.
        """
        loaded: list[str] = []

        entry_points = importlib.metadata.entry_points()
        if hasattr(entry_points, "select"):
            eps = entry_points.select(group=ENTRY_POINT_GROUP)
        else:
            eps = entry_points.get(ENTRY_POINT_GROUP, [])  # type: ignore[union-attr]

        for ep in eps:
            if ep.name in self._providers:
                logger.debug("Hook provider '%s' already registered, skipping", ep.name)
                continue
            try:
                factory = ep.load()
                self.register(ep.name, factory())
            except Exception as exc:
                logger.warning("Failed to load hook provider '%s': %s", ep.name, exc)
                continue
            loaded.append(ep.name)

        return loaded

    def register(self, name: str, provider: HookProvider) -> None:
        """Register *provider* under *name*, replacing any earlier one."""
        self._providers[name] = provider
        logger.info("Registered hook provider '%s'", name)

    def names(self) -> list[str]:
        return list(self._providers)

    def option_appenders(self) -> list[OptionAppender]:
        """Return the option appenders of all providers, in registration order."""
        result: list[OptionAppender] = []
        for provider in self._providers.values():
            result.extend(provider.option_appenders())
        return result

    def header_appenders(self) -> list[HeaderAppender]:
        """Return the header appenders of all providers, in registration order."""
        result: list[HeaderAppender] = []
        for provider in self._providers.values():
            result.extend(provider.header_appenders())
        return result
