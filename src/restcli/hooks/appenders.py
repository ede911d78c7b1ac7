"""Appenders -- predicate-gated hooks adding options or headers.

An appender pairs a :data:`~restcli.hooks.matchers.PathMatcher` with a set of
method tokens and a *produce* callable. For a given path pattern and method
it either does not apply (``None``) or applies and returns whatever
*produce* added to an empty sink, which may be nothing (``[]``). The two
results are kept apart so that callers can tell an appender that fired
without adding anything from one that did not fire at all.

- :class:`OptionAppender` produces extra command-line arguments such as
  ``--X-API-KEY=secret``. They are appended to the arguments of the
  matching method command before Click parses them.
- :class:`HeaderAppender` produces extra ``(name, value)`` request headers,
  added after the headers derived from the document.

Example::

    api_key = HeaderAppender(
        match_glob("/repos/**"),
        frozenset({"post", "put", "delete"}),
        lambda headers: headers.append(("X-API-Key", "secret")),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from restcli.hooks.matchers import PathMatcher


def _normalize(operations: Iterable[str]) -> frozenset[str]:
    return frozenset(op.lower() for op in operations)


@dataclass(frozen=True)
class OptionAppender:
    """Adds command-line arguments to matching method commands.

    Attributes:
        path_matcher: Selects the path patterns this appender applies to.
        operations: Lower-case method tokens this appender applies to.
        produce: Called with an empty list to fill with argument strings.
    """

    path_matcher: PathMatcher
    operations: frozenset[str]
    produce: Callable[[list[str]], None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", _normalize(self.operations))

    def applies_to(self, path: str, operation: str) -> bool:
        return operation.lower() in self.operations and self.path_matcher.matches(path)

    def get_options(self, path: str, operation: str) -> Optional[list[str]]:
        """Return the produced arguments, or ``None`` if the appender does not apply."""
        if not self.applies_to(path, operation):
            return None
        options: list[str] = []
        self.produce(options)
        return options


@dataclass(frozen=True)
class HeaderAppender:
    """Adds request headers to matching requests.

    Attributes:
        path_matcher: Selects the path patterns this appender applies to.
        operations: Lower-case method tokens this appender applies to.
        produce: Called with an empty list to fill with ``(name, value)`` pairs.
    """

    path_matcher: PathMatcher
    operations: frozenset[str]
    produce: Callable[[list[tuple[str, str]]], None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", _normalize(self.operations))

    def applies_to(self, path: str, operation: str) -> bool:
        return operation.lower() in self.operations and self.path_matcher.matches(path)

    def get_headers(self, path: str, operation: str) -> Optional[list[tuple[str, str]]]:
        """Return the produced headers, or ``None`` if the appender does not apply."""
        if not self.applies_to(path, operation):
            return None
        headers: list[tuple[str, str]] = []
        self.produce(headers)
        return headers
