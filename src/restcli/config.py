"""Settings for generated commands with XDG paths and precedence resolution.

This module handles the persistent configuration of restcli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.restcli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Settings files** -- an optional global ``config.json`` in the config
  directory and an optional project-local ``restcli.json`` in the current
  working directory, both deserialised into :class:`Settings`.
* **Precedence resolution** -- :func:`resolve_settings` merges explicit
  overrides, environment variables, the project file and the global file
  into the effective settings.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from restcli import __version__
from restcli.exceptions import ConfigError

_APP_NAME = "restcli"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "restcli.json"

DEFAULT_COMMAND_NAME = "restcli"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class RequestConfig(BaseModel):
    """HTTP transport settings applied to every request."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=False, description="Follow HTTP redirects")
    user_agent: str = Field(
        default=f"{_APP_NAME}/{__version__}", description="User-Agent header value"
    )


class Settings(BaseModel):
    """Effective settings of a generated command.

    ``base_url`` overrides the first server of the API document when set.
    """

    command_name: str = DEFAULT_COMMAND_NAME
    base_url: Optional[str] = None
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory (not created).

    On Linux/BSD: ``$XDG_CONFIG_HOME/restcli/`` (default ``~/.config/restcli/``).
    On macOS/Windows: ``~/.restcli/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/restcli/`` (default ``~/.local/share/restcli/``).
    On macOS/Windows: ``~/.restcli/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Settings files ---


def _read_settings_file(path: Path) -> dict[str, Any]:
    """Read a JSON settings file, returning an empty dict when it does not exist."""
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid settings file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid settings file {path}: expected a JSON object")
    return data


def load_global_settings() -> dict[str, Any]:
    """Load the raw global settings from ``config.json`` in :func:`get_config_dir`."""
    return _read_settings_file(get_config_dir() / _CONFIG_FILENAME)


def find_project_settings(start: Optional[Path] = None) -> Optional[Path]:
    """Return ``restcli.json`` in *start* (default: cwd) if it exists."""
    candidate = (start or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _env_settings() -> dict[str, Any]:
    """Collect settings from ``RESTCLI_*`` environment variables."""
    result: dict[str, Any] = {}
    request: dict[str, Any] = {}

    name = os.environ.get("RESTCLI_COMMAND_NAME")
    if name:
        result["command_name"] = name
    base_url = os.environ.get("RESTCLI_BASE_URL")
    if base_url:
        result["base_url"] = base_url
    timeout = os.environ.get("RESTCLI_TIMEOUT")
    if timeout:
        request["timeout"] = timeout
    verify = os.environ.get("RESTCLI_VERIFY_SSL")
    if verify:
        lowered = verify.strip().lower()
        if lowered in _TRUE_VALUES:
            request["verify_ssl"] = True
        elif lowered in _FALSE_VALUES:
            request["verify_ssl"] = False
        else:
            raise ConfigError(f"Invalid RESTCLI_VERIFY_SSL value: {verify!r}")

    if request:
        result["request"] = request
    return result


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge *override* into a copy of *base*, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_settings(overrides: Optional[dict[str, Any]] = None) -> Settings:
    """Resolve the effective :class:`Settings`.

    Precedence (highest first):

    1. *overrides* (typically host CLI flags; ``None`` values are ignored).
    2. Environment variables: ``RESTCLI_COMMAND_NAME``, ``RESTCLI_BASE_URL``,
       ``RESTCLI_TIMEOUT``, ``RESTCLI_VERIFY_SSL``.
    3. Project file ``./restcli.json``.
    4. Global file ``config.json`` in the config directory.
    5. Built-in defaults.

    Raises:
        ConfigError: If a settings file is not valid JSON or a value does
            not validate.
    """
    layers: list[dict[str, Any]] = [load_global_settings()]
    project = find_project_settings()
    if project is not None:
        layers.append(_read_settings_file(project))
    layers.append(_env_settings())
    if overrides:
        layers.append(_drop_none(overrides))

    merged: dict[str, Any] = {}
    for layer in layers:
        merged = _deep_merge(merged, layer)

    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    """Return *values* without ``None`` entries, recursing into nested dicts."""
    result: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, dict):
            nested = _drop_none(value)
            if nested:
                result[key] = nested
        elif value is not None:
            result[key] = value
    return result
