"""Shared test fixtures for restcli.

Provides reusable fixtures for loading the API document fixtures, building
generated commands, recording HTTP exchanges, creating isolated config
environments and managing output state. These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from restcli.models import ApiDocument, RestCliSpec
from restcli.output import OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a reference to sys.stderr at creation time.
    When pytest or Typer's CliRunner redirect that stream during a test and
    the test finishes, the cached reference becomes stale. Resetting forces
    a fresh manager to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless OutputManager so stderr text can be asserted verbatim."""
    output = OutputManager(no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# API document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def items_api_path() -> Path:
    """Path to the JSON items API fixture."""
    return FIXTURES_DIR / "items_api.json"


@pytest.fixture
def items_api_text(items_api_path: Path) -> str:
    """Raw text of the JSON items API fixture."""
    return items_api_path.read_text(encoding="utf-8")


@pytest.fixture
def items_api_raw(items_api_text: str) -> dict[str, Any]:
    """The items API fixture as a plain dict, ``$ref`` pointers unresolved."""
    return json.loads(items_api_text)


@pytest.fixture
def items_document(items_api_raw: dict[str, Any]) -> ApiDocument:
    """Parsed items API document."""
    from restcli.parser import build_document

    return build_document(items_api_raw)


@pytest.fixture
def items_spec(items_api_text: str) -> RestCliSpec:
    """Items API document plus its command tree, command name ``items``."""
    from restcli.runner import create_rest_cli_spec

    return create_rest_cli_spec(items_api_text, "items")


# ---------------------------------------------------------------------------
# HTTP recording
# ---------------------------------------------------------------------------


class RecordingHandler:
    """:class:`httpx.MockTransport` handler that records every request.

    Request bodies are read eagerly so tests can inspect ``request.content``
    after the exchange, when body sources have already been closed.
    """

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b'{"ok": true}',
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {"content-type": "application/json"}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


@pytest.fixture
def recorder() -> RecordingHandler:
    """A handler answering ``200 {"ok": true}`` to every request."""
    return RecordingHandler()


@pytest.fixture
def stdout_buffer() -> io.BytesIO:
    """In-memory binary stream standing in for stdout."""
    return io.BytesIO()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config. Clears all RESTCLI_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("restcli.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "RESTCLI_COMMAND_NAME",
        "RESTCLI_BASE_URL",
        "RESTCLI_TIMEOUT",
        "RESTCLI_VERIFY_SSL",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
