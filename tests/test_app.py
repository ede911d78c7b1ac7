"""Tests for the restcli host application (restcli.app)."""

from __future__ import annotations

import httpx
import pytest
from typer.testing import CliRunner

from restcli import __version__
from restcli.app import _select_authorization, _write_crash_log, app
from restcli.auth import NO_AUTHORIZATION, HeaderCredential, UriUserInfo
from restcli.client.transport import HttpTransport


@pytest.fixture
def sent(monkeypatch: pytest.MonkeyPatch, recorder):
    """Route every request made by the host through the recording handler."""

    def transport_factory(config=None, transport=None) -> HttpTransport:
        return HttpTransport(config, transport=httpx.MockTransport(recorder))

    monkeypatch.setattr("restcli.runner.HttpTransport", transport_factory)
    return recorder


@pytest.fixture
def spec_file(items_api_path, isolated_config):
    return str(items_api_path)


class TestHostOptions:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"restcli {__version__}"

    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "SPEC" in result.output

    def test_spec_required(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(app, []).exit_code == 2

    def test_authorization_and_user_exclusive(self, cli_runner: CliRunner, spec_file) -> None:
        result = cli_runner.invoke(
            app, ["--authorization", "Bearer x", "--user", "a:b", spec_file, "--version"]
        )
        assert result.exit_code == 2


class TestGeneratedCommand:
    def test_arguments_after_spec_passed_through(self, cli_runner: CliRunner, spec_file) -> None:
        result = cli_runner.invoke(app, [spec_file, "--version"])
        assert result.exit_code == 0
        assert result.output.strip() == "1.2.3"

    def test_generated_help_uses_command_name(self, cli_runner: CliRunner, spec_file) -> None:
        result = cli_runner.invoke(app, ["--name", "items", spec_file, "--help"])
        assert result.exit_code == 0
        assert "Usage: items" in result.output
        assert "/items/{id}" in result.output

    def test_request_sent(self, cli_runner: CliRunner, spec_file, sent) -> None:
        result = cli_runner.invoke(app, [spec_file, "/items/{id}", "get", "--id", "42"])

        assert result.exit_code == 0
        assert str(sent.last.url) == "https://api.example.com/items/42"
        assert '{"ok": true}' in result.output

    def test_base_url_override(self, cli_runner: CliRunner, spec_file, sent) -> None:
        result = cli_runner.invoke(
            app, ["--base-url", "http://localhost:9000", spec_file, "/items", "get"]
        )
        assert result.exit_code == 0
        assert str(sent.last.url) == "http://localhost:9000/items"

    def test_authorization_header(self, cli_runner: CliRunner, spec_file, sent) -> None:
        result = cli_runner.invoke(
            app, ["--authorization", "Bearer abc", spec_file, "/items", "get"]
        )
        assert result.exit_code == 0
        assert sent.last.headers["Authorization"] == "Bearer abc"

    def test_status_assertion_exit_code(self, cli_runner: CliRunner, spec_file, sent) -> None:
        sent.status_code = 500
        result = cli_runner.invoke(
            app, [spec_file, "--assert-http-status-code", "200", "/items", "get"]
        )
        assert result.exit_code == 1

    def test_usage_error_exit_code(self, cli_runner: CliRunner, spec_file) -> None:
        result = cli_runner.invoke(app, [spec_file, "/items/{id}", "get"])
        assert result.exit_code == 2

    def test_missing_spec_file(self, cli_runner: CliRunner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["missing.json", "/items", "get"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_bad_user_value(self, cli_runner: CliRunner, spec_file) -> None:
        result = cli_runner.invoke(app, ["--user", "nocolon", spec_file, "/items", "get"])
        assert result.exit_code == 1

    def test_output_file_notice(self, cli_runner: CliRunner, spec_file, sent) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", spec_file, "--output-file", "out.json", "/items", "get"]
        )
        assert result.exit_code == 0
        assert "Response body written to out.json" in result.output

    def test_quiet_hides_notices(self, cli_runner: CliRunner, spec_file, sent) -> None:
        result = cli_runner.invoke(
            app,
            ["--no-color", "--quiet", spec_file, "--output-file", "out.json", "/items", "get"],
        )
        assert result.exit_code == 0
        assert "written to" not in result.output

    def test_verbose_reports_document(self, cli_runner: CliRunner, spec_file) -> None:
        result = cli_runner.invoke(app, ["--no-color", "--verbose", spec_file, "--version"])
        assert result.exit_code == 0
        assert f"[debug] Loading API document from {spec_file}" in result.output


class TestHelpers:
    def test_select_authorization(self) -> None:
        assert _select_authorization(None, None) is NO_AUTHORIZATION
        assert _select_authorization("Bearer x", None) == HeaderCredential("Bearer x")
        assert _select_authorization(None, "a:b") == UriUserInfo("a", "b")

    def test_crash_log_written(self, isolated_config) -> None:
        try:
            raise RuntimeError("kaboom")
        except RuntimeError as exc:
            log_path = _write_crash_log(exc)

        with open(log_path, encoding="utf-8") as fh:
            content = fh.read()
        assert "kaboom" in content
        assert log_path.startswith(str(isolated_config / "data" / "restcli"))


class TestMain:
    @pytest.fixture(autouse=True)
    def _no_signal_handlers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("restcli.app._setup_signal_handlers", lambda: None)

    def test_unexpected_error_writes_crash_log(
        self, monkeypatch: pytest.MonkeyPatch, isolated_config, plain_output, capsys
    ) -> None:
        from restcli.app import main

        def explode() -> None:
            raise RuntimeError("kaboom")

        monkeypatch.setattr("restcli.app.app", explode)
        with pytest.raises(SystemExit) as excinfo:
            main()

        assert excinfo.value.code == 1
        assert "Debug log:" in capsys.readouterr().err
        logs = list((isolated_config / "data" / "restcli").glob("crash-*.log"))
        assert len(logs) == 1

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        from restcli.app import main

        def interrupt() -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("restcli.app.app", interrupt)
        with pytest.raises(SystemExit) as excinfo:
            main()

        assert excinfo.value.code == 130
        assert "Cancelled." in capsys.readouterr().err
