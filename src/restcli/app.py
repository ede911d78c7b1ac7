"""Typer host application and console-script entry point for restcli.

``restcli`` loads an OpenAPI document, builds the generated CLI from it and
runs the remaining arguments through that CLI::

    restcli [HOST OPTIONS] SPEC [ARGS]...
    restcli api.yaml /items/{id} get --id 42 --limit 10
    restcli --user alice:s3cret api.yaml --output-file out.json /items get

Host options must come before ``SPEC``; everything after it is handed
verbatim to the generated command, whose own ``--help`` describes the
available paths, methods and options.

Appenders contributed by installed packages through the ``restcli.hooks``
entry-point group are loaded before the generated command runs. Unhandled
exceptions are written to a crash log under the data directory.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from restcli import __version__
from restcli.auth import NO_AUTHORIZATION, Authorization, HeaderCredential, parse_user_info
from restcli.exceptions import RestCliError
from restcli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED

app = typer.Typer(
    name="restcli",
    help="Run any OpenAPI 3.x API from the command line.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"restcli {__version__}")
        raise typer.Exit()


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    },
)
def run(
    ctx: typer.Context,
    spec: str = typer.Argument(
        ..., help="OpenAPI document: file path, http(s) URL, or '-' for stdin."
    ),
    name: Optional[str] = typer.Option(
        None, "--name", help="Command name shown in usage and help text."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Send requests here instead of the document's first server."
    ),
    authorization: Optional[str] = typer.Option(
        None, "--authorization", help="Value of the Authorization header, e.g. 'Bearer abc'."
    ),
    user: Optional[str] = typer.Option(
        None, "--user", "-u", help="USER:PASSWORD placed in the request URI."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Load SPEC and run ARGS through the CLI generated from it.

    ARGS are the global options, path, method and method options of the
    generated command. Run `restcli SPEC --help` to list them.
    """
    from restcli.config import resolve_settings
    from restcli.hooks import HookRegistry
    from restcli.output import OutputManager, debug, error, set_output
    from restcli.runner import RestCli, load_rest_cli_spec

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    if authorization is not None and user is not None:
        raise typer.BadParameter(
            "--authorization and --user are mutually exclusive.", param_hint="'--user'"
        )

    try:
        settings = resolve_settings({"command_name": name, "base_url": base_url})
        debug(f"Loading API document from {spec}")
        rest_cli_spec = load_rest_cli_spec(spec, settings.command_name)
        registry = HookRegistry()
        loaded = registry.discover()
        if loaded:
            debug(f"Hook providers loaded: {', '.join(loaded)}")
        cli = RestCli(
            rest_cli_spec,
            authorization=_select_authorization(authorization, user),
            option_appenders=registry.option_appenders(),
            header_appenders=registry.header_appenders(),
            settings=settings,
        )
    except RestCliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    raise typer.Exit(code=cli.execute(*ctx.args))


def _select_authorization(
    header_value: Optional[str], user_info: Optional[str]
) -> Authorization:
    if header_value is not None:
        return HeaderCredential(header_value)
    if user_info is not None:
        return parse_user_info(user_info)
    return NO_AUTHORIZATION


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from restcli.config import get_data_dir

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = get_data_dir() / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``restcli`` console script.

    :class:`~restcli.exceptions.RestCliError` instances cause a clean exit
    with the error's ``exit_code``. All other exceptions produce a crash log
    and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from restcli.output import error

        if isinstance(exc, RestCliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
