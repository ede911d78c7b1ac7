"""Execution facade -- build a generated CLI once, run it many times.

Typical usage::

    from restcli.auth import HeaderCredential
    from restcli.runner import RestCli, load_rest_cli_spec

    spec = load_rest_cli_spec("openapi.yaml", "items")
    cli = RestCli(spec, authorization=HeaderCredential("Bearer abc123"))
    exit_code = cli.execute("/items/{id}", "get", "--id=42")

Building the :class:`~restcli.models.RestCliSpec` parses the document and
synthesizes the command tree; it is the expensive step and its result is
immutable, so one spec can back any number of :class:`RestCli` objects and
executions.

:meth:`RestCli.execute` never raises for expected failures. Usage errors,
resolution errors and transport errors are printed to stderr and turned into
the exit code it returns.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional, Sequence

import click
import httpx

from restcli.auth import NO_AUTHORIZATION, Authorization
from restcli.client.response import deliver_response
from restcli.client.transport import HttpTransport
from restcli.config import DEFAULT_COMMAND_NAME, Settings
from restcli.exceptions import InvocationError, RestCliError
from restcli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from restcli.generator.click_command import to_click_command
from restcli.generator.command_tree import build_command_tree
from restcli.hooks.appenders import HeaderAppender, OptionAppender
from restcli.models import ApiDocument, Invocation, RestCliSpec
from restcli.output import get_output
from restcli.parser import build_document, load_spec, parse_spec_text
from restcli.request.body import select_body_source
from restcli.request.resolver import resolve_request

logger = logging.getLogger(__name__)


def create_rest_cli_spec(
    text: str, command_name: str = DEFAULT_COMMAND_NAME
) -> RestCliSpec:
    """Build a :class:`~restcli.models.RestCliSpec` from OpenAPI JSON or YAML text.

    Raises:
        SpecParseError: If the text is not a valid OpenAPI 3.x document.
        ConfigurationError: If the command tree cannot be built.
    """
    return _build_spec(build_document(parse_spec_text(text)), command_name)


def load_rest_cli_spec(
    source: str, command_name: str = DEFAULT_COMMAND_NAME
) -> RestCliSpec:
    """Like :func:`create_rest_cli_spec`, reading from a file, URL or ``-``."""
    return _build_spec(build_document(load_spec(source)), command_name)


def _build_spec(document: ApiDocument, command_name: str) -> RestCliSpec:
    return RestCliSpec(
        document=document, command=build_command_tree(document, command_name)
    )


class RestCli:
    """Runs command lines against a :class:`~restcli.models.RestCliSpec`.

    Args:
        spec: The document and its command tree.
        authorization: Credentials applied to every request.
        option_appenders: Extra arguments for matching method commands.
        header_appenders: Extra headers for matching requests.
        settings: Base URL override and transport settings. Defaults to
            :class:`~restcli.config.Settings` defaults.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.
        stdin: Stream read by ``--stdin``. Defaults to the process stdin.
        stdout: Stream receiving the response body. Defaults to the process
            stdout.
    """

    def __init__(
        self,
        spec: RestCliSpec,
        authorization: Authorization = NO_AUTHORIZATION,
        option_appenders: Sequence[OptionAppender] = (),
        header_appenders: Sequence[HeaderAppender] = (),
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
    ) -> None:
        self._spec = spec
        self._authorization = authorization
        self._option_appenders = tuple(option_appenders)
        self._header_appenders = tuple(header_appenders)
        self._settings = settings or Settings(command_name=spec.command.name)
        self._transport = transport
        self._stdin = stdin
        self._stdout = stdout
        self._command: Optional[click.Group] = None

    @property
    def spec(self) -> RestCliSpec:
        return self._spec

    @property
    def command(self) -> click.Group:
        """The Click group of the generated CLI, built on first access."""
        if self._command is None:
            self._command = to_click_command(
                self._spec.command, self.dispatch, self._option_appenders
            )
        return self._command

    def execute(self, *args: str) -> int:
        """Parse *args* as a command line of the generated CLI and run it.

        Returns:
            The process exit code: ``0`` on success, ``1`` on failures after
            parsing (including a failed status assertion), ``2`` on usage
            errors.
        """
        output = get_output()
        try:
            result = self.command.main(
                list(args),
                prog_name=self._spec.command.name,
                standalone_mode=False,
            )
        except click.ClickException as exc:
            exc.show()
            return exc.exit_code
        except click.Abort:
            output.error("Aborted!")
            return EXIT_GENERIC_FAILURE
        except RestCliError as exc:
            output.error(str(exc))
            return exc.exit_code

        if isinstance(result, int):
            return result
        return EXIT_SUCCESS

    def dispatch(self, invocation: Invocation) -> int:
        """Resolve, send and deliver the request described by *invocation*.

        When several paths or methods were selected, the last one is used.

        Raises:
            InvocationError: If no path or no method was selected.
            PathParameterError: If a path placeholder has no value.
            ConfigurationError: If there is no base URL.
            TransportError: On network failures.
        """
        if not invocation.paths:
            raise InvocationError("No path specified.")
        if len(invocation.paths) > 1:
            logger.debug("Multiple paths specified. The last path is used.")
        if not invocation.methods:
            raise InvocationError("No method specified.")
        if len(invocation.methods) > 1:
            logger.debug("Multiple methods specified. The last method is used.")

        path = invocation.paths[-1]
        method = invocation.methods[-1]
        global_options = invocation.global_options

        body = select_body_source(
            request_body=global_options.request_body,
            input_file=global_options.input_file,
            stdin=global_options.stdin,
            stdin_stream=self._stdin,
        )
        request = resolve_request(
            self._spec,
            self._authorization,
            path,
            method,
            invocation.options,
            body=body,
            header_appenders=self._header_appenders,
            base_url=self._settings.base_url,
        )

        with HttpTransport(self._settings.request, transport=self._transport) as transport:
            return transport.exchange(
                request,
                lambda response: deliver_response(
                    response,
                    output_file=global_options.output_file,
                    expected_status=global_options.assert_status,
                    stdout=self._stdout,
                ),
            )


def execute(
    spec: RestCliSpec,
    *args: str,
    authorization: Authorization = NO_AUTHORIZATION,
) -> int:
    """Run one command line against *spec* with default settings.

    Example::

        exit_code = execute(spec, "--output-file=out.json", "/items", "get")
    """
    return RestCli(spec, authorization=authorization).execute(*args)
