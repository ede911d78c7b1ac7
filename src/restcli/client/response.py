"""Response delivery -- route the body to its destination and check the status.

The response body is data, so it is written raw to stdout or to
``--output-file`` and never touches stderr. The status line goes to stderr
through :mod:`restcli.output` in verbose mode.

A status-code assertion never suppresses delivery: the body is always
drained to its destination in full before the status is compared.
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Optional

import httpx

from restcli.exceptions import RestCliError
from restcli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from restcli.output import get_output


def deliver_response(
    response: httpx.Response,
    output_file: Optional[str] = None,
    expected_status: Optional[int] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    """Write the body of *response* and return the exit code.

    Args:
        response: A streamed response whose body has not been read yet.
        output_file: Path to write the body to. ``None`` means *stdout*.
        expected_status: Status code to assert, or ``None`` to skip the check.
        stdout: Binary stream used when *output_file* is ``None``. Defaults
            to the process's binary stdout.

    Returns:
        :data:`~restcli.exit_codes.EXIT_GENERIC_FAILURE` if
        *expected_status* was given and differs from the response status,
        otherwise :data:`~restcli.exit_codes.EXIT_SUCCESS`.

    Raises:
        RestCliError: If *output_file* cannot be written.
    """
    output = get_output()
    output.debug(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())

    if output_file is not None:
        try:
            with open(output_file, "wb") as fh:
                _drain(response, fh)
        except OSError as exc:
            raise RestCliError(f"Cannot write response to {output_file}: {exc}") from exc
        output.info(f"Response body written to {output_file}")
    else:
        stream = stdout if stdout is not None else sys.stdout.buffer
        _drain(response, stream)
        stream.flush()

    if expected_status is not None and response.status_code != expected_status:
        output.error(
            f"Expected HTTP status {expected_status} but received {response.status_code}"
        )
        return EXIT_GENERIC_FAILURE
    return EXIT_SUCCESS


def _drain(response: httpx.Response, sink: BinaryIO) -> None:
    for chunk in response.iter_bytes():
        sink.write(chunk)
