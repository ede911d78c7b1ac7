"""Request body sources.

A generated command takes its request body from at most one of three
places, in this order of precedence:

1. :class:`LiteralBody` -- ``--request-body TEXT``.
2. :class:`FileBody` -- ``--input-file PATH``, streamed from disk.
3. :class:`StdinBody` -- ``--stdin``, streamed from standard input.

Bodies are opaque bytes; nothing is validated against the document's
request schema. :class:`OpenBody` opens a source for exactly the lifetime
of one HTTP exchange and releases it afterwards, whether the exchange
succeeds or fails.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Union

from restcli.exceptions import RestCliError


@dataclass(frozen=True)
class LiteralBody:
    """Body text given on the command line, sent UTF-8 encoded."""

    text: str


@dataclass(frozen=True)
class FileBody:
    """Body streamed from the file at *path*."""

    path: str


@dataclass(frozen=True)
class StdinBody:
    """Body streamed from *stream*, or the process's binary stdin when ``None``."""

    stream: Optional[BinaryIO] = field(default=None, compare=False)


BodySource = Union[LiteralBody, FileBody, StdinBody]

RequestContent = Union[bytes, BinaryIO]


def select_body_source(
    request_body: Optional[str] = None,
    input_file: Optional[str] = None,
    stdin: bool = False,
    stdin_stream: Optional[BinaryIO] = None,
) -> Optional[BodySource]:
    """Pick the body source from the root options of an invocation.

    The command line already rejects more than one source; when called
    directly, a literal body wins over a file, which wins over stdin.

    Returns:
        The selected source, or ``None`` when the request has no body.
    """
    if request_body is not None:
        return LiteralBody(request_body)
    if input_file is not None:
        return FileBody(input_file)
    if stdin:
        return StdinBody(stdin_stream)
    return None


class OpenBody:
    """Context manager yielding httpx ``content`` for a :class:`BodySource`.

    Files are opened on entry and closed on exit. Standard input is read
    but never closed.

    Example::

        with OpenBody(FileBody("payload.json")) as content:
            client.stream("POST", url, content=content)
    """

    def __init__(self, source: Optional[BodySource]) -> None:
        self._source = source
        self._handle: Optional[BinaryIO] = None

    def __enter__(self) -> Optional[RequestContent]:
        source = self._source
        if isinstance(source, LiteralBody):
            return source.text.encode("utf-8")
        if isinstance(source, FileBody):
            try:
                self._handle = open(source.path, "rb")
            except OSError as exc:
                raise RestCliError(
                    f"Cannot read request body from {source.path}: {exc}"
                ) from exc
            return self._handle
        if isinstance(source, StdinBody):
            if source.stream is not None:
                return source.stream
            return sys.stdin.buffer
        return None

    def __exit__(self, *exc_info: object) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
