"""Synchronous HTTP transport for resolved requests.

:class:`HttpTransport` wraps :class:`httpx.Client` and performs exactly one
exchange per call, with no retry. The request body source is opened just
before the request is sent and released when the response has been
handled, whatever the outcome.

Request failures (connection refused, timeouts, broken streams, undecodable
content, redirect loops) are re-raised as
:class:`~restcli.exceptions.TransportError`.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

import httpx

from restcli.config import RequestConfig
from restcli.exceptions import TransportError
from restcli.request.body import OpenBody
from restcli.request.resolver import RequestDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HttpTransport:
    """Blocking HTTP transport. Must be used as a context manager.

    Args:
        config: Timeout, TLS verification, redirect and User-Agent settings.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        with HttpTransport(RequestConfig()) as transport:
            exit_code = transport.exchange(request, handle_response)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> HttpTransport:
        config = self._config
        self._client = httpx.Client(
            transport=self._transport,
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=config.follow_redirects,
            headers={"User-Agent": config.user_agent},
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def exchange(
        self,
        request: RequestDescriptor,
        handler: Callable[[httpx.Response], T],
    ) -> T:
        """Send *request* and pass the streamed response to *handler*.

        The response body has not been read when *handler* is called; the
        handler is expected to consume it.

        Returns:
            Whatever *handler* returns.

        Raises:
            TransportError: On any request failure, including one raised
                while the handler reads or decodes the body.
        """
        if self._client is None:
            raise RuntimeError("HttpTransport must be used as a context manager")

        logger.info("Request: %s %s", request.method, _redact(request.url))
        logger.debug("Request headers: %s", ", ".join(name for name, _ in request.headers))

        with OpenBody(request.body) as content:
            try:
                with self._client.stream(
                    request.method,
                    request.url,
                    headers=list(request.headers),
                    content=content,
                ) as response:
                    logger.info("Response code: %d", response.status_code)
                    return handler(response)
            except httpx.RequestError as exc:
                raise TransportError(
                    f"{request.method} {_redact(request.url)} failed: {exc}"
                ) from exc


def _redact(url: str) -> str:
    """Return *url* with any password masked."""
    parsed = httpx.URL(url)
    if parsed.password:
        return str(parsed.copy_with(password="***"))
    return url
