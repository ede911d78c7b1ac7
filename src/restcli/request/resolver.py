"""Turn a parsed invocation into a concrete HTTP request.

This is the reverse of command-tree synthesis: the matched option values of
one method command are read back, parameter by parameter, and placed where
the API document says they belong.

**Lookup rule.** The value of parameter ``name`` in ``location`` is the
value of ``--{name}`` if given, otherwise of ``--{name}-in-{location}``.

**Assembly order.**

1. Path -- every ``{token}`` is replaced by its percent-encoded value. A
   missing value raises :class:`~restcli.exceptions.PathParameterError`
   and no request is built.
2. Query -- ``name=value`` pairs in declaration order, form-encoded.
   Parameters without a value are omitted; list values repeat the pair.
   An empty query adds no ``?``.
3. Headers -- header parameters, then cookie parameters folded into a
   single ``Cookie`` header, then header appenders, then a
   :class:`~restcli.auth.HeaderCredential`, which replaces any
   ``Authorization`` header set before it.
4. Base URL -- an explicit override, else the first server of the document.
   It must be absolute.
5. User-info -- a :class:`~restcli.auth.UriUserInfo` is written into the
   URI authority last, so it never passes through path or query encoding.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence
from urllib.parse import quote

import httpx

from restcli.auth import Authorization, HeaderCredential, UriUserInfo
from restcli.exceptions import ConfigurationError, InvocationError, PathParameterError
from restcli.generator.naming import bare_option_name, suffixed_option_name
from restcli.models import (
    ApiDocument,
    MergedParameterTable,
    ParameterLocation,
    RestCliSpec,
)
from restcli.request.body import BodySource

if TYPE_CHECKING:
    from restcli.hooks.appenders import HeaderAppender

logger = logging.getLogger(__name__)

_PATH_TOKEN_RE = re.compile(r"\{([^}]+)\}")


@dataclass(frozen=True)
class RequestDescriptor:
    """A fully resolved request, ready for the transport.

    Attributes:
        method: Upper-case HTTP method token.
        url: Absolute URL, user-info included when configured.
        headers: Ordered ``(name, value)`` pairs.
        body: Where the request body comes from, or ``None``.
    """

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: Optional[BodySource] = None

    def header(self, name: str) -> Optional[str]:
        """Return the last value of header *name* (case-insensitive), or ``None``."""
        found = None
        for key, value in self.headers:
            if key.lower() == name.lower():
                found = value
        return found


def resolve_request(
    spec: RestCliSpec,
    authorization: Authorization,
    path: str,
    method: str,
    matched_options: Mapping[str, Any],
    *,
    body: Optional[BodySource] = None,
    header_appenders: Sequence[HeaderAppender] = (),
    base_url: Optional[str] = None,
) -> RequestDescriptor:
    """Resolve the request for *method* on *path*.

    Args:
        spec: The document and its command tree.
        authorization: Credentials applied to the request.
        path: The selected path pattern, e.g. ``/items/{id}``.
        method: The selected method token, e.g. ``get``.
        matched_options: Option values that were given, keyed by option
            name (``--`` included).
        body: The request body source, if any.
        header_appenders: Appenders that may add headers.
        base_url: Overrides the first server of the document.

    Returns:
        The resolved :class:`RequestDescriptor`.

    Raises:
        InvocationError: If *path* or *method* is not in the command tree.
        PathParameterError: If a path placeholder has no value.
        ConfigurationError: If there is no base URL to send the request to.
    """
    table = _parameter_table(spec, path, method)

    resolved_path = resolve_path(path, matched_options)
    query = resolve_query(table, matched_options)

    headers = resolve_headers(table, matched_options)
    for appender in header_appenders:
        produced = appender.get_headers(path, method)
        if produced is None:
            continue
        logger.debug(
            "Header appender fired for %s %s: %d header(s)", method, path, len(produced)
        )
        headers.extend(produced)

    if isinstance(authorization, HeaderCredential):
        headers = [(k, v) for k, v in headers if k.lower() != "authorization"]
        headers.append(("Authorization", authorization.value))

    url = build_url(
        select_base_url(spec.document, base_url), resolved_path, query, authorization
    )
    return RequestDescriptor(
        method=method.upper(),
        url=url,
        headers=tuple(headers),
        body=body,
    )


def _parameter_table(spec: RestCliSpec, path: str, method: str) -> MergedParameterTable:
    path_node = spec.command.children.get(path)
    if path_node is None:
        raise InvocationError(f"Unknown path: {path}")
    method_node = path_node.children.get(method.lower())
    if method_node is None:
        raise InvocationError(f"Unknown method {method} for path {path}")
    return method_node.parameters or {}


def lookup_option(
    options: Mapping[str, Any], name: str, location: ParameterLocation
) -> Any:
    """Return the value given for parameter *name* in *location*, or ``None``."""
    value = options.get(bare_option_name(name))
    if value is None:
        value = options.get(suffixed_option_name(name, location))
    return value


def resolve_path(path: str, options: Mapping[str, Any]) -> str:
    """Substitute every ``{token}`` of *path*, each value as one encoded segment.

    Raises:
        PathParameterError: Listing every token that has no value.
    """
    missing = [
        token
        for token in _PATH_TOKEN_RE.findall(path)
        if lookup_option(options, token, ParameterLocation.PATH) is None
    ]
    if missing:
        raise PathParameterError(path, missing)

    def substitute(match: re.Match[str]) -> str:
        value = lookup_option(options, match.group(1), ParameterLocation.PATH)
        return quote(_join(value, ","), safe="")

    return _PATH_TOKEN_RE.sub(substitute, path)


def resolve_query(table: MergedParameterTable, options: Mapping[str, Any]) -> str:
    """Build the query string (without ``?``) from the query parameters of *table*.

    Encoding is left to :class:`httpx.QueryParams`; pair order is kept.
    """
    pairs: list[tuple[str, str]] = []
    for name, by_location in table.items():
        if ParameterLocation.QUERY not in by_location:
            continue
        value = lookup_option(options, name, ParameterLocation.QUERY)
        if value is None:
            continue
        for item in _as_list(value):
            pairs.append((name, _format(item)))
    return str(httpx.QueryParams(pairs))


def resolve_headers(
    table: MergedParameterTable, options: Mapping[str, Any]
) -> list[tuple[str, str]]:
    """Build headers from the header and cookie parameters of *table*.

    Cookie parameters are combined into one ``Cookie`` header placed after
    all header parameters.
    """
    headers: list[tuple[str, str]] = []
    cookies: list[str] = []
    for name, by_location in table.items():
        if ParameterLocation.HEADER in by_location:
            value = lookup_option(options, name, ParameterLocation.HEADER)
            if value is not None:
                headers.append((name, _join(value, ",")))
        if ParameterLocation.COOKIE in by_location:
            value = lookup_option(options, name, ParameterLocation.COOKIE)
            if value is not None:
                cookies.append(f"{name}={_join(value, ',')}")
    if cookies:
        headers.append(("Cookie", "; ".join(cookies)))
    return headers


def select_base_url(document: ApiDocument, override: Optional[str] = None) -> str:
    """Return the base URL without a trailing slash.

    Raises:
        ConfigurationError: If there is no override and the document lists
            no servers.
    """
    if override:
        return override.rstrip("/")
    if not document.servers:
        raise ConfigurationError(
            "No server specified in the API document; pass a base URL to send requests."
        )
    return document.servers[0].expanded_url().rstrip("/")


def build_url(
    base_url: str,
    resolved_path: str,
    query: str,
    authorization: Authorization,
) -> str:
    """Join base URL, path and query, then apply URI user-info if configured.

    Raises:
        ConfigurationError: If *base_url* has no scheme or host, e.g. a
            relative server URL such as ``/api/v3``.
    """
    url = base_url + resolved_path
    if query:
        url = f"{url}?{query}"
    parsed = httpx.URL(url)
    if not parsed.is_absolute_url:
        raise ConfigurationError(
            f"Base URL '{base_url}' is not absolute; pass a base URL with a scheme and host."
        )
    if isinstance(authorization, UriUserInfo):
        url = str(
            parsed.copy_with(
                username=authorization.username, password=authorization.password
            )
        )
    return url


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _join(value: Any, sep: str) -> str:
    return sep.join(_format(item) for item in _as_list(value))


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
