"""Request resolution -- from matched option values to an HTTP request.

Sub-modules:

* :mod:`~restcli.request.resolver` -- Path substitution, query and header
  assembly, base URL and authorization.
* :mod:`~restcli.request.body` -- Body sources and their precedence.
"""

from restcli.request.body import (
    BodySource,
    FileBody,
    LiteralBody,
    OpenBody,
    StdinBody,
    select_body_source,
)
from restcli.request.resolver import RequestDescriptor, resolve_request

__all__ = [
    "BodySource",
    "FileBody",
    "LiteralBody",
    "OpenBody",
    "RequestDescriptor",
    "StdinBody",
    "resolve_request",
    "select_body_source",
]
