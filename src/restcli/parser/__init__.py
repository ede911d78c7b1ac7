"""OpenAPI document parser -- load, resolve ``$ref`` pointers, and build the model.

Typical usage::

    from restcli.parser import build_document, load_spec

    raw = load_spec("openapi.yaml")
    document = build_document(raw)

Sub-modules:

* :mod:`~restcli.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~restcli.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection.
* :mod:`~restcli.parser.document` -- Walks the resolved tree and produces an
  :class:`~restcli.models.ApiDocument`.
"""

from restcli.parser.document import build_document
from restcli.parser.loader import load_spec, parse_spec_text, validate_openapi_version
from restcli.parser.resolver import resolve_refs

__all__ = [
    "build_document",
    "load_spec",
    "parse_spec_text",
    "resolve_refs",
    "validate_openapi_version",
]
