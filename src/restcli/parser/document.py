"""Build an :class:`~restcli.models.ApiDocument` from a raw OpenAPI dict.

This module walks a ``$ref``-resolved document and keeps what the command
generator and the request resolver need: API metadata, servers, and for each
path item its own parameters and its operations with their parameters.
Request and response schemas are not retained.

Path items keep the order in which the document declares them. Operations
on a path item are ordered GET, HEAD, POST, PUT, DELETE, OPTIONS, PATCH,
TRACE. Path-item and operation parameters are kept separate here; they are
combined per operation by :func:`restcli.generator.merge.merge_parameters`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from restcli.exceptions import SpecParseError
from restcli.models import (
    APIInfo,
    ApiDocument,
    HTTPMethod,
    Operation,
    Parameter,
    ParameterLocation,
    PathItem,
    ServerInfo,
)
from restcli.parser.loader import validate_openapi_version
from restcli.parser.resolver import resolve_refs

logger = logging.getLogger(__name__)


def build_document(
    raw_spec: dict[str, Any], openapi_version: Optional[str] = None
) -> ApiDocument:
    """Build the read-only document model from a raw OpenAPI dictionary.

    Args:
        raw_spec: The raw document as returned by
            :func:`~restcli.parser.loader.load_spec`, before ``$ref``
            resolution.
        openapi_version: The already validated version string. When
            omitted it is validated here.

    Returns:
        The populated :class:`~restcli.models.ApiDocument`.

    Raises:
        SpecParseError: If the version is unsupported, a ``$ref`` cannot be
            resolved, or a parameter has no name.
    """
    if openapi_version is None:
        openapi_version = validate_openapi_version(raw_spec)
    spec = resolve_refs(raw_spec)
    return ApiDocument(
        info=_extract_info(spec),
        servers=_extract_servers(spec),
        paths=_extract_paths(spec),
        openapi_version=openapi_version,
    )


def _extract_info(spec: dict[str, Any]) -> APIInfo:
    info = spec.get("info") or {}
    return APIInfo(
        title=info.get("title", "Untitled API"),
        version=str(info.get("version", "0.0.0")),
        summary=info.get("summary"),
        description=info.get("description"),
    )


def _extract_servers(spec: dict[str, Any]) -> tuple[ServerInfo, ...]:
    """Extract server entries, recording each server variable's default."""
    servers: list[ServerInfo] = []
    for server in spec.get("servers") or []:
        if not isinstance(server, dict):
            continue
        variables: dict[str, str] = {}
        for name, variable in (server.get("variables") or {}).items():
            if isinstance(variable, dict) and "default" in variable:
                variables[name] = str(variable["default"])
        servers.append(
            ServerInfo(
                url=server.get("url", "/"),
                description=server.get("description"),
                variables=variables,
            )
        )
    return tuple(servers)


def _extract_paths(spec: dict[str, Any]) -> tuple[PathItem, ...]:
    """Extract every path item with its operations, in document order."""
    items: list[PathItem] = []

    for path, path_item in (spec.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue

        operations: list[Operation] = []
        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue
            operations.append(
                Operation(
                    method=method,
                    operation_id=operation.get("operationId"),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    parameters=_extract_parameters(operation.get("parameters"), path),
                )
            )

        items.append(
            PathItem(
                path=str(path),
                summary=path_item.get("summary"),
                description=path_item.get("description"),
                parameters=_extract_parameters(path_item.get("parameters"), path),
                operations=tuple(operations),
            )
        )

    return tuple(items)


def _extract_parameters(
    params_list: Optional[list[Any]], path: str
) -> tuple[Parameter, ...]:
    """Convert raw parameter dicts into :class:`~restcli.models.Parameter` models.

    A missing list yields no parameters. Parameters with an unrecognised
    ``in`` location are skipped.

    Args:
        params_list: The raw ``parameters`` array, or ``None``.
        path: The owning path pattern, used in messages.

    Returns:
        The parameters in declaration order.

    Raises:
        SpecParseError: If a parameter has no ``name``.
    """
    parameters: list[Parameter] = []

    for param in params_list or []:
        if not isinstance(param, dict):
            continue

        name = param.get("name")
        if not name:
            raise SpecParseError(f"Parameter without a name on path {path}")

        try:
            location = ParameterLocation(param.get("in", "query"))
        except ValueError:
            logger.debug(
                "Skipping parameter %s on %s with unknown location %r",
                name,
                path,
                param.get("in"),
            )
            continue

        parameters.append(
            Parameter(
                name=str(name),
                location=location,
                required=bool(param.get("required", False)),
                description=param.get("description"),
                schema_type=_extract_schema_type(param.get("schema")),
            )
        )

    return tuple(parameters)


def _extract_schema_type(schema: Any) -> Optional[str]:
    """Return the declared schema type, or ``None`` when none is declared.

    OpenAPI 3.1 type arrays (e.g. ``["string", "null"]``) yield their first
    non-null entry.
    """
    if not isinstance(schema, dict):
        return None

    type_value = schema.get("type")
    if type_value is None:
        return None

    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None

    return str(type_value)
