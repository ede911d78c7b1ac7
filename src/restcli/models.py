"""Canonical data models shared across restcli modules.

The models fall into three groups:

**API document models** -- produced by :mod:`restcli.parser` and read by the
generator and the request resolver. They are frozen Pydantic models:
:class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
:class:`Operation`, :class:`PathItem`, :class:`ServerInfo`,
:class:`APIInfo` and :class:`ApiDocument`.

**Command tree models** -- synthesized once by
:func:`restcli.generator.build_command_tree` and never mutated afterwards:
:class:`CliValueKind`, :class:`NodeKind`, :class:`OptionSpec`,
:class:`CommandNode` and :class:`RestCliSpec`.

**Invocation models** -- the transient parse result of one command line:
:class:`GlobalOptions` and :class:`Invocation`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- API document ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on OpenAPI path-item objects.

    Definition order is the order in which method sub-commands are built.
    """

    GET = "get"
    HEAD = "head"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    OPTIONS = "options"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single parameter declared on a path item or an operation.

    ``schema_type`` keeps the declared ``schema.type`` exactly as written in
    the document (``None`` when the document does not declare one). It is
    validated only when the command tree is built, see
    :func:`restcli.generator.naming.option_value_kind`.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_type: Optional[str] = None


class Operation(BaseModel):
    """One HTTP method's behaviour on a path item."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: tuple[Parameter, ...] = ()


class PathItem(BaseModel):
    """The operations and shared parameters declared for one path pattern."""

    model_config = ConfigDict(frozen=True)

    path: str
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: tuple[Parameter, ...] = ()
    operations: tuple[Operation, ...] = ()

    def operation(self, method: HTTPMethod | str) -> Optional[Operation]:
        """Return the operation for *method*, or ``None`` if the path item has none."""
        if not isinstance(method, HTTPMethod):
            method = HTTPMethod(method.lower())
        for operation in self.operations:
            if operation.method == method:
                return operation
        return None


class ServerInfo(BaseModel):
    """A server entry from the document's ``servers`` array.

    ``variables`` maps each server variable to its default value.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None
    variables: dict[str, str] = Field(default_factory=dict)

    def expanded_url(self) -> str:
        """Return :attr:`url` with every ``{variable}`` replaced by its default."""
        url = self.url
        for name, default in self.variables.items():
            url = url.replace("{" + name + "}", default)
        return url


class APIInfo(BaseModel):
    """API metadata from the document's *Info Object*."""

    model_config = ConfigDict(frozen=True)

    title: str = "Untitled API"
    version: str = "0.0.0"
    summary: Optional[str] = None
    description: Optional[str] = None


class ApiDocument(BaseModel):
    """Parsed, read-only representation of an OpenAPI document.

    Produced by :func:`restcli.parser.build_document`. Path items keep the
    order in which the document declares them; the first server is the
    authoritative base URL.
    """

    model_config = ConfigDict(frozen=True)

    info: APIInfo = Field(default_factory=APIInfo)
    servers: tuple[ServerInfo, ...] = ()
    paths: tuple[PathItem, ...] = ()
    openapi_version: str = "3.0.0"

    def path_item(self, path: str) -> Optional[PathItem]:
        """Return the path item declared for *path*, or ``None``."""
        for item in self.paths:
            if item.path == path:
                return item
        return None


MergedParameterTable = Mapping[str, Mapping[ParameterLocation, Parameter]]
"""Read-only ``name -> {location -> Parameter}`` table of one operation."""


# --- Command tree ---


class CliValueKind(str, enum.Enum):
    """Value kinds understood by the command-line layer."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING_LIST = "string_list"
    FLAG = "flag"


class NodeKind(str, enum.Enum):
    """Depth of a :class:`CommandNode`: root (0), path (1) or method (2)."""

    ROOT = "root"
    PATH = "path"
    METHOD = "method"


@dataclass(frozen=True)
class OptionSpec:
    """A command-line option attached to a :class:`CommandNode`.

    Options synthesized from API parameters carry ``parameter_name`` and
    ``location``; infrastructure options leave both ``None``.

    Attributes:
        name: The long option name, including the leading ``--``.
        value_kind: How the option value is parsed.
        required: Whether the argument parser must reject a command line
            that omits the option.
        description: Help text.
        parameter_name: Original API parameter name.
        location: Original API parameter location.
        default: Value reported when the option is absent.
        flag_value: Value used when the option is given without a value.
            ``None`` means a value is mandatory.
        param_label: Placeholder shown in usage text.
    """

    name: str
    value_kind: CliValueKind = CliValueKind.STRING
    required: bool = False
    description: Optional[str] = None
    parameter_name: Optional[str] = None
    location: Optional[ParameterLocation] = None
    default: Any = None
    flag_value: Any = None
    param_label: Optional[str] = None


@dataclass(frozen=True)
class CommandNode:
    """A node of the synthesized command hierarchy.

    The root node is named after the command, path nodes after the path
    pattern (braces included) and method nodes after the lower-case HTTP
    method. Method nodes have no children and carry the
    :data:`MergedParameterTable` their options were derived from.
    """

    name: str
    kind: NodeKind
    options: tuple[OptionSpec, ...] = ()
    children: Mapping[str, CommandNode] = field(
        default_factory=lambda: MappingProxyType({})
    )
    description: Optional[str] = None
    version: Optional[str] = None
    parameters: Optional[MergedParameterTable] = None
    exclusive_groups: tuple[tuple[str, ...], ...] = ()

    def option(self, name: str) -> Optional[OptionSpec]:
        """Return the option called *name* (``--`` included), or ``None``."""
        for spec in self.options:
            if spec.name == name:
                return spec
        return None

    def option_names(self) -> list[str]:
        """Return the names of all options in declaration order."""
        return [spec.name for spec in self.options]


@dataclass(frozen=True)
class RestCliSpec:
    """An API document together with the command tree built from it.

    Building is the expensive step; a spec can be reused for any number of
    :class:`~restcli.runner.RestCli` executions.
    """

    document: ApiDocument
    command: CommandNode


# --- Invocation ---


@dataclass(frozen=True)
class GlobalOptions:
    """Root-level option values of one invocation.

    ``assert_status`` is ``None`` unless the caller passed
    ``--assert-http-status-code`` explicitly.
    """

    request_body: Optional[str] = None
    stdin: bool = False
    input_file: Optional[str] = None
    output_file: Optional[str] = None
    assert_status: Optional[int] = None


@dataclass(frozen=True)
class Invocation:
    """The parse result handed to the request resolution engine.

    Attributes:
        paths: Path sub-commands in the order they were selected.
        methods: Method sub-commands selected under the last path.
        options: Matched option values keyed by option name (``--`` included).
            Options that were not given are absent.
        global_options: Root-level option values.
    """

    paths: tuple[str, ...] = ()
    methods: tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    global_options: GlobalOptions = field(default_factory=GlobalOptions)
