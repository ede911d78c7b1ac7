"""Build the command tree of a generated CLI from an API document.

This is the core synthesis step of restcli. It turns an
:class:`~restcli.models.ApiDocument` into a three-level tree of
:class:`~restcli.models.CommandNode` objects:

* **root** (depth 0) -- named after the command, carries the infrastructure
  options that do not depend on the document.
* **path** (depth 1) -- one per path pattern, named by the pattern itself,
  braces included (``/items/{id}``).
* **method** (depth 2) -- one per operation present on the path item, named
  by the lower-case method token (``get``, ``post``, ...). Each carries the
  merged parameter table of its operation and one option per parameter.

The tree is built once and never mutated; it can be shared by any number of
invocations. Translating it into Click objects is done separately by
:func:`restcli.generator.click_command.to_click_command`.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Optional

from restcli.exceptions import ConfigurationError
from restcli.generator.merge import merge_parameters
from restcli.generator.naming import option_name, option_value_kind
from restcli.models import (
    ApiDocument,
    CliValueKind,
    CommandNode,
    MergedParameterTable,
    NodeKind,
    Operation,
    OptionSpec,
    ParameterLocation,
    PathItem,
)

# ---------------------------------------------------------------------------
# Infrastructure option names
# ---------------------------------------------------------------------------

COMPLETION_OPTION = "--generate-bash-auto-completion-script"
REQUEST_BODY_OPTION = "--request-body"
STDIN_OPTION = "--stdin"
INPUT_FILE_OPTION = "--input-file"
OUTPUT_FILE_OPTION = "--output-file"
ASSERT_STATUS_OPTION = "--assert-http-status-code"

BODY_SOURCE_OPTIONS = (REQUEST_BODY_OPTION, STDIN_OPTION, INPUT_FILE_OPTION)
"""Mutually exclusive body sources; at most one may be given."""

DEFAULT_EXPECTED_STATUS = 200

HELP_OPTION_NAMES = ("-h", "--help")
VERSION_OPTION_NAMES = ("-V", "--version")

_ROOT_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec(
        name=COMPLETION_OPTION,
        description=(
            "Print a bash completion script, or write it to FILE when given "
            "as --generate-bash-auto-completion-script=FILE."
        ),
        flag_value="",
        param_label="FILE",
    ),
    OptionSpec(
        name=REQUEST_BODY_OPTION,
        description="Send TEXT as the request body.",
        param_label="TEXT",
    ),
    OptionSpec(
        name=STDIN_OPTION,
        value_kind=CliValueKind.FLAG,
        description="Send standard input as the request body.",
        default=False,
    ),
    OptionSpec(
        name=INPUT_FILE_OPTION,
        description="Send the contents of PATH as the request body.",
        param_label="PATH",
    ),
    OptionSpec(
        name=OUTPUT_FILE_OPTION,
        description="Write the response body to PATH instead of standard output.",
        param_label="PATH",
    ),
    OptionSpec(
        name=ASSERT_STATUS_OPTION,
        value_kind=CliValueKind.INTEGER,
        description="Exit with status 1 unless the response has this HTTP status code.",
        default=DEFAULT_EXPECTED_STATUS,
        param_label="CODE",
    ),
)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def build_command_tree(document: ApiDocument, command_name: str) -> CommandNode:
    """Build the root :class:`~restcli.models.CommandNode` for *document*.

    A document without servers builds fine; the missing base URL is only
    reported when a request is resolved.

    Args:
        document: The parsed API document.
        command_name: Name of the root command, shown in usage text.

    Returns:
        The read-only root node.

    Raises:
        ConfigurationError: If a parameter declares an unsupported type, or
            two parameters of one operation synthesize the same option name,
            or a parameter option collides with ``--help``.

    Example::

        root = build_command_tree(document, "items")
        root.children["/items/{id}"].children["get"].option_names()
        # ['--id', '--limit']
    """
    paths: dict[str, CommandNode] = {}
    for item in document.paths:
        paths[item.path] = _build_path_node(item)

    info = document.info
    return CommandNode(
        name=command_name,
        kind=NodeKind.ROOT,
        options=_ROOT_OPTIONS,
        children=MappingProxyType(paths),
        description=info.summary or info.description or info.title,
        version=info.version,
        exclusive_groups=(BODY_SOURCE_OPTIONS,),
    )


def _build_path_node(item: PathItem) -> CommandNode:
    methods: dict[str, CommandNode] = {}
    for operation in item.operations:
        methods[operation.method.value] = _build_method_node(item, operation)

    return CommandNode(
        name=item.path,
        kind=NodeKind.PATH,
        children=MappingProxyType(methods),
        description=item.summary or item.description,
    )


def _build_method_node(item: PathItem, operation: Operation) -> CommandNode:
    table = merge_parameters(item.parameters, operation.parameters)
    return CommandNode(
        name=operation.method.value,
        kind=NodeKind.METHOD,
        options=_build_parameter_options(table, item.path, operation),
        description=operation.summary or operation.description,
        parameters=table,
    )


def _build_parameter_options(
    table: MergedParameterTable, path: str, operation: Operation
) -> tuple[OptionSpec, ...]:
    """Emit one option per ``(name, location)`` entry of *table*.

    Path parameters are always required, whatever the document declares.
    """
    where = f"{operation.method.value.upper()} {path}"
    options: list[OptionSpec] = []
    seen: dict[str, str] = {}

    for name, by_location in table.items():
        for location, param in by_location.items():
            opt_name = option_name(name, location, by_location.keys())
            if opt_name in HELP_OPTION_NAMES:
                raise ConfigurationError(
                    f"{where}: parameter {name!r} in {location.value} "
                    f"collides with {opt_name}"
                )
            owner = f"{name!r} in {location.value}"
            if opt_name in seen:
                raise ConfigurationError(
                    f"{where}: parameters {seen[opt_name]} and {owner} "
                    f"both map to option {opt_name}"
                )
            seen[opt_name] = owner

            try:
                kind = option_value_kind(param.schema_type)
            except ConfigurationError as exc:
                raise ConfigurationError(
                    f"{where}: parameter {name!r} in {location.value}: {exc}"
                ) from exc

            options.append(
                OptionSpec(
                    name=opt_name,
                    value_kind=kind,
                    required=param.required or location == ParameterLocation.PATH,
                    description=_describe(param.description, location),
                    parameter_name=name,
                    location=location,
                )
            )

    return tuple(options)


def _describe(description: Optional[str], location: ParameterLocation) -> str:
    text = (description or "").strip()
    suffix = f"[{location.value}]"
    return f"{text} {suffix}" if text else suffix
