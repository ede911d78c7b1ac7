"""Option naming and value-kind mapping for API parameters.

**Naming rule.** A parameter name declared in exactly one location becomes
``--{name}``. A name declared in several locations (say ``key`` both in the
path and in the query) becomes ``--{name}-in-{location}`` for *every* one of
its locations, so ``--key-in-path`` and ``--key-in-query``. Suffixing is
all-or-nothing per name.

**Value kinds.** Declared schema types map onto
:class:`~restcli.models.CliValueKind`:

=========  ===============
declared   option kind
=========  ===============
string     ``STRING``
integer    ``INTEGER``
boolean    ``BOOLEAN``
array      ``STRING_LIST``
(none)     ``STRING``
=========  ===============

Any other declared type is rejected with
:class:`~restcli.exceptions.ConfigurationError`.
"""

from __future__ import annotations

from typing import Collection, Optional

from restcli.exceptions import ConfigurationError
from restcli.models import CliValueKind, ParameterLocation

_VALUE_KINDS: dict[str, CliValueKind] = {
    "string": CliValueKind.STRING,
    "integer": CliValueKind.INTEGER,
    "boolean": CliValueKind.BOOLEAN,
    "array": CliValueKind.STRING_LIST,
}


def option_name(
    name: str,
    location: ParameterLocation,
    locations_for_name: Collection[ParameterLocation],
) -> str:
    """Return the option name for the parameter *name* declared in *location*.

    Args:
        name: The API parameter name.
        location: The location of this particular declaration.
        locations_for_name: Every distinct location *name* is declared in
            for the same operation.

    Returns:
        ``--{name}`` or ``--{name}-in-{location}``.
    """
    if len(set(locations_for_name)) > 1:
        return suffixed_option_name(name, location)
    return bare_option_name(name)


def bare_option_name(name: str) -> str:
    return f"--{name}"


def suffixed_option_name(name: str, location: ParameterLocation) -> str:
    return f"--{name}-in-{location.value}"


def option_value_kind(schema_type: Optional[str]) -> CliValueKind:
    """Map a declared schema type to a :class:`~restcli.models.CliValueKind`.

    Raises:
        ConfigurationError: If *schema_type* is declared but not supported.
    """
    if schema_type is None:
        return CliValueKind.STRING
    kind = _VALUE_KINDS.get(schema_type)
    if kind is None:
        raise ConfigurationError(
            f"Unsupported parameter type {schema_type!r}; "
            f"expected one of {', '.join(_VALUE_KINDS)}"
        )
    return kind
