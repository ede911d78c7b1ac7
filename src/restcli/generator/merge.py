"""Combine path-item and operation parameters into one lookup table.

An OpenAPI path item may declare parameters shared by all of its operations,
and each operation may declare its own. A parameter is identified by its
``(name, location)`` pair: an operation parameter replaces the path-item
parameter with the same pair and nothing else. The result is the
:data:`~restcli.models.MergedParameterTable` consumed by the command tree
builder and by the request resolver.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Optional

from restcli.models import MergedParameterTable, Parameter, ParameterLocation


def merge_parameters(
    path_item_params: Optional[Iterable[Parameter]],
    operation_params: Optional[Iterable[Parameter]],
) -> MergedParameterTable:
    """Merge *path_item_params* and *operation_params*, operation entries winning.

    Args:
        path_item_params: Parameters declared on the path item, or ``None``.
        operation_params: Parameters declared on the operation, or ``None``.

    Returns:
        A read-only ``name -> {location -> Parameter}`` mapping. Names and
        locations keep the order in which they were first declared.

    Example::

        >>> table = merge_parameters(item.parameters, operation.parameters)
        >>> table["id"][ParameterLocation.PATH].required
        True
    """
    table: dict[str, dict[ParameterLocation, Parameter]] = {}
    for param in list(path_item_params or ()) + list(operation_params or ()):
        table.setdefault(param.name, {})[param.location] = param
    return MappingProxyType(
        {name: MappingProxyType(by_location) for name, by_location in table.items()}
    )
