"""Inline internal ``$ref`` JSON Reference pointers.

OpenAPI documents share parameter declarations through pointers such as
``{"$ref": "#/components/parameters/ItemId"}``. :func:`resolve_refs` returns
a deep copy of the document with every internal pointer replaced by its
target, so the document builder only ever sees concrete objects.

Only internal references (``#/...``) are supported. Circular references are
left in place at the cycle point.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from restcli.exceptions import SpecParseError


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Resolve all ``$ref`` pointers in *spec*.

    Args:
        spec: The raw document dictionary, as returned by
            :func:`~restcli.parser.loader.load_spec`.

    Returns:
        A new dictionary with every resolvable ``$ref`` replaced by its
        target object. The input is not modified.

    Raises:
        SpecParseError: If a pointer targets a missing location or is an
            external (non-``#/``) reference.
    """
    root = copy.deepcopy(spec)
    return _deep_resolve(root, root, seen=None)


def _resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Follow a single RFC 6901 pointer such as ``#/components/parameters/Id``."""
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def _deep_resolve(obj: Any, root: dict[str, Any], seen: Optional[set[str]] = None) -> Any:
    """Walk *obj* depth-first, replacing ``$ref`` dicts by their targets.

    *seen* holds the pointers currently on the resolution stack. A fresh set
    is built per branch so sibling references do not interfere.
    """
    if seen is None:
        seen = set()

    if isinstance(obj, dict):
        if "$ref" in obj:
            ref = obj["$ref"]
            if ref in seen:
                return obj
            seen = seen | {ref}
            return _deep_resolve(_resolve_ref(ref, root), root, seen)
        return {key: _deep_resolve(value, root, seen) for key, value in obj.items()}

    if isinstance(obj, list):
        return [_deep_resolve(item, root, seen) for item in obj]

    return obj
