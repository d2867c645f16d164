"""Domain primitives: scalar aliases and alias-reference helpers.

Alias values are strings wrapped in curly braces that name another entry's
path, for example ``"{colors.primary}"``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TypeAlias

TokenPath: TypeAlias = str
TokenValue: TypeAlias = str | int | float | bool | None | Mapping[str, object] | Sequence[object]
ModeKey: TypeAlias = tuple[str, str]


def is_alias(value: object) -> bool:
    return (
        isinstance(value, str) and value.startswith("{") and value.endswith("}") and len(value) > 2
    )


def alias_target(value: object) -> TokenPath | None:
    """Return the referenced path of an alias value, ``None`` for literals."""

    if not isinstance(value, str) or not is_alias(value):
        return None
    return value[1:-1]


def values_equal(left: object, right: object) -> bool:
    """Structural equality over JSON-like values.

    Numbers compare by value (``1 == 1.0``) but booleans never equal numbers.
    """

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if isinstance(left, int | float) and isinstance(right, int | float):
        return left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)
    if isinstance(left, list | tuple) and isinstance(right, list | tuple):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right, strict=True)
        )
    return type(left) is type(right) and left == right
