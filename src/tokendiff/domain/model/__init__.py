"""Public domain model surface."""

from __future__ import annotations

from tokendiff.domain.model.entry import Entry, Snapshot, SnapshotMetadata
from tokendiff.domain.model.enums import (
    BumpType,
    ChangeCategory,
    MatchStrategy,
    Severity,
    StructureKind,
    ValueType,
)
from tokendiff.domain.model.primitives import (
    ModeKey,
    TokenPath,
    TokenValue,
    alias_target,
    is_alias,
    values_equal,
)

__all__ = [  # noqa: RUF022
    # entries
    "Entry",
    "Snapshot",
    "SnapshotMetadata",
    # enums
    "BumpType",
    "ChangeCategory",
    "MatchStrategy",
    "Severity",
    "StructureKind",
    "ValueType",
    # primitives
    "ModeKey",
    "TokenPath",
    "TokenValue",
    "alias_target",
    "is_alias",
    "values_equal",
]
