"""Registry entries and snapshots.

An ``Entry`` is one token value at one collection/mode combination. A
``Snapshot`` is the full registry at one point in time, keyed by opaque keys
chosen by the producer. Both are treated as read-only by every stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import ValueType
from .primitives import alias_target, is_alias

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from datetime import datetime

    from .primitives import ModeKey, TokenPath, TokenValue


@dataclass(frozen=True, slots=True, kw_only=True)
class Entry:
    """One token at one collection/mode combination.

    ``stable_id`` survives renames and is shared by the per-mode entries of a
    single variable; ``collection_id``/``mode_id`` play the same role for
    collections and modes.
    """

    path: TokenPath
    collection: str
    mode: str
    value: TokenValue = field(hash=False)
    value_type: ValueType = ValueType.OTHER
    stable_id: str | None = None
    collection_id: str | None = None
    mode_id: str | None = None
    description: str | None = None
    scopes: frozenset[str] = frozenset()
    code_syntax: Mapping[str, str] = field(default_factory=dict["str", "str"], hash=False)

    @property
    def mode_key(self) -> ModeKey:
        return (self.collection, self.mode)

    @property
    def is_alias(self) -> bool:
        return is_alias(self.value)

    @property
    def alias_target(self) -> TokenPath | None:
        return alias_target(self.value)

    @property
    def has_structural_ids(self) -> bool:
        return self.collection_id is not None and self.mode_id is not None

    def to_dict(self) -> dict[str, object]:
        """Serialize to the baseline wire shape, omitting unset optionals."""

        data: dict[str, object] = {}
        if self.stable_id is not None:
            data["variableId"] = self.stable_id
        if self.collection_id is not None:
            data["collectionId"] = self.collection_id
        if self.mode_id is not None:
            data["modeId"] = self.mode_id
        data |= {
            "collection": self.collection,
            "mode": self.mode,
            "path": self.path,
            "value": self.value,
            "type": self.value_type.value,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.scopes:
            data["scopes"] = sorted(self.scopes)
        if self.code_syntax:
            data["codeSyntax"] = dict(self.code_syntax)
        return data


@dataclass(frozen=True, slots=True, kw_only=True)
class SnapshotMetadata:
    synced_at: datetime | None = None
    source: str | None = None


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Immutable registry snapshot: opaque key -> ``Entry`` plus metadata."""

    entries: Mapping[str, Entry] = field(default_factory=dict["str", "Entry"])
    metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries.values())

    def items(self) -> Iterator[tuple[str, Entry]]:
        return iter(self.entries.items())

    @property
    def has_stable_ids(self) -> bool:
        return any(entry.stable_id is not None for entry in self.entries.values())

    @property
    def has_structural_ids(self) -> bool:
        return any(entry.has_structural_ids for entry in self.entries.values())

    @property
    def has_mode_ids(self) -> bool:
        return any(entry.mode_id is not None for entry in self.entries.values())
