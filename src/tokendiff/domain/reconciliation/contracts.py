"""Shared reconciliation contract components.

This module holds only the result types passed between stages:
- alias validation findings
- match results (entry pairs and structural collection/mode changes)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tokendiff.domain.model import MatchStrategy, StructureKind

if TYPE_CHECKING:
    from tokendiff.domain.model import Entry, ModeKey, TokenPath


@dataclass(frozen=True, slots=True, kw_only=True)
class BrokenAlias:
    """Alias whose referenced path does not exist in the snapshot."""

    token_path: TokenPath
    token_key: str
    alias_reference: str
    reference_path: TokenPath
    collection: str | None = None
    mode: str | None = None

    @property
    def error(self) -> str:
        return f'Referenced token "{self.reference_path}" does not exist'


@dataclass(frozen=True, slots=True, kw_only=True)
class CircularReference:
    """Alias chain that loops back on itself.

    ``path`` repeats the first node at the end, e.g. ``("a", "b", "a")``.
    """

    path: tuple[TokenPath, ...]

    @property
    def error(self) -> str:
        return "Circular reference detected: " + " → ".join(self.path)


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationResult:
    broken_aliases: tuple[BrokenAlias, ...] = ()
    circular_references: tuple[CircularReference, ...] = ()
    warnings: tuple[str, ...] = ()
    format_error: bool = False

    @property
    def error_count(self) -> int:
        return len(self.broken_aliases) + len(self.circular_references) + int(self.format_error)

    @property
    def valid(self) -> bool:
        return self.error_count == 0

    @classmethod
    def invalid_format(cls, reason: str) -> ValidationResult:
        return cls(warnings=(f"Invalid snapshot format: {reason}",), format_error=True)


@dataclass(frozen=True, slots=True)
class MatchedPair:
    """Old and new entry identified as the same token."""

    old: Entry
    new: Entry


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionRename:
    old_name: str
    new_name: str
    collection_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ModeRename:
    """Mode renamed inside ``collection`` (named as in the new snapshot)."""

    collection: str
    old_mode: str
    new_mode: str
    mode_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class StructuralChange:
    """Collection or mode that appeared or disappeared as a whole.

    ``mode`` is ``None`` for collection-level changes.
    """

    kind: StructureKind
    collection: str
    mode: str | None = None
    modes: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        if self.kind is StructureKind.COLLECTION:
            return self.collection
        return f"{self.collection}.{self.mode}"


@dataclass(slots=True, kw_only=True)
class StructureMatch:
    """Collection/mode level outcome of structural analysis."""

    strategy: MatchStrategy
    collection_renames: list[CollectionRename] = field(default_factory=list["CollectionRename"])
    mode_renames: list[ModeRename] = field(default_factory=list["ModeRename"])
    new_structural: list[StructuralChange] = field(default_factory=list["StructuralChange"])
    deleted_structural: list[StructuralChange] = field(
        default_factory=list["StructuralChange"]
    )
    explained_old_keys: set[ModeKey] = field(default_factory=set["ModeKey"])
    explained_new_keys: set[ModeKey] = field(default_factory=set["ModeKey"])
    old_to_new: dict[ModeKey, ModeKey] = field(default_factory=dict["ModeKey", "ModeKey"])

    def translate_old_key(self, key: ModeKey) -> ModeKey:
        """Map an old ``(collection, mode)`` key through inferred renames."""

        return self.old_to_new.get(key, key)

    def old_key_for(self, new_key: ModeKey) -> ModeKey | None:
        for old_key, translated in self.old_to_new.items():
            if translated == new_key:
                return old_key
        return None


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchResult:
    """Entity matcher output consumed by the change classifier."""

    strategy: MatchStrategy
    matched_pairs: tuple[MatchedPair, ...] = ()
    unmatched_old: tuple[Entry, ...] = ()
    unmatched_new: tuple[Entry, ...] = ()
    collection_renames: tuple[CollectionRename, ...] = ()
    mode_renames: tuple[ModeRename, ...] = ()
    new_structural: tuple[StructuralChange, ...] = ()
    deleted_structural: tuple[StructuralChange, ...] = ()
    suppressed_old_keys: frozenset[ModeKey] = frozenset()
    deferred_new: tuple[Entry, ...] = ()
    warnings: tuple[str, ...] = ()
    format_error: bool = False

    @property
    def valid(self) -> bool:
        return not self.format_error

    @classmethod
    def invalid_format(cls, reason: str) -> MatchResult:
        return cls(
            strategy=MatchStrategy.HEURISTIC,
            warnings=(f"Invalid snapshot format: {reason}",),
            format_error=True,
        )
