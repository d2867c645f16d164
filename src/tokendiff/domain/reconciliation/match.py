"""Entity matching between an old and a new snapshot.

Responsibilities of this stage:
- pair entries that represent the same token across both snapshots
- surface collection/mode renames, additions and deletions
- leave classification of the pairs to the classifier

Two pairing strategies sit behind ``match_snapshots``:
- ``pair_by_stable_id``: identity comes from stable ids only, so a token
  whose path, collection or mode name changed is still one matched pair
- ``pair_by_heuristic``: used for entries without stable ids (or every entry
  when either snapshot lacks them); matches on path after translating names
  through the inferred renames, and only pairs on bare path when the pairing
  is one-to-one
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from tokendiff.domain.model import MatchStrategy, Snapshot

from .contracts import MatchedPair, MatchResult
from .structure import analyze_structure

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from tokendiff.domain.model import Entry, ModeKey, TokenPath

    from .contracts import StructureMatch

log = logging.getLogger(__name__)


class MatchSnapshots(Protocol):
    """Pair entries of two snapshots."""

    def __call__(self, old: Snapshot, new: Snapshot) -> MatchResult: ...


@dataclass(slots=True)
class PairingOutcome:
    """Result of one pairing strategy over a subset of entries."""

    pairs: list[MatchedPair] = field(default_factory=list["MatchedPair"])
    unmatched_old: list[Entry] = field(default_factory=list["Entry"])
    unmatched_new: list[Entry] = field(default_factory=list["Entry"])
    deferred_new: list[Entry] = field(default_factory=list["Entry"])
    warnings: list[str] = field(default_factory=list["str"])

    def extend(self, other: PairingOutcome) -> None:
        self.pairs.extend(other.pairs)
        self.unmatched_old.extend(other.unmatched_old)
        self.unmatched_new.extend(other.unmatched_new)
        self.deferred_new.extend(other.deferred_new)
        self.warnings.extend(other.warnings)


def match_snapshots(
    old: object,
    new: object,
    *,
    analyze: Callable[[Snapshot, Snapshot], StructureMatch] = analyze_structure,
) -> MatchResult:
    """Pair entries of ``old`` and ``new`` and collect structural changes."""

    if not isinstance(old, Snapshot):
        return _invalid_snapshot("old", old)
    if not isinstance(new, Snapshot):
        return _invalid_snapshot("new", new)

    structure = analyze(old, new)
    use_stable_ids = old.has_stable_ids and new.has_stable_ids

    outcome = PairingOutcome()
    if use_stable_ids:
        outcome.extend(
            pair_by_stable_id(
                [entry for entry in old if entry.stable_id is not None],
                [entry for entry in new if entry.stable_id is not None],
                structure=structure,
                use_mode_ids=old.has_mode_ids and new.has_mode_ids,
            )
        )
        heuristic_old = [entry for entry in old if entry.stable_id is None]
        heuristic_new = [entry for entry in new if entry.stable_id is None]
    else:
        heuristic_old = list(old)
        heuristic_new = list(new)

    if heuristic_old or heuristic_new:
        outcome.extend(pair_by_heuristic(heuristic_old, heuristic_new, structure=structure))

    strategy = _strategy_for(
        use_stable_ids=use_stable_ids,
        used_heuristic=bool(heuristic_old or heuristic_new),
    )
    log.debug(
        "Matched snapshots (%s): pairs=%d unmatched_old=%d unmatched_new=%d deferred=%d",
        strategy,
        len(outcome.pairs),
        len(outcome.unmatched_old),
        len(outcome.unmatched_new),
        len(outcome.deferred_new),
    )
    return MatchResult(
        strategy=strategy,
        matched_pairs=tuple(outcome.pairs),
        unmatched_old=tuple(outcome.unmatched_old),
        unmatched_new=tuple(outcome.unmatched_new),
        collection_renames=tuple(structure.collection_renames),
        mode_renames=tuple(structure.mode_renames),
        new_structural=tuple(structure.new_structural),
        deleted_structural=tuple(structure.deleted_structural),
        suppressed_old_keys=frozenset(structure.explained_old_keys),
        deferred_new=tuple(outcome.deferred_new),
        warnings=tuple(outcome.warnings),
    )


def _invalid_snapshot(role: str, snapshot: object) -> MatchResult:
    log.warning("Matcher received %s for the %s snapshot", type(snapshot).__name__, role)
    return MatchResult.invalid_format(
        f"{role} snapshot is {type(snapshot).__name__}, expected Snapshot"
    )


def _strategy_for(*, use_stable_ids: bool, used_heuristic: bool) -> MatchStrategy:
    if not use_stable_ids:
        return MatchStrategy.HEURISTIC
    if used_heuristic:
        return MatchStrategy.MIXED
    return MatchStrategy.ID


def pair_by_stable_id(
    old_entries: Sequence[Entry],
    new_entries: Sequence[Entry],
    *,
    structure: StructureMatch,
    use_mode_ids: bool,
) -> PairingOutcome:
    """Pair entries sharing a stable id, per mode.

    Old entries are grouped by stable id and sub-keyed by mode id (when both
    snapshots carry mode ids) or by mode name. A new entry whose stable id is
    known but whose mode is not is first looked up through the inferred mode
    renames; failing that it is deferred when a new mode or collection
    explains it and reported as new otherwise.
    """

    outcome = PairingOutcome()
    index: dict[str, dict[str, int]] = {}
    for position, entry in enumerate(old_entries):
        if entry.stable_id is None:
            continue
        modes = index.setdefault(entry.stable_id, {})
        mode_key = _id_mode_key(entry, use_mode_ids=use_mode_ids)
        if mode_key in modes:
            log.warning(
                "Duplicate stable id %r for mode %r; ignoring %s",
                entry.stable_id,
                mode_key,
                entry.path,
            )
            outcome.warnings.append(
                f"Duplicate stable id {entry.stable_id!r} for mode {mode_key!r}; "
                f"ignoring {entry.path}"
            )
            continue
        modes[mode_key] = position

    consumed: set[int] = set()
    for new_entry in new_entries:
        modes = index.get(new_entry.stable_id) if new_entry.stable_id is not None else None
        if modes is None:
            outcome.unmatched_new.append(new_entry)
            continue

        position = modes.get(_id_mode_key(new_entry, use_mode_ids=use_mode_ids))
        if position is None and not use_mode_ids:
            old_key = structure.old_key_for(new_entry.mode_key)
            if old_key is not None:
                position = modes.get(old_key[1])

        if position is None or position in consumed:
            if new_entry.mode_key in structure.explained_new_keys:
                outcome.deferred_new.append(new_entry)
            else:
                outcome.unmatched_new.append(new_entry)
            continue

        consumed.add(position)
        outcome.pairs.append(MatchedPair(old_entries[position], new_entry))

    outcome.unmatched_old.extend(
        entry for position, entry in enumerate(old_entries) if position not in consumed
    )
    return outcome


def _id_mode_key(entry: Entry, *, use_mode_ids: bool) -> str:
    if use_mode_ids and entry.mode_id is not None:
        return entry.mode_id
    return entry.mode


def pair_by_heuristic(
    old_entries: Sequence[Entry],
    new_entries: Sequence[Entry],
    *,
    structure: StructureMatch,
) -> PairingOutcome:
    """Pair entries without stable ids by path.

    First pass: identical ``(path, collection, mode)`` after mapping old names
    through the inferred renames. Second pass: identical ``path`` alone, only
    where exactly one old and one new candidate remain and neither side sits in
    a structurally added or deleted mode.
    """

    outcome = PairingOutcome()
    new_index: dict[tuple[TokenPath, str, str], int] = {}
    for position, entry in enumerate(new_entries):
        new_index.setdefault((entry.path, *entry.mode_key), position)

    consumed_old: set[int] = set()
    consumed_new: set[int] = set()

    for old_position, old_entry in enumerate(old_entries):
        target = (old_entry.path, *structure.translate_old_key(old_entry.mode_key))
        new_position = new_index.get(target)
        if new_position is None or new_position in consumed_new:
            continue
        consumed_old.add(old_position)
        consumed_new.add(new_position)
        outcome.pairs.append(MatchedPair(old_entry, new_entries[new_position]))

    _pair_unique_paths(
        old_entries,
        new_entries,
        structure=structure,
        consumed_old=consumed_old,
        consumed_new=consumed_new,
        outcome=outcome,
    )

    outcome.unmatched_old.extend(
        entry for position, entry in enumerate(old_entries) if position not in consumed_old
    )

    known_paths = {
        (structure.translate_old_key(entry.mode_key)[0], entry.path) for entry in old_entries
    }
    for position, entry in enumerate(new_entries):
        if position in consumed_new:
            continue
        if (
            entry.mode_key in structure.explained_new_keys
            and (entry.collection, entry.path) in known_paths
        ):
            outcome.deferred_new.append(entry)
        else:
            outcome.unmatched_new.append(entry)
    return outcome


def _pair_unique_paths(
    old_entries: Sequence[Entry],
    new_entries: Sequence[Entry],
    *,
    structure: StructureMatch,
    consumed_old: set[int],
    consumed_new: set[int],
    outcome: PairingOutcome,
) -> None:
    old_by_path = _positions_by_path(
        old_entries,
        skip=consumed_old,
        excluded_keys=structure.explained_old_keys,
    )
    new_by_path = _positions_by_path(
        new_entries,
        skip=consumed_new,
        excluded_keys=structure.explained_new_keys,
    )
    for path, old_positions in old_by_path.items():
        new_positions = new_by_path.get(path, [])
        if len(old_positions) != 1 or len(new_positions) != 1:
            continue
        old_position, new_position = old_positions[0], new_positions[0]
        consumed_old.add(old_position)
        consumed_new.add(new_position)
        outcome.pairs.append(MatchedPair(old_entries[old_position], new_entries[new_position]))


def _positions_by_path(
    entries: Sequence[Entry],
    *,
    skip: set[int],
    excluded_keys: set[ModeKey],
) -> dict[TokenPath, list[int]]:
    positions: dict[TokenPath, list[int]] = {}
    for position, entry in enumerate(entries):
        if position in skip or entry.mode_key in excluded_keys:
            continue
        positions.setdefault(entry.path, []).append(position)
    return positions
