"""Collection and mode level structural analysis.

Two strategies produce the same ``StructureMatch``:
- ``match_structure_by_id`` keys collections and modes by their stable ids;
  a changed name under a known id is a rename
- ``match_structure_by_heuristic`` works without collection/mode ids; a
  collection that disappeared is paired with the new collection receiving
  all of its surviving stable ids, or failing that with a new collection
  holding an identical token path set, and equal numbers of removed/added
  mode names are paired positionally

The heuristic is deliberately conservative: when counts do not line up it
reports independent deletions and additions. Positional pairing can still
mis-pair several simultaneous renames of equal cardinality.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tokendiff.domain.model import MatchStrategy, StructureKind

from .contracts import CollectionRename, ModeRename, StructuralChange, StructureMatch

if TYPE_CHECKING:
    from tokendiff.domain.model import Snapshot, TokenPath

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CollectionInfo:
    """Collection name and its modes (mode id -> mode name), discovery ordered."""

    name: str
    modes: dict[str, str] = field(default_factory=dict["str", "str"])


def analyze_structure(old: Snapshot, new: Snapshot) -> StructureMatch:
    """Pick the id strategy when both snapshots carry collection/mode ids."""

    if old.has_structural_ids and new.has_structural_ids:
        return match_structure_by_id(old, new)
    return match_structure_by_heuristic(old, new)


def build_collection_maps(snapshot: Snapshot) -> dict[str, CollectionInfo]:
    collections: dict[str, CollectionInfo] = {}
    for entry in snapshot:
        if entry.collection_id is None or entry.mode_id is None:
            continue
        info = collections.setdefault(entry.collection_id, CollectionInfo(name=entry.collection))
        info.modes.setdefault(entry.mode_id, entry.mode)
    return collections


def build_modes_by_collection(snapshot: Snapshot) -> dict[str, list[str]]:
    modes_by_collection: dict[str, list[str]] = {}
    for entry in snapshot:
        modes = modes_by_collection.setdefault(entry.collection, [])
        if entry.mode not in modes:
            modes.append(entry.mode)
    return modes_by_collection


def build_paths_by_collection(snapshot: Snapshot) -> dict[str, frozenset[TokenPath]]:
    paths: dict[str, set[TokenPath]] = {}
    for entry in snapshot:
        paths.setdefault(entry.collection, set()).add(entry.path)
    return {collection: frozenset(members) for collection, members in paths.items()}


def build_stable_ids_by_collection(snapshot: Snapshot) -> dict[str, set[str]]:
    stable_ids: dict[str, set[str]] = {}
    for entry in snapshot:
        if entry.stable_id is not None:
            stable_ids.setdefault(entry.collection, set()).add(entry.stable_id)
    return stable_ids


def build_collections_by_stable_id(snapshot: Snapshot) -> dict[str, set[str]]:
    collections: dict[str, set[str]] = {}
    for entry in snapshot:
        if entry.stable_id is not None:
            collections.setdefault(entry.stable_id, set()).add(entry.collection)
    return collections


def match_structure_by_id(old: Snapshot, new: Snapshot) -> StructureMatch:
    old_collections = build_collection_maps(old)
    new_collections = build_collection_maps(new)
    result = StructureMatch(strategy=MatchStrategy.ID)

    for collection_id, old_info in old_collections.items():
        new_info = new_collections.get(collection_id)
        if new_info is None:
            _record_deleted_collection(result, old_info.name, tuple(old_info.modes.values()))
            continue

        if old_info.name != new_info.name:
            result.collection_renames.append(
                CollectionRename(
                    old_name=old_info.name,
                    new_name=new_info.name,
                    collection_id=collection_id,
                )
            )
        _match_modes_by_id(result, old_info=old_info, new_info=new_info)

    for collection_id, new_info in new_collections.items():
        if collection_id not in old_collections:
            _record_new_collection(result, new_info.name, tuple(new_info.modes.values()))

    _log_structure(result)
    return result


def _match_modes_by_id(
    result: StructureMatch,
    *,
    old_info: CollectionInfo,
    new_info: CollectionInfo,
) -> None:
    for mode_id, old_mode in old_info.modes.items():
        new_mode = new_info.modes.get(mode_id)
        if new_mode is None:
            result.deleted_structural.append(
                StructuralChange(kind=StructureKind.MODE, collection=old_info.name, mode=old_mode)
            )
            result.explained_old_keys.add((old_info.name, old_mode))
            continue

        result.old_to_new[(old_info.name, old_mode)] = (new_info.name, new_mode)
        if old_mode != new_mode:
            result.mode_renames.append(
                ModeRename(
                    collection=new_info.name,
                    old_mode=old_mode,
                    new_mode=new_mode,
                    mode_id=mode_id,
                )
            )
            result.explained_old_keys.add((old_info.name, old_mode))

    for mode_id, new_mode in new_info.modes.items():
        if mode_id not in old_info.modes:
            result.new_structural.append(
                StructuralChange(kind=StructureKind.MODE, collection=new_info.name, mode=new_mode)
            )
            result.explained_new_keys.add((new_info.name, new_mode))


def match_structure_by_heuristic(old: Snapshot, new: Snapshot) -> StructureMatch:
    old_modes = build_modes_by_collection(old)
    new_modes = build_modes_by_collection(new)
    old_paths = build_paths_by_collection(old)
    new_paths = build_paths_by_collection(new)
    old_stable_ids = build_stable_ids_by_collection(old)
    new_collections_by_id = build_collections_by_stable_id(new)
    result = StructureMatch(strategy=MatchStrategy.HEURISTIC)

    old_only = [collection for collection in old_modes if collection not in new_modes]
    unmatched_new = [collection for collection in new_modes if collection not in old_modes]

    for old_collection in old_only:
        partner = _collection_receiving_stable_ids(
            old_stable_ids.get(old_collection, set()),
            candidates=unmatched_new,
            collections_by_stable_id=new_collections_by_id,
        )
        if partner is None:
            partner = _find_renamed_collection(
                old_paths.get(old_collection, frozenset()),
                candidates=unmatched_new,
                paths_by_collection=new_paths,
            )
        if partner is None:
            _record_deleted_collection(result, old_collection, tuple(old_modes[old_collection]))
            continue

        unmatched_new.remove(partner)
        result.collection_renames.append(
            CollectionRename(old_name=old_collection, new_name=partner)
        )
        _match_modes_by_name(
            result,
            old_collection=old_collection,
            new_collection=partner,
            old_modes=old_modes[old_collection],
            new_modes=new_modes[partner],
        )

    for new_collection in unmatched_new:
        _record_new_collection(result, new_collection, tuple(new_modes[new_collection]))

    for collection, modes in old_modes.items():
        if collection in new_modes:
            _match_modes_by_name(
                result,
                old_collection=collection,
                new_collection=collection,
                old_modes=modes,
                new_modes=new_modes[collection],
            )

    _log_structure(result)
    return result


def _collection_receiving_stable_ids(
    stable_ids: set[str],
    *,
    candidates: list[str],
    collections_by_stable_id: dict[str, set[str]],
) -> str | None:
    """New-only collection holding every surviving stable id, if exactly one."""

    targets: set[str] = set()
    for stable_id in stable_ids:
        targets.update(collections_by_stable_id.get(stable_id, ()))
    if len(targets) != 1:
        return None
    target = next(iter(targets))
    return target if target in candidates else None


def _find_renamed_collection(
    old_paths: frozenset[TokenPath],
    *,
    candidates: list[str],
    paths_by_collection: dict[str, frozenset[TokenPath]],
) -> str | None:
    if not old_paths:
        return None
    for candidate in candidates:
        if paths_by_collection.get(candidate) == old_paths:
            return candidate
    return None


def _match_modes_by_name(
    result: StructureMatch,
    *,
    old_collection: str,
    new_collection: str,
    old_modes: list[str],
    new_modes: list[str],
) -> None:
    removed = [mode for mode in old_modes if mode not in new_modes]
    added = [mode for mode in new_modes if mode not in old_modes]

    for mode in old_modes:
        if mode in new_modes and old_collection != new_collection:
            result.old_to_new[(old_collection, mode)] = (new_collection, mode)

    if removed and len(removed) == len(added):
        for old_mode, new_mode in zip(removed, added, strict=True):
            result.mode_renames.append(
                ModeRename(collection=new_collection, old_mode=old_mode, new_mode=new_mode)
            )
            result.old_to_new[(old_collection, old_mode)] = (new_collection, new_mode)
            result.explained_old_keys.add((old_collection, old_mode))
        return

    for mode in removed:
        result.deleted_structural.append(
            StructuralChange(kind=StructureKind.MODE, collection=old_collection, mode=mode)
        )
        result.explained_old_keys.add((old_collection, mode))
    for mode in added:
        result.new_structural.append(
            StructuralChange(kind=StructureKind.MODE, collection=new_collection, mode=mode)
        )
        result.explained_new_keys.add((new_collection, mode))


def _record_deleted_collection(result: StructureMatch, name: str, modes: tuple[str, ...]) -> None:
    result.deleted_structural.append(
        StructuralChange(kind=StructureKind.COLLECTION, collection=name, modes=modes)
    )
    result.explained_old_keys.update((name, mode) for mode in modes)


def _record_new_collection(result: StructureMatch, name: str, modes: tuple[str, ...]) -> None:
    result.new_structural.append(
        StructuralChange(kind=StructureKind.COLLECTION, collection=name, modes=modes)
    )
    result.explained_new_keys.update((name, mode) for mode in modes)


def _log_structure(result: StructureMatch) -> None:
    log.debug(
        "Structure (%s): collection_renames=%d mode_renames=%d new=%d deleted=%d",
        result.strategy,
        len(result.collection_renames),
        len(result.mode_renames),
        len(result.new_structural),
        len(result.deleted_structural),
    )
