"""Alias graph validation for a single snapshot.

Responsibilities of this stage:
- report alias values whose referenced path does not exist
- report alias chains that loop back on themselves
- skip malformed entries instead of failing the whole snapshot

Findings are returned, never raised; callers decide whether broken aliases or
cycles block acceptance of a snapshot.

Every entry aliases at most one other entry, so the alias graph has out-degree
one and cycle detection reduces to walking chains. The walk keeps an explicit
on-path list, so chain depth never touches the interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, TypeAlias

from tokendiff.domain.model import Entry, Snapshot

from .contracts import BrokenAlias, CircularReference, ValidationResult

if TYPE_CHECKING:
    from tokendiff.domain.model import TokenPath

log = logging.getLogger(__name__)

PathIndex: TypeAlias = "dict[TokenPath, list[tuple[str, Entry]]]"


class ValidateSnapshot(Protocol):
    """Validate alias references of one snapshot."""

    def __call__(self, snapshot: Snapshot) -> ValidationResult: ...


def validate_alias_graph(snapshot: object) -> ValidationResult:
    """Check every alias in ``snapshot`` resolves and no alias chain loops."""

    if not isinstance(snapshot, Snapshot):
        log.warning("Alias validation received %s instead of a snapshot", type(snapshot).__name__)
        return ValidationResult.invalid_format(
            f"expected Snapshot, got {type(snapshot).__name__}"
        )

    warnings: list[str] = []
    entries = _well_formed_entries(snapshot, warnings=warnings)
    index = _build_path_index(entries)

    broken_aliases = _find_broken_aliases(entries, index=index)
    circular_references = _find_circular_references(entries, index=index)

    result = ValidationResult(
        broken_aliases=tuple(broken_aliases),
        circular_references=tuple(circular_references),
        warnings=tuple(warnings),
    )
    log.debug(
        "Validated %d entries: broken=%d circular=%d",
        len(entries),
        len(result.broken_aliases),
        len(result.circular_references),
    )
    return result


def _well_formed_entries(snapshot: Snapshot, *, warnings: list[str]) -> dict[str, Entry]:
    entries: dict[str, Entry] = {}
    for key, entry in snapshot.entries.items():
        if not isinstance(entry, Entry) or not entry.path:
            log.warning("Skipping malformed entry %r", key)
            warnings.append(f"Skipping malformed entry {key!r}")
            continue
        entries[key] = entry
    return entries


def _build_path_index(entries: dict[str, Entry]) -> PathIndex:
    index: PathIndex = {}
    for key, entry in entries.items():
        index.setdefault(entry.path, []).append((key, entry))
    return index


def _resolve(entry: Entry, *, index: PathIndex) -> str | None:
    """Return the key of the entry ``entry`` aliases, preferring its own mode."""

    target = entry.alias_target
    if target is None:
        return None
    candidates = index.get(target)
    if not candidates:
        return None
    for key, candidate in candidates:
        if candidate.mode_key == entry.mode_key:
            return key
    for key, candidate in candidates:
        if candidate.mode == entry.mode:
            return key
    return candidates[0][0]


def _find_broken_aliases(entries: dict[str, Entry], *, index: PathIndex) -> list[BrokenAlias]:
    broken: list[BrokenAlias] = []
    for key, entry in entries.items():
        target = entry.alias_target
        if target is None or target in index or not isinstance(entry.value, str):
            continue
        broken.append(
            BrokenAlias(
                token_path=entry.path,
                token_key=key,
                alias_reference=entry.value,
                reference_path=target,
                collection=entry.collection,
                mode=entry.mode,
            )
        )
    return broken


def _find_circular_references(
    entries: dict[str, Entry], *, index: PathIndex
) -> list[CircularReference]:
    next_key = {key: _resolve(entry, index=index) for key, entry in entries.items()}
    visited: set[str] = set()
    seen_cycles: set[tuple[TokenPath, ...]] = set()
    cycles: list[CircularReference] = []

    for start, entry in entries.items():
        if start in visited or not entry.is_alias:
            continue

        on_path: list[str] = []
        position: dict[str, int] = {}
        current: str | None = start
        while current is not None and current not in visited:
            if current in position:
                cycle_keys = [*on_path[position[current] :], current]
                cycle = tuple(entries[key].path for key in cycle_keys)
                canonical = _canonical_cycle(cycle)
                if canonical not in seen_cycles:
                    seen_cycles.add(canonical)
                    cycles.append(CircularReference(path=cycle))
                break
            position[current] = len(on_path)
            on_path.append(current)
            current = next_key[current]
        visited.update(on_path)

    return cycles


def _canonical_cycle(cycle: tuple[TokenPath, ...]) -> tuple[TokenPath, ...]:
    """Rotate a closed cycle so equal loops found from other modes compare equal."""

    nodes = cycle[:-1]
    pivot = nodes.index(min(nodes))
    return nodes[pivot:] + nodes[:pivot]
