"""Change classification over a match result.

Per matched pair, the first rule that applies wins:
1) path differs        -> renamed (breaking)
2) value type differs  -> type-changed (breaking)
3) value differs       -> alias-changed / value-changed (patch)
4) description differs -> description-changed (patch)

Unmatched entries become deletions (breaking) and additions, unless the
deletion sits in a mode that a structural change already explains.
Structural renames and deletions are breaking; structural additions are
additions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from tokendiff.domain.model import ChangeCategory, Severity, StructureKind, values_equal

from .changes import Change

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tokendiff.domain.model import Entry

    from .contracts import MatchedPair, MatchResult, StructuralChange

log = logging.getLogger(__name__)


class ClassifyChanges(Protocol):
    """Turn a match result into classified changes."""

    def __call__(self, match_result: MatchResult) -> tuple[Change, ...]: ...


def classify_changes(match_result: MatchResult) -> tuple[Change, ...]:
    """Classify every difference in ``match_result``, sorted for display."""

    changes = [
        *_structural_changes(match_result),
        *(change for pair in match_result.matched_pairs if (change := classify_pair(pair))),
        *_deletions(match_result),
        *(_added(entry) for entry in match_result.unmatched_new),
    ]
    changes.sort(key=Change.sort_key)
    log.debug("Classified %d changes", len(changes))
    return tuple(changes)


def classify_pair(pair: MatchedPair) -> Change | None:
    old, new = pair.old, pair.new

    if old.path != new.path:
        return Change(
            category=ChangeCategory.RENAMED,
            severity=Severity.BREAKING,
            path=old.path,
            description=f"Token renamed: {old.path} → {new.path}",
            before=old,
            after=new,
            collection=new.collection,
            mode=new.mode,
        )

    if old.value_type is not new.value_type:
        return Change(
            category=ChangeCategory.TYPE_CHANGED,
            severity=Severity.BREAKING,
            path=new.path,
            description=f"Type changed: {old.value_type} → {new.value_type}",
            before=old,
            after=new,
            collection=new.collection,
            mode=new.mode,
        )

    if not values_equal(old.value, new.value):
        if old.is_alias or new.is_alias:
            category, label = ChangeCategory.ALIAS_CHANGED, "Alias changed"
        else:
            category, label = ChangeCategory.VALUE_CHANGED, "Value updated"
        return Change(
            category=category,
            severity=Severity.PATCH,
            path=new.path,
            description=f"{label}: {_display(old.value)} → {_display(new.value)}",
            before=old,
            after=new,
            collection=new.collection,
            mode=new.mode,
        )

    if old.description != new.description:
        return Change(
            category=ChangeCategory.DESCRIPTION_CHANGED,
            severity=Severity.PATCH,
            path=new.path,
            description=(
                "Description updated: "
                f"{old.description or '(empty)'} → {new.description or '(empty)'}"
            ),
            before=old,
            after=new,
            collection=new.collection,
            mode=new.mode,
        )

    return None


def _deletions(match_result: MatchResult) -> Iterator[Change]:
    suppressed = 0
    for entry in match_result.unmatched_old:
        if entry.mode_key in match_result.suppressed_old_keys:
            suppressed += 1
            continue
        yield Change(
            category=ChangeCategory.DELETED,
            severity=Severity.BREAKING,
            path=entry.path,
            description=f"Token deleted: {entry.path}",
            before=entry,
            collection=entry.collection,
            mode=entry.mode,
        )
    if suppressed:
        log.debug("Suppressed %d deletions explained by mode/collection changes", suppressed)


def _added(entry: Entry) -> Change:
    return Change(
        category=ChangeCategory.ADDED,
        severity=Severity.ADDITION,
        path=entry.path,
        description=f"Token added: {entry.path}",
        after=entry,
        collection=entry.collection,
        mode=entry.mode,
    )


def _structural_changes(match_result: MatchResult) -> Iterator[Change]:
    for rename in match_result.collection_renames:
        yield Change(
            category=ChangeCategory.COLLECTION_RENAMED,
            severity=Severity.BREAKING,
            path=rename.old_name,
            description=f"Collection renamed: {rename.old_name} → {rename.new_name}",
            before=rename.old_name,
            after=rename.new_name,
            collection=rename.new_name,
        )

    for rename in match_result.mode_renames:
        yield Change(
            category=ChangeCategory.MODE_RENAMED,
            severity=Severity.BREAKING,
            path=f"{rename.collection}.{rename.old_mode}",
            description=(
                f"Mode renamed in collection {rename.collection}: "
                f"{rename.old_mode} → {rename.new_mode}"
            ),
            before=rename.old_mode,
            after=rename.new_mode,
            collection=rename.collection,
            mode=rename.new_mode,
        )

    for change in match_result.deleted_structural:
        yield _structural(change, deleted=True)
    for change in match_result.new_structural:
        yield _structural(change, deleted=False)


def _structural(change: StructuralChange, *, deleted: bool) -> Change:
    if change.kind is StructureKind.COLLECTION:
        category = ChangeCategory.COLLECTION_DELETED if deleted else ChangeCategory.COLLECTION_ADDED
        description = f"Collection {'deleted' if deleted else 'added'}: {change.collection}"
    else:
        category = ChangeCategory.MODE_DELETED if deleted else ChangeCategory.MODE_ADDED
        description = (
            f"Mode deleted: {change.mode} from collection {change.collection}"
            if deleted
            else f"Mode added: {change.mode} to collection {change.collection}"
        )
    subject = change.mode if change.kind is StructureKind.MODE else change.collection
    return Change(
        category=category,
        severity=Severity.BREAKING if deleted else Severity.ADDITION,
        path=change.label,
        description=description,
        before=subject if deleted else None,
        after=None if deleted else subject,
        collection=change.collection,
        mode=change.mode,
    )


def _display(value: object) -> str:
    return value if isinstance(value, str) else repr(value)
