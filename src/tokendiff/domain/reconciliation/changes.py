"""Classified change records and the derived version bump.

Changes borrow the ``Entry`` objects of the compared snapshots; they never
copy or mutate them.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from tokendiff.domain.model import Entry, Severity

if TYPE_CHECKING:
    from tokendiff.domain.model import BumpType, ChangeCategory, TokenPath

ChangeSubject: TypeAlias = Entry | str


@dataclass(frozen=True, slots=True, kw_only=True)
class Change:
    """One detected difference between two snapshots.

    Entry-level changes carry the old/new ``Entry`` in ``before``/``after``;
    collection and mode changes carry the old/new names instead.
    """

    category: ChangeCategory
    severity: Severity
    path: TokenPath
    description: str
    before: ChangeSubject | None = None
    after: ChangeSubject | None = None
    collection: str | None = None
    mode: str | None = None

    @property
    def is_breaking(self) -> bool:
        return self.severity is Severity.BREAKING

    @property
    def old_value(self) -> object:
        return _subject_value(self.before)

    @property
    def new_value(self) -> object:
        return _subject_value(self.after)

    def sort_key(self) -> tuple[int, str, str, str, str]:
        return (
            self.severity.rank,
            self.category.value,
            self.path,
            self.collection or "",
            self.mode or "",
        )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "type": self.severity.value,
            "category": self.category.value,
            "path": self.path,
            "description": self.description,
        }
        if self.before is not None:
            data["before"] = _subject_dict(self.before)
        if self.after is not None:
            data["after"] = _subject_dict(self.after)
        return data


def _subject_value(subject: ChangeSubject | None) -> object:
    if isinstance(subject, Entry):
        return subject.value
    return subject


def _subject_dict(subject: ChangeSubject) -> object:
    if isinstance(subject, Entry):
        return subject.to_dict()
    return subject


@dataclass(frozen=True, slots=True, kw_only=True)
class VersionBump:
    """Version decision derived from a classified change set."""

    current: str
    suggested: str
    change_type: BumpType
    changes: tuple[Change, ...]
    summary: str

    @property
    def breaking_count(self) -> int:
        return self._count(Severity.BREAKING)

    @property
    def addition_count(self) -> int:
        return self._count(Severity.ADDITION)

    @property
    def patch_count(self) -> int:
        return self._count(Severity.PATCH)

    @property
    def counts_by_category(self) -> dict[ChangeCategory, int]:
        return dict(Counter(change.category for change in self.changes))

    def _count(self, severity: Severity) -> int:
        return sum(1 for change in self.changes if change.severity is severity)

    def to_dict(self) -> dict[str, object]:
        return {
            "current": self.current,
            "suggested": self.suggested,
            "changeType": self.change_type.value,
            "breakingCount": self.breaking_count,
            "additionCount": self.addition_count,
            "patchCount": self.patch_count,
            "countsByCategory": {
                category.value: count for category, count in self.counts_by_category.items()
            },
            "summary": self.summary,
            "changes": [change.to_dict() for change in self.changes],
        }
