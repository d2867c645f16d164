"""Translate baseline payloads into domain snapshots and back.

The outer document must be well formed; individual entries that fail
validation are skipped with a warning so one bad token never blocks a
comparison.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from tokendiff.domain.model import Entry, Snapshot, SnapshotMetadata, ValueType

from .schema import BaselinePayload, EntryPayload

if TYPE_CHECKING:
    from datetime import datetime

log = getLogger(__name__)


class InvalidSnapshotFormatError(ValueError):
    """Raised when a payload lacks the outer baseline structure."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid snapshot format: {reason}")
        self.reason = reason


@dataclass(frozen=True, slots=True)
class TranslationResult:
    snapshot: Snapshot
    warnings: tuple[str, ...] = ()


def snapshot_from_payload(raw: object, *, source: str | None = None) -> TranslationResult:
    """Build a ``Snapshot`` from an already-deserialized baseline document."""

    if isinstance(raw, BaselinePayload):
        payload = raw
    else:
        if not isinstance(raw, Mapping):
            raise InvalidSnapshotFormatError(f"expected an object, got {type(raw).__name__}")
        try:
            payload = BaselinePayload.model_validate(raw)
        except ValidationError as exc:
            raise InvalidSnapshotFormatError("missing or non-object 'baseline' map") from exc

    entries: dict[str, Entry] = {}
    warnings: list[str] = []
    for key, raw_entry in payload.baseline.items():
        try:
            entries[key] = parse_entry(raw_entry)
        except ValidationError as exc:
            log.warning("Skipping malformed entry %r: %d validation errors", key, exc.error_count())
            warnings.append(f"Skipping malformed entry {key!r}")

    metadata = SnapshotMetadata(
        synced_at=payload.metadata.synced_at,
        source=payload.metadata.source or source,
    )
    log.debug("Translated %d of %d baseline entries", len(entries), len(payload.baseline))
    return TranslationResult(
        snapshot=Snapshot(entries=entries, metadata=metadata),
        warnings=tuple(warnings),
    )


def parse_entry(raw: object) -> Entry:
    payload = raw if isinstance(raw, EntryPayload) else EntryPayload.model_validate(raw)
    return Entry(
        path=payload.path,
        collection=payload.collection,
        mode=payload.mode,
        value=payload.value,
        value_type=ValueType.parse(payload.value_type),
        stable_id=payload.stable_id,
        collection_id=payload.collection_id,
        mode_id=payload.mode_id,
        description=payload.description,
        scopes=frozenset(payload.scopes),
        code_syntax=dict(payload.code_syntax),
    )


def snapshot_to_payload(
    snapshot: Snapshot,
    *,
    synced_at: datetime | None = None,
) -> dict[str, object]:
    """Serialize ``snapshot`` to the baseline document shape."""

    metadata: dict[str, object] = {}
    when = synced_at or snapshot.metadata.synced_at
    if when is not None:
        metadata["syncedAt"] = when.isoformat()
    if snapshot.metadata.source is not None:
        metadata["source"] = snapshot.metadata.source
    return {
        "baseline": {key: entry.to_dict() for key, entry in snapshot.items()},
        "metadata": metadata,
    }
