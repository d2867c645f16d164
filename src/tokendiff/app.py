"""Application orchestration entry points."""

from __future__ import annotations

import json
from dataclasses import replace
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from tokendiff.adapters.baseline import (
    CorruptPayloadError,
    InvalidSnapshotFormatError,
    TranslationResult,
    read_chunked,
    snapshot_from_payload,
    snapshot_to_payload,
    write_chunked,
)
from tokendiff.config import get_compare_config
from tokendiff.domain.model import Snapshot
from tokendiff.domain.reconciliation import ValidationResult, default_engine, validate_alias_graph

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from tokendiff.adapters.baseline import ChunkedPayload
    from tokendiff.domain.reconciliation import ReconciliationEngine, ReconciliationReport

log = getLogger(__name__)


def read_baseline_document(path: str | Path) -> object:
    """Read a baseline JSON document without interpreting its structure."""

    source = Path(path)
    text = source.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidSnapshotFormatError(f"{source} is not valid JSON: {exc.msg}") from exc


def load_baseline_file(path: str | Path) -> TranslationResult:
    """Read and translate a baseline JSON document from ``path``."""

    return snapshot_from_payload(read_baseline_document(path), source=str(path))


def _to_snapshot(baseline: object) -> TranslationResult:
    if baseline is None:
        return TranslationResult(snapshot=Snapshot())
    if isinstance(baseline, Snapshot):
        return TranslationResult(snapshot=baseline)
    return snapshot_from_payload(baseline)


def validate_baseline(raw: object) -> ValidationResult:
    """Validate the alias graph of a raw baseline document or snapshot.

    A document without the outer baseline structure yields an invalid result
    instead of an exception.
    """

    try:
        translated = _to_snapshot(raw)
    except InvalidSnapshotFormatError as exc:
        log.warning("Rejecting baseline: %s", exc)
        return ValidationResult.invalid_format(exc.reason)

    result = validate_alias_graph(translated.snapshot)
    if translated.warnings:
        result = replace(result, warnings=translated.warnings + result.warnings)
    return result


def compare_baselines(
    previous: object,
    current: object,
    *,
    current_version: str | None = None,
    engine: ReconciliationEngine | None = None,
) -> ReconciliationReport:
    """Compare two baselines and suggest the next version.

    ``previous`` may be ``None`` for a first sync, in which case every entry
    of ``current`` is an addition.
    """

    effective_engine = engine or default_engine()
    effective_version = current_version or get_compare_config().base_version
    old = _to_snapshot(previous)
    new = _to_snapshot(current)
    log.info(
        "Comparing baselines: previous=%d entries, current=%d entries, version=%s",
        len(old.snapshot),
        len(new.snapshot),
        effective_version,
    )

    report = effective_engine.reconcile(
        old.snapshot,
        new.snapshot,
        current_version=effective_version,
    )
    input_warnings = old.warnings + new.warnings
    if input_warnings:
        report = replace(report, input_warnings=input_warnings)

    log.info(
        "Finished comparison: %s -> %s (%s)",
        report.version.current,
        report.version.suggested,
        report.version.summary,
    )
    return report


def store_baseline(
    store: MutableMapping[str, str],
    baseline: object,
    *,
    key: str | None = None,
    max_chunk_size: int | None = None,
) -> ChunkedPayload:
    """Write ``baseline`` into a size-limited key/value store."""

    config = get_compare_config()
    payload = (
        snapshot_to_payload(baseline)
        if isinstance(baseline, Snapshot)
        else snapshot_to_payload(snapshot_from_payload(baseline).snapshot)
    )
    return write_chunked(
        store,
        key or config.store_key,
        payload,
        max_chunk_size or config.max_chunk_size,
    )


def load_stored_baseline(
    store: MutableMapping[str, str],
    *,
    key: str | None = None,
) -> Snapshot | None:
    """Read the baseline kept in ``store``; ``None`` when absent or unusable."""

    effective_key = key or get_compare_config().store_key
    try:
        raw = read_chunked(store, effective_key)
        if raw is None:
            return None
        return snapshot_from_payload(raw).snapshot
    except (CorruptPayloadError, InvalidSnapshotFormatError) as exc:
        log.warning("Ignoring unusable stored baseline %r: %s", effective_key, exc)
        return None
