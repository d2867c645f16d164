"""Orchestrator for the reconciliation subsystem.

The engine composes stage interfaces but does not prescribe concrete
implementations, so callers can swap a stage (e.g. a stricter matcher) without
touching the rest of the pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .classify import classify_changes
from .match import match_snapshots
from .validate import validate_alias_graph
from .version import calculate_version_bump

if TYPE_CHECKING:
    from tokendiff.domain.model import Snapshot

    from .changes import Change, VersionBump
    from .classify import ClassifyChanges
    from .contracts import MatchResult, ValidationResult
    from .match import MatchSnapshots
    from .validate import ValidateSnapshot
    from .version import CalculateVersionBump

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationReport:
    """Everything one comparison produced."""

    validation: ValidationResult
    match: MatchResult
    changes: tuple[Change, ...]
    version: VersionBump
    input_warnings: tuple[str, ...] = ()

    @property
    def accepted(self) -> bool:
        """True when the new snapshot has a sound alias graph."""

        return self.validation.valid

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.input_warnings + self.validation.warnings + self.match.warnings

    def to_dict(self) -> dict[str, object]:
        return {
            "valid": self.validation.valid,
            "strategy": self.match.strategy.value,
            "brokenAliases": [
                {
                    "tokenPath": broken.token_path,
                    "aliasReference": broken.alias_reference,
                    "referencePath": broken.reference_path,
                    "error": broken.error,
                }
                for broken in self.validation.broken_aliases
            ],
            "circularReferences": [
                {"path": list(cycle.path), "error": cycle.error}
                for cycle in self.validation.circular_references
            ],
            "warnings": list(self.warnings),
            "version": self.version.to_dict(),
        }


@dataclass(slots=True)
class ReconciliationEngine:
    """Run validation, matching, classification and versioning."""

    validate: ValidateSnapshot
    match: MatchSnapshots
    classify: ClassifyChanges
    bump: CalculateVersionBump

    def reconcile(
        self,
        old: Snapshot,
        new: Snapshot,
        *,
        current_version: str,
    ) -> ReconciliationReport:
        """Compare ``old`` against ``new`` starting from ``current_version``."""

        validation = self.validate(new)
        if not validation.valid:
            log.warning(
                "New snapshot has %d broken aliases and %d circular references",
                len(validation.broken_aliases),
                len(validation.circular_references),
            )
        match_result = self.match(old, new)
        changes = self.classify(match_result)
        version = self.bump(current_version, changes)
        return ReconciliationReport(
            validation=validation,
            match=match_result,
            changes=changes,
            version=version,
        )


def default_engine() -> ReconciliationEngine:
    return ReconciliationEngine(
        validate=validate_alias_graph,
        match=match_snapshots,
        classify=classify_changes,
        bump=calculate_version_bump,
    )
