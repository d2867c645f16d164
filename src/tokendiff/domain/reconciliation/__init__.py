"""Reconciliation core comparing two registry snapshots.

Layered flow:
1) validate the alias graph of the incoming snapshot
2) analyze collection/mode structure and pair entries across snapshots
3) classify pairs and unpaired entries into breaking/addition/patch changes
4) reduce the change set to a semantic version bump
"""

from __future__ import annotations

from .changes import Change, VersionBump
from .classify import classify_changes
from .contracts import (
    BrokenAlias,
    CircularReference,
    CollectionRename,
    MatchedPair,
    MatchResult,
    ModeRename,
    StructuralChange,
    ValidationResult,
)
from .engine import ReconciliationEngine, ReconciliationReport, default_engine
from .match import match_snapshots
from .validate import validate_alias_graph
from .version import (
    InvalidVersionError,
    SemanticVersion,
    bump_version,
    calculate_version_bump,
    compare_versions,
    parse_version,
)

__all__ = [
    "BrokenAlias",
    "Change",
    "CircularReference",
    "CollectionRename",
    "InvalidVersionError",
    "MatchResult",
    "MatchedPair",
    "ModeRename",
    "ReconciliationEngine",
    "ReconciliationReport",
    "SemanticVersion",
    "StructuralChange",
    "ValidationResult",
    "VersionBump",
    "bump_version",
    "calculate_version_bump",
    "classify_changes",
    "compare_versions",
    "default_engine",
    "match_snapshots",
    "parse_version",
    "validate_alias_graph",
]
