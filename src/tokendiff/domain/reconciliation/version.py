"""Semantic version derivation from a classified change set.

Dominance: breaking -> major, else addition -> minor, else patch -> patch,
else none (version unchanged).
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from tokendiff.domain.model import BumpType, Severity

from .changes import VersionBump

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .changes import Change

log = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class InvalidVersionError(ValueError):
    """Raised when a version string is not ``MAJOR.MINOR.PATCH``."""

    def __init__(self, version: str) -> None:
        super().__init__(f"Invalid version {version!r}; expected MAJOR.MINOR.PATCH")
        self.version = version


@dataclass(frozen=True, slots=True, order=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int

    def bump(self, change_type: BumpType) -> SemanticVersion:
        match change_type:
            case BumpType.MAJOR:
                return SemanticVersion(self.major + 1, 0, 0)
            case BumpType.MINOR:
                return SemanticVersion(self.major, self.minor + 1, 0)
            case BumpType.PATCH:
                return SemanticVersion(self.major, self.minor, self.patch + 1)
            case BumpType.NONE:
                return self

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class CalculateVersionBump(Protocol):
    """Reduce classified changes to a version decision."""

    def __call__(self, current_version: str, changes: Sequence[Change]) -> VersionBump: ...


def parse_version(version: str) -> SemanticVersion:
    match = _VERSION_PATTERN.match(version.strip())
    if match is None:
        raise InvalidVersionError(version)
    major, minor, patch = (int(part) for part in match.groups())
    return SemanticVersion(major, minor, patch)


def compare_versions(left: str, right: str) -> int:
    """Negative if ``left < right``, zero if equal, positive otherwise."""

    a, b = parse_version(left), parse_version(right)
    if a.major != b.major:
        return a.major - b.major
    if a.minor != b.minor:
        return a.minor - b.minor
    return a.patch - b.patch


def bump_version(version: str, change_type: BumpType) -> str:
    """Return ``version`` bumped by ``change_type``; ``none`` returns it unchanged."""

    parsed = parse_version(version)
    if change_type is BumpType.NONE:
        return version
    return str(parsed.bump(change_type))


def dominant_bump(changes: Sequence[Change]) -> BumpType:
    severities = {change.severity for change in changes}
    if Severity.BREAKING in severities:
        return BumpType.MAJOR
    if Severity.ADDITION in severities:
        return BumpType.MINOR
    if Severity.PATCH in severities:
        return BumpType.PATCH
    return BumpType.NONE


def summarize(*, breaking: int, additions: int, patches: int) -> str:
    parts: list[str] = []
    if breaking:
        parts.append(f"{breaking} breaking change{'s' if breaking != 1 else ''}")
    if additions:
        parts.append(f"{additions} addition{'s' if additions != 1 else ''}")
    if patches:
        parts.append(f"{patches} update{'s' if patches != 1 else ''}")
    return ", ".join(parts) or "No changes detected"


def calculate_version_bump(current_version: str, changes: Sequence[Change]) -> VersionBump:
    """Derive the suggested next version for ``changes`` from ``current_version``."""

    change_type = dominant_bump(changes)
    suggested = bump_version(current_version, change_type)
    counts = Counter(change.severity for change in changes)
    summary = summarize(
        breaking=counts[Severity.BREAKING],
        additions=counts[Severity.ADDITION],
        patches=counts[Severity.PATCH],
    )
    log.info("Version %s -> %s (%s): %s", current_version, suggested, change_type, summary)
    return VersionBump(
        current=current_version,
        suggested=suggested,
        change_type=change_type,
        changes=tuple(changes),
        summary=summary,
    )
