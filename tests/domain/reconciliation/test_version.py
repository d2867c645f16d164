from __future__ import annotations

import pytest

from tokendiff.domain.model import BumpType, ChangeCategory, Severity
from tokendiff.domain.reconciliation import (
    Change,
    InvalidVersionError,
    SemanticVersion,
    bump_version,
    calculate_version_bump,
    compare_versions,
    parse_version,
)


def _change(severity: Severity, path: str = "a") -> Change:
    category = {
        Severity.BREAKING: ChangeCategory.DELETED,
        Severity.ADDITION: ChangeCategory.ADDED,
        Severity.PATCH: ChangeCategory.VALUE_CHANGED,
    }[severity]
    return Change(category=category, severity=severity, path=path, description=path)


@pytest.mark.parametrize(
    ("severities", "expected"),
    [
        ((Severity.BREAKING, Severity.ADDITION), BumpType.MAJOR),
        ((Severity.ADDITION, Severity.PATCH), BumpType.MINOR),
        ((Severity.PATCH,), BumpType.PATCH),
        ((), BumpType.NONE),
    ],
)
def test_dominant_severity_selects_bump(
    severities: tuple[Severity, ...], expected: BumpType
) -> None:
    bump = calculate_version_bump("1.5.3", [_change(severity) for severity in severities])

    assert bump.change_type is expected


@pytest.mark.parametrize(
    ("severity", "suggested"),
    [
        (Severity.BREAKING, "2.0.0"),
        (Severity.ADDITION, "1.6.0"),
        (Severity.PATCH, "1.5.4"),
    ],
)
def test_version_arithmetic(severity: Severity, suggested: str) -> None:
    assert calculate_version_bump("1.5.3", [_change(severity)]).suggested == suggested


def test_no_changes_keeps_version() -> None:
    bump = calculate_version_bump("1.5.3", [])

    assert bump.suggested == bump.current == "1.5.3"
    assert bump.summary == "No changes detected"
    assert bump.changes == ()


def test_summary_pluralises_counts() -> None:
    changes = [
        _change(Severity.BREAKING),
        _change(Severity.ADDITION, "b"),
        _change(Severity.ADDITION, "c"),
        _change(Severity.PATCH, "d"),
        _change(Severity.PATCH, "e"),
        _change(Severity.PATCH, "f"),
    ]

    bump = calculate_version_bump("0.1.0", changes)

    assert bump.summary == "1 breaking change, 2 additions, 3 updates"
    assert (bump.breaking_count, bump.addition_count, bump.patch_count) == (1, 2, 3)
    assert bump.counts_by_category == {
        ChangeCategory.DELETED: 1,
        ChangeCategory.ADDED: 2,
        ChangeCategory.VALUE_CHANGED: 3,
    }


def test_version_bump_serialises_camel_case() -> None:
    data = calculate_version_bump("1.0.0", [_change(Severity.PATCH)]).to_dict()

    assert data["changeType"] == "patch"
    assert data["suggested"] == "1.0.1"
    assert data["patchCount"] == 1
    assert data["changes"] == [
        {"type": "patch", "category": "value-changed", "path": "a", "description": "a"}
    ]


@pytest.mark.parametrize("version", ["1.0", "v1.0.0", "1.0.0-beta", "a.b.c", "-1.0.0", ""])
def test_invalid_versions_raise(version: str) -> None:
    with pytest.raises(InvalidVersionError):
        parse_version(version)


def test_invalid_version_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="MAJOR.MINOR.PATCH"):
        calculate_version_bump("latest", [_change(Severity.PATCH)])


def test_parse_and_bump() -> None:
    assert parse_version("10.20.30") == SemanticVersion(10, 20, 30)
    assert bump_version("0.9.9", BumpType.MINOR) == "0.10.0"
    assert bump_version("0.9.9", BumpType.NONE) == "0.9.9"


def test_compare_versions_orders_numerically() -> None:
    assert compare_versions("1.10.0", "1.9.0") > 0
    assert compare_versions("1.0.0", "1.0.0") == 0
    assert compare_versions("0.9.9", "1.0.0") < 0
