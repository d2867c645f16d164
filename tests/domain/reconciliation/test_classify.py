from __future__ import annotations

from collections import Counter

from tokendiff.domain.model import ChangeCategory, Entry, Severity, ValueType
from tokendiff.domain.reconciliation import Change, classify_changes, match_snapshots
from tokendiff.domain.reconciliation.classify import classify_pair
from tokendiff.domain.reconciliation.contracts import MatchedPair

from tests.helpers.baselines import make_entry, make_snapshot


def _classify(old: list[Entry], new: list[Entry]) -> list[Change]:
    return list(classify_changes(match_snapshots(make_snapshot(*old), make_snapshot(*new))))


def test_value_change_is_a_patch() -> None:
    changes = _classify(
        [make_entry("colors.primary", "#fff", stable_id="V1")],
        [make_entry("colors.primary", "#eee", stable_id="V1")],
    )

    assert len(changes) == 1
    change = changes[0]
    assert change.category is ChangeCategory.VALUE_CHANGED
    assert change.severity is Severity.PATCH
    assert change.old_value == "#fff"
    assert change.new_value == "#eee"
    assert change.description == "Value updated: #fff → #eee"


def test_rename_emits_one_change_and_no_add_or_delete() -> None:
    changes = _classify(
        [make_entry("a.b", stable_id="V1")],
        [make_entry("a.c", stable_id="V1")],
    )

    assert [change.category for change in changes] == [ChangeCategory.RENAMED]
    assert changes[0].severity is Severity.BREAKING
    assert changes[0].description == "Token renamed: a.b → a.c"


def test_rename_dominates_value_change() -> None:
    change = classify_pair(
        MatchedPair(make_entry("a.b", "#fff"), make_entry("a.c", "#000")),
    )

    assert change is not None
    assert change.category is ChangeCategory.RENAMED


def test_type_change_is_breaking() -> None:
    change = classify_pair(
        MatchedPair(
            make_entry("size", "4", value_type=ValueType.STRING),
            make_entry("size", 4, value_type=ValueType.NUMBER),
        )
    )

    assert change is not None
    assert change.category is ChangeCategory.TYPE_CHANGED
    assert change.is_breaking


def test_alias_on_either_side_is_alias_changed() -> None:
    to_alias = classify_pair(
        MatchedPair(make_entry("link", "#00f"), make_entry("link", "{colors.primary}"))
    )
    retargeted = classify_pair(
        MatchedPair(make_entry("link", "{colors.a}"), make_entry("link", "{colors.b}"))
    )

    assert to_alias is not None
    assert retargeted is not None
    assert to_alias.category is ChangeCategory.ALIAS_CHANGED
    assert retargeted.category is ChangeCategory.ALIAS_CHANGED
    assert retargeted.severity is Severity.PATCH


def test_description_change_is_a_patch() -> None:
    change = classify_pair(
        MatchedPair(
            make_entry("a", description=None),
            make_entry("a", description="Primary brand colour"),
        )
    )

    assert change is not None
    assert change.category is ChangeCategory.DESCRIPTION_CHANGED
    assert change.description == "Description updated: (empty) → Primary brand colour"


def test_structurally_equal_values_are_unchanged() -> None:
    same_number = MatchedPair(
        make_entry("n", 1, value_type=ValueType.NUMBER),
        make_entry("n", 1.0, value_type=ValueType.NUMBER),
    )
    same_mapping = MatchedPair(
        make_entry("s", {"x": 1, "y": [1, 2]}, value_type=ValueType.SHADOW),
        make_entry("s", {"y": [1, 2], "x": 1}, value_type=ValueType.SHADOW),
    )

    assert classify_pair(same_number) is None
    assert classify_pair(same_mapping) is None


def test_boolean_never_equals_number() -> None:
    change = classify_pair(
        MatchedPair(
            make_entry("flag", True, value_type=ValueType.OTHER),
            make_entry("flag", 1, value_type=ValueType.OTHER),
        )
    )

    assert change is not None
    assert change.category is ChangeCategory.VALUE_CHANGED


def test_unmatched_entries_become_deletions_and_additions() -> None:
    changes = _classify(
        [make_entry("a", stable_id="V1"), make_entry("b", stable_id="V2")],
        [make_entry("a", stable_id="V1"), make_entry("c", stable_id="V3")],
    )

    assert [(change.category, change.path, change.severity) for change in changes] == [
        (ChangeCategory.DELETED, "b", Severity.BREAKING),
        (ChangeCategory.ADDED, "c", Severity.ADDITION),
    ]


def test_collection_rename_without_spurious_changes() -> None:
    changes = _classify(
        [
            make_entry("colors.primary", collection="base", stable_id="V1"),
            make_entry("colors.secondary", "#000", collection="base", stable_id="V2"),
        ],
        [
            make_entry("colors.primary", collection="tokens", stable_id="V1"),
            make_entry("colors.secondary", "#000", collection="tokens", stable_id="V2"),
        ],
    )

    assert len(changes) == 1
    assert changes[0].category is ChangeCategory.COLLECTION_RENAMED
    assert (changes[0].before, changes[0].after) == ("base", "tokens")


def test_collection_rename_is_reported_in_match_result() -> None:
    result = match_snapshots(
        make_snapshot(make_entry("colors.primary", collection="base", stable_id="V1")),
        make_snapshot(make_entry("colors.primary", collection="tokens", stable_id="V1")),
    )

    assert [(r.old_name, r.new_name) for r in result.collection_renames] == [("base", "tokens")]
    assert result.unmatched_old == ()
    assert result.unmatched_new == ()


def test_collection_rename_survives_an_added_token() -> None:
    changes = _classify(
        [make_entry("colors.primary", collection="base", stable_id="V1")],
        [
            make_entry("colors.primary", collection="tokens", stable_id="V1"),
            make_entry("colors.secondary", "#000", collection="tokens", stable_id="V2"),
        ],
    )

    assert sorted(change.category for change in changes) == sorted(
        [ChangeCategory.COLLECTION_RENAMED, ChangeCategory.ADDED]
    )
    renamed = next(c for c in changes if c.category is ChangeCategory.COLLECTION_RENAMED)
    assert (renamed.before, renamed.after) == ("base", "tokens")
    added = next(c for c in changes if c.category is ChangeCategory.ADDED)
    assert added.path == "colors.secondary"


def test_mode_rename_suppresses_entry_noise() -> None:
    changes = _classify(
        [make_entry("a", mode="light"), make_entry("b", mode="light")],
        [make_entry("a", mode="day"), make_entry("b", mode="day")],
    )

    assert [change.category for change in changes] == [ChangeCategory.MODE_RENAMED]
    assert changes[0].description == "Mode renamed in collection base: light → day"


def test_deleted_mode_suppresses_entry_deletions() -> None:
    changes = _classify(
        [make_entry("a", mode="light"), make_entry("a", "#000", mode="dark")],
        [make_entry("a", mode="light")],
    )

    assert [(change.category, change.path) for change in changes] == [
        (ChangeCategory.MODE_DELETED, "base.dark")
    ]
    assert changes[0].description == "Mode deleted: dark from collection base"


def test_added_mode_is_one_addition() -> None:
    changes = _classify(
        [make_entry("a", mode="light", stable_id="V1")],
        [
            make_entry("a", mode="light", stable_id="V1"),
            make_entry("a", "#000", mode="dark", stable_id="V1"),
        ],
    )

    assert [(change.category, change.severity) for change in changes] == [
        (ChangeCategory.MODE_ADDED, Severity.ADDITION)
    ]


def test_deleted_collection_is_reported_once() -> None:
    changes = _classify(
        [make_entry("a"), make_entry("spacing.sm", "4px", collection="extra", mode="default")],
        [make_entry("a")],
    )

    assert [(change.category, change.path) for change in changes] == [
        (ChangeCategory.COLLECTION_DELETED, "extra")
    ]


def test_new_collection_reports_collection_and_its_tokens() -> None:
    changes = _classify(
        [make_entry("a")],
        [make_entry("a"), make_entry("spacing.sm", "4px", collection="extra", mode="default")],
    )

    assert [change.category for change in changes] == [
        ChangeCategory.ADDED,
        ChangeCategory.COLLECTION_ADDED,
    ]


def test_output_is_independent_of_input_order() -> None:
    old = [make_entry(f"t{index}", stable_id=f"V{index}") for index in range(5)]
    new = [
        make_entry("t0", "#000", stable_id="V0"),
        make_entry("renamed", stable_id="V1"),
        make_entry("t2", stable_id="V2"),
        make_entry("t5", stable_id="V5"),
        make_entry("t4", "{t0}", stable_id="V4"),
    ]

    forward = _classify(old, new)
    backward = _classify(list(reversed(old)), list(reversed(new)))

    assert [change.to_dict() for change in forward] == [change.to_dict() for change in backward]
    assert [change.severity for change in forward] == sorted(
        (change.severity for change in forward), key=lambda severity: severity.rank
    )


def test_repeated_classification_yields_the_same_change_multiset() -> None:
    old = make_snapshot(
        make_entry("colors.primary", "#fff", stable_id="V1"),
        make_entry("shadow", {"x": 1, "y": 2}, value_type=ValueType.OTHER, stable_id="V2"),
        make_entry("colors.gone", stable_id="V3"),
    )
    new = make_snapshot(
        make_entry("colors.primary", "#eee", stable_id="V1"),
        make_entry("shadow", {"x": 1, "y": 4}, value_type=ValueType.OTHER, stable_id="V2"),
        make_entry("colors.fresh", stable_id="V4"),
    )

    first = Counter(classify_changes(match_snapshots(old, new)))
    second = Counter(classify_changes(match_snapshots(old, new)))

    assert first == second
    assert sum(first.values()) == 4


def test_entries_with_mapping_values_are_hashable() -> None:
    entry = make_entry("shadow", {"x": 1}, value_type=ValueType.OTHER, stable_id="V1")
    twin = make_entry("shadow", {"x": 1}, value_type=ValueType.OTHER, stable_id="V1")

    assert hash(entry) == hash(twin)
    assert {entry, twin} == {entry}
