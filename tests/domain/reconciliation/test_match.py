from __future__ import annotations

from tokendiff.domain.model import MatchStrategy, Snapshot
from tokendiff.domain.reconciliation import match_snapshots

from tests.helpers.baselines import make_entry, make_snapshot


def test_stable_id_pairs_entry_across_path_change() -> None:
    old = make_snapshot(make_entry("a.b", stable_id="V1"))
    new = make_snapshot(make_entry("a.c", stable_id="V1"))

    result = match_snapshots(old, new)

    assert result.strategy is MatchStrategy.ID
    assert [(pair.old.path, pair.new.path) for pair in result.matched_pairs] == [("a.b", "a.c")]
    assert result.unmatched_old == ()
    assert result.unmatched_new == ()


def test_unknown_stable_id_is_new() -> None:
    old = make_snapshot(make_entry("a", stable_id="V1"))
    new = make_snapshot(make_entry("a", stable_id="V1"), make_entry("b", stable_id="V2"))

    result = match_snapshots(old, new)

    assert [entry.path for entry in result.unmatched_new] == ["b"]


def test_stable_id_follows_mode_rename_without_mode_ids() -> None:
    old = make_snapshot(make_entry("a", mode="light", stable_id="V1"))
    new = make_snapshot(make_entry("a", mode="day", stable_id="V1"))

    result = match_snapshots(old, new)

    assert len(result.matched_pairs) == 1
    assert [(r.old_mode, r.new_mode) for r in result.mode_renames] == [("light", "day")]
    assert result.unmatched_new == ()


def test_stable_id_sub_keys_by_mode_id() -> None:
    old = make_snapshot(
        make_entry("a", mode="light", stable_id="V1", collection_id="c1", mode_id="m1"),
        make_entry("a", "#000", mode="dark", stable_id="V1", collection_id="c1", mode_id="m2"),
    )
    new = make_snapshot(
        make_entry("a", mode="day", stable_id="V1", collection_id="c1", mode_id="m1"),
        make_entry("a", "#000", mode="night", stable_id="V1", collection_id="c1", mode_id="m2"),
    )

    result = match_snapshots(old, new)

    pairs = {(pair.old.mode, pair.new.mode) for pair in result.matched_pairs}
    assert pairs == {("light", "day"), ("dark", "night")}
    assert len(result.mode_renames) == 2


def test_known_stable_id_in_new_mode_is_deferred() -> None:
    old = make_snapshot(make_entry("a", mode="light", stable_id="V1"))
    new = make_snapshot(
        make_entry("a", mode="light", stable_id="V1"),
        make_entry("a", "#000", mode="dark", stable_id="V1"),
    )

    result = match_snapshots(old, new)

    assert [entry.mode for entry in result.deferred_new] == ["dark"]
    assert result.unmatched_new == ()
    assert [change.mode for change in result.new_structural] == ["dark"]


def test_heuristic_used_when_either_side_lacks_stable_ids() -> None:
    old = make_snapshot(make_entry("a", stable_id="V1"))
    new = make_snapshot(make_entry("a"))

    result = match_snapshots(old, new)

    assert result.strategy is MatchStrategy.HEURISTIC
    assert len(result.matched_pairs) == 1


def test_mixed_strategy_pairs_entries_without_ids_by_path() -> None:
    old = make_snapshot(make_entry("a", stable_id="V1"), make_entry("b"))
    new = make_snapshot(make_entry("a", stable_id="V1"), make_entry("b", "#000"))

    result = match_snapshots(old, new)

    assert result.strategy is MatchStrategy.MIXED
    assert {pair.new.path for pair in result.matched_pairs} == {"a", "b"}


def test_heuristic_translates_renamed_collection() -> None:
    old = make_snapshot(make_entry("a", collection="base"), make_entry("b", collection="base"))
    new = make_snapshot(make_entry("a", collection="tokens"), make_entry("b", collection="tokens"))

    result = match_snapshots(old, new)

    assert len(result.matched_pairs) == 2
    assert result.unmatched_old == ()
    assert result.unmatched_new == ()


def test_entries_of_new_collection_are_unmatched() -> None:
    old = make_snapshot(make_entry("a", collection="base"), make_entry("b", collection="base"))
    new = make_snapshot(
        make_entry("a", collection="base"),
        make_entry("b", collection="base"),
        make_entry("a", collection="brand"),
    )

    result = match_snapshots(old, new)

    assert len(result.matched_pairs) == 2
    assert [(entry.collection, entry.path) for entry in result.unmatched_new] == [
        ("brand", "a")
    ]


def test_heuristic_pairs_unique_path_across_collections() -> None:
    old = make_snapshot(make_entry("a", collection="base"), make_entry("b", collection="extra"))
    new = make_snapshot(
        make_entry("a", collection="base"),
        make_entry("b", collection="base"),
        make_entry("x", collection="extra"),
    )

    result = match_snapshots(old, new)

    moved = [pair for pair in result.matched_pairs if pair.old.path == "b"]
    assert [(pair.old.collection, pair.new.collection) for pair in moved] == [("extra", "base")]
    assert [entry.path for entry in result.unmatched_new] == ["x"]


def test_heuristic_leaves_ambiguous_paths_unmatched() -> None:
    old = make_snapshot(
        make_entry("a", collection="base"),
        make_entry("a", collection="brand"),
        make_entry("m", collection="misc"),
    )
    new = make_snapshot(
        make_entry("z", collection="base"),
        make_entry("y", collection="brand"),
        make_entry("a", collection="misc"),
        make_entry("m", collection="misc"),
    )

    result = match_snapshots(old, new)

    assert [pair.new.path for pair in result.matched_pairs] == ["m"]
    assert sorted(entry.collection for entry in result.unmatched_old) == ["base", "brand"]



def test_deleted_mode_keys_are_suppressed() -> None:
    old = make_snapshot(make_entry("a", mode="light"), make_entry("a", mode="dark"))
    new = make_snapshot(make_entry("a", mode="light"))

    result = match_snapshots(old, new)

    assert [entry.mode for entry in result.unmatched_old] == ["dark"]
    assert ("base", "dark") in result.suppressed_old_keys


def test_duplicate_stable_id_in_one_mode_is_warned() -> None:
    first = make_entry("a", stable_id="V1")
    duplicate = make_entry("a.copy", stable_id="V1")
    old = Snapshot(entries={"k1": first, "k2": duplicate})
    new = make_snapshot(make_entry("a", stable_id="V1"))

    result = match_snapshots(old, new)

    assert len(result.matched_pairs) == 1
    assert result.warnings
    assert "Duplicate stable id 'V1'" in result.warnings[0]


def test_non_snapshot_input_is_an_invalid_format() -> None:
    result = match_snapshots(make_snapshot(), ["not", "a", "snapshot"])

    assert not result.valid
    assert result.matched_pairs == ()
    assert result.warnings[0].startswith("Invalid snapshot format")


def test_non_snapshot_old_input_is_an_invalid_format() -> None:
    result = match_snapshots(None, make_snapshot())

    assert not result.valid
    assert "old snapshot is NoneType" in result.warnings[0]
