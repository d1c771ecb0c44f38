"""Tests for knockout bracket seeding."""

import pytest

from padelcup.bracket import (
    build_bracket_direct,
    build_bracket_from_groups,
    build_knockout_stage,
    next_power_of_2,
    round_display_name,
    round_key,
    round_label,
    seed_qualifiers,
)
from padelcup.models import Group, Match, MatchScore, MatchStatus, SetScore


def _pairs(round_slots):
    return [(m.team_a_id, m.team_b_id) if m else None for m in round_slots]


def _won_by(match_id, team_a, team_b, winner):
    sets = [SetScore(6, 2), SetScore(6, 2)] if winner == team_a else [SetScore(2, 6), SetScore(2, 6)]
    return Match(
        id=match_id,
        team_a_id=team_a,
        team_b_id=team_b,
        score=MatchScore(sets=sets, winner_id=winner),
        status=MatchStatus.COMPLETED,
    )


def test_next_power_of_2():
    assert next_power_of_2(1) == 1
    assert next_power_of_2(2) == 2
    assert next_power_of_2(3) == 4
    assert next_power_of_2(5) == 8
    assert next_power_of_2(8) == 8
    assert next_power_of_2(9) == 16


def test_round_labels():
    assert round_label(2) == "final"
    assert round_label(4) == "semiFinal"
    assert round_label(8) == "quarterFinal"
    assert round_label(16) == "roundOf16"
    assert round_label(32) == "roundOf32"


def test_round_display_name():
    assert round_display_name(2, "en") == "Final"
    assert round_display_name(4, "es") == "Semifinal"
    assert round_display_name(8, "es") == "Cuartos de final"
    assert round_display_name(32, "en") == "Round of 32"
    assert round_display_name(64, "es") == "Ronda de 64"


def test_direct_bracket_four_teams():
    stage = build_bracket_direct(["X1", "X2", "X3", "X4"])

    assert stage.size == 4
    assert len(stage.rounds) == 2
    assert _pairs(stage.rounds[0]) == [("X1", "X2"), ("X3", "X4")]
    assert round_key(stage, 0) == "semiFinal"
    assert round_key(stage, 1) == "final"
    assert stage.final is None
    assert all(m.round_index == 0 for m in stage.rounds[0])
    assert all(m.status == MatchStatus.SCHEDULED for m in stage.rounds[0])


def test_direct_bracket_eight_teams():
    stage = build_bracket_direct([f"T{i}" for i in range(1, 9)])

    assert [len(r) for r in stage.rounds] == [4, 2, 1]
    assert round_key(stage, 0) == "quarterFinal"
    assert _pairs(stage.rounds[0]) == [("T1", "T2"), ("T3", "T4"), ("T5", "T6"), ("T7", "T8")]
    assert stage.rounds[1] == [None, None]


def test_direct_bracket_three_teams_bye():
    """The unpaired team goes straight to the final."""
    stage = build_bracket_direct(["A", "B", "C"])

    assert stage.entries == ["A", "B", "C", None]
    assert _pairs(stage.rounds[0]) == [("A", "B"), None]
    final = stage.final
    assert final is not None
    assert (final.team_a_id, final.team_b_id) == (None, "C")
    assert final.round_index == 1


def test_direct_bracket_five_teams_bye_skips_empty_branch():
    stage = build_bracket_direct(["T1", "T2", "T3", "T4", "T5"])

    assert stage.size == 8
    assert _pairs(stage.rounds[0]) == [("T1", "T2"), ("T3", "T4"), None, None]
    # T5's semi-final opponent can never exist, so T5 waits in the final
    assert stage.rounds[1] == [None, None]
    assert (stage.final.team_a_id, stage.final.team_b_id) == (None, "T5")


def test_bracket_needs_two_teams():
    with pytest.raises(ValueError, match="fewer than 2"):
        build_bracket_direct(["solo"])
    with pytest.raises(ValueError, match="fewer than 2"):
        build_knockout_stage([None, None])


def test_seed_two_groups_cross():
    entries = seed_qualifiers([["A1", "A2"], ["B1", "B2"]], 2)
    assert entries == ["A1", "B2", "B1", "A2"]

    stage = build_knockout_stage(entries)
    assert _pairs(stage.rounds[0]) == [("A1", "B2"), ("B1", "A2")]
    assert round_key(stage, 0) == "semiFinal"


def test_seed_single_group():
    assert seed_qualifiers([["Q1", "Q2", "Q3", "Q4"]], 4) == ["Q1", "Q4", "Q2", "Q3"]
    assert seed_qualifiers([["Q1", "Q2"]], 2) == ["Q1", "Q2"]


def test_seed_single_group_odd_count():
    entries = seed_qualifiers([["Q1", "Q2", "Q3"]], 3)
    assert entries == ["Q1", "Q3", "Q2", None]

    stage = build_knockout_stage(entries)
    assert _pairs(stage.rounds[0]) == [("Q1", "Q3"), None]
    assert stage.final.team_b_id == "Q2"


def test_seed_four_groups():
    qualifiers = [["A1", "A2"], ["B1", "B2"], ["C1", "C2"], ["D1", "D2"]]
    entries = seed_qualifiers(qualifiers, 2)

    assert entries == ["A1", "B2", "C1", "D2", "B1", "A2", "D1", "C2"]
    stage = build_knockout_stage(entries)
    assert round_key(stage, 0) == "quarterFinal"


def test_seed_other_shapes_in_group_order():
    qualifiers = [["A1", "A2"], ["B1", "B2"], ["C1", "C2"]]
    assert seed_qualifiers(qualifiers, 2) == ["A1", "A2", "B1", "B2", "C1", "C2"]

    qualifiers = [["A1", "A2", "A3"], ["B1", "B2", "B3"]]
    assert seed_qualifiers(qualifiers, 3) == ["A1", "A2", "A3", "B1", "B2", "B3"]


def test_no_rematch_from_two_groups():
    groups = [
        Group(
            id="ga",
            name="Group A",
            team_ids=["a1", "a2"],
            matches=[_won_by("m1", "a1", "a2", "a2")],
        ),
        Group(
            id="gb",
            name="Group B",
            team_ids=["b1", "b2"],
            matches=[_won_by("m2", "b1", "b2", "b1")],
        ),
    ]

    stage = build_bracket_from_groups(groups, 2)

    assert stage.entries == ["a2", "b2", "b1", "a1"]
    group_of = {"a1": "A", "a2": "A", "b1": "B", "b2": "B"}
    for match in stage.rounds[0]:
        assert group_of[match.team_a_id] != group_of[match.team_b_id]


def test_bracket_from_no_groups():
    with pytest.raises(ValueError, match="no groups"):
        build_bracket_from_groups([], 2)
