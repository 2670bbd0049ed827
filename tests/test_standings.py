"""
Unit tests for group standings and qualifier selection
"""
from types import SimpleNamespace

import pytest

from models.match import MatchStatus
from models.round import RoundType
from services.standings_service import compute_standings, load_standings, select_qualifiers, sort_key


def _group(id, name):
    return SimpleNamespace(id=id, name=name)


def _team(id, name, group_id):
    return SimpleNamespace(id=id, name=name, group_id=group_id)


def _match(team1_id, team2_id, score1, score2, status=MatchStatus.FINISHED, round_id=1):
    return SimpleNamespace(team1_id=team1_id, team2_id=team2_id, score1=score1, score2=score2,
                           status=status, round_id=round_id)


def _names(rows):
    return [row.name for row in rows]


def test_example_tournament_standings(two_groups):
    """Two groups of three with one tie in each group"""
    table = load_standings(two_groups.db)

    group_a = table.groups["A"]
    group_b = table.groups["B"]
    # T3 and T1 both have one win; T3 has the better difference (+15 vs +11)
    assert _names(group_a) == ["T3", "T1", "T2"]
    assert _names(group_b) == ["T4", "T6", "T5"]

    t1 = next(row for row in group_a if row.name == "T1")
    assert (t1.played, t1.wins, t1.losses) == (2, 1, 0)
    assert (t1.points_for, t1.points_against, t1.diff) == (36, 25, 11)
    assert t1.ppg == pytest.approx(18.0)

    # Group winners, then the runner-up with the best points per game (T1 18.0 vs T6 13.5)
    assert _names(table.qualifiers) == ["T3", "T4", "T1"]
    assert table.ready_for_semifinals is False


def test_wins_count_only_decisive_matches():
    groups = [_group(1, "A")]
    teams = [_team(1, "T1", 1), _team(2, "T2", 1), _team(3, "T3", 1)]
    matches = [
        _match(1, 2, 21, 10),
        _match(2, 3, 15, 15),
        _match(1, 3, 7, 21),
        _match(3, 2, 0, 0),
    ]

    rows = compute_standings(groups, teams, matches).groups["A"]

    decisive = len([m for m in matches if m.score1 != m.score2])
    assert sum(row.wins for row in rows) == decisive
    assert sum(row.losses for row in rows) == decisive
    assert sum(row.played for row in rows) == 2 * len(matches)


def test_derived_fields_are_consistent():
    groups = [_group(1, "A")]
    teams = [_team(1, "T1", 1), _team(2, "T2", 1), _team(3, "Idle", 1)]
    matches = [_match(1, 2, 21, 19), _match(2, 1, 21, 12)]

    for row in compute_standings(groups, teams, matches).groups["A"]:
        assert row.diff == row.points_for - row.points_against
        if row.played:
            assert row.ppg == pytest.approx(row.points_for / row.played)
        else:
            assert row.ppg == 0


def test_ordering_wins_then_diff_then_ppg():
    groups = [_group(1, "A")]
    teams = [_team(i, f"T{i}", 1) for i in range(1, 6)]
    matches = [
        # T1: two wins
        _match(1, 5, 21, 0), _match(1, 4, 21, 20),
        # T2 and T3: one win each, equal diff, T3 scores more per game
        _match(2, 4, 10, 5), _match(3, 5, 30, 25),
        # T4 and T5 only lose
    ]

    rows = compute_standings(groups, teams, matches).groups["A"]
    assert _names(rows) == ["T1", "T3", "T2", "T4", "T5"]

    keys = [sort_key(row) for row in rows]
    assert keys == sorted(keys)


def test_full_tie_keeps_team_order():
    groups = [_group(1, "A")]
    teams = [_team(1, "First", 1), _team(2, "Second", 1)]

    rows = compute_standings(groups, teams, [_match(1, 2, 11, 11)]).groups["A"]
    assert _names(rows) == ["First", "Second"]


def test_unfinished_and_bracket_matches_are_ignored():
    groups = [_group(1, "A")]
    teams = [_team(1, "T1", 1), _team(2, "T2", 1)]
    rounds = [SimpleNamespace(id=1, type=RoundType.GROUP), SimpleNamespace(id=2, type=RoundType.SEMI)]
    matches = [
        _match(1, 2, 21, 10, status=MatchStatus.ACTIVE),
        _match(1, 2, 21, 10, round_id=2),
        _match(2, 1, 21, 10, round_id=1),
    ]

    rows = compute_standings(groups, teams, matches, rounds).groups["A"]
    t1 = next(row for row in rows if row.name == "T1")
    assert t1.played == 1
    assert t1.wins == 0


def test_ungrouped_teams_are_left_out():
    groups = [_group(1, "A")]
    teams = [_team(1, "T1", 1), _team(2, "Floater", None), _team(3, "Lost", 99)]

    table = compute_standings(groups, teams, [])
    assert _names(table.groups["A"]) == ["T1"]
    # A team pointing at a missing group lands in the unnamed bucket
    assert _names(table.groups[""]) == ["Lost"]
    assert all(row.name != "Floater" for rows in table.groups.values() for row in rows)


def test_qualifier_count_is_groups_plus_one():
    groups = [_group(1, "A"), _group(2, "B"), _group(3, "C")]
    teams = [_team(i, f"T{i}", (i - 1) // 2 + 1) for i in range(1, 7)]

    table = compute_standings(groups, teams, [])
    assert len(table.qualifiers) == len(groups) + 1
    assert table.ready_for_semifinals is True


def test_best_runner_up_by_points_per_game():
    groups = [_group(1, "A"), _group(2, "B")]
    teams = [_team(1, "A1", 1), _team(2, "A2", 1), _team(3, "B1", 2), _team(4, "B2", 2)]
    matches = [_match(1, 2, 21, 19), _match(3, 4, 21, 5)]

    table = compute_standings(groups, teams, matches)
    assert _names(table.qualifiers) == ["A1", "B1", "A2"]


def test_select_qualifiers_handles_small_groups():
    groups = [_group(1, "A"), _group(2, "B")]
    teams = [_team(1, "Solo", 1), _team(2, "B1", 2), _team(3, "B2", 2)]

    qualifiers = select_qualifiers(compute_standings(groups, teams, []).groups)
    assert _names(qualifiers) == ["Solo", "B1", "B2"]


def test_empty_group_contributes_nothing():
    table = compute_standings([_group(1, "A")], [], [])
    assert table.groups == {"A": []}
    assert table.qualifiers == []
