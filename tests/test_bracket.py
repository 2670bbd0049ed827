"""
Unit tests for semifinal and final generation
"""
from types import SimpleNamespace

import pytest

from api.crud.round_crud import get_round_matches, get_rounds
from core.exceptions import (
    InsufficientQualifiers, InvalidSemifinalResult, SemifinalsNotFinished, SemifinalUndecided
)
from models.match import Match, MatchStatus
from models.round import RoundStatus, RoundType
from services.bracket_service import (
    final_pairing, generate_final, generate_semifinals, match_winner, semifinal_pairings
)
from services.round_lifecycle import finish_round, start_round


@pytest.fixture
def three_groups(builder):
    """A1 21-10 A2, B1 21-15 B2, C1 21-5 C2; qualifiers are A1, B1, C1, B2"""
    for group in ("A", "B", "C"):
        builder.group(group)
        builder.team(f"{group}1", group)
        builder.team(f"{group}2", group)

    db_round = builder.round(1)
    for court, (group, loser_score) in enumerate([("A", 10), ("B", 15), ("C", 5)], start=1):
        match = builder.match(db_round, court, f"{group}1", f"{group}2")
        builder.score(match, 21, loser_score)
    start_round(builder.db, db_round.id)
    finish_round(builder.db, db_round.id)
    return builder


def _play(builder, db_round, scores):
    start_round(builder.db, db_round.id)
    for match, (score1, score2) in zip(get_round_matches(builder.db, db_round.id), scores):
        builder.score(match, score1, score2)
    return finish_round(builder.db, db_round.id)


def test_semifinal_pairing_is_one_v_four_and_two_v_three():
    assert semifinal_pairings([10, 20, 30, 40]) == [(1, 10, 40), (2, 20, 30)]


def test_semifinal_pairing_needs_four_qualifiers():
    with pytest.raises(InsufficientQualifiers):
        semifinal_pairings([1, 2, 3])


def test_generate_semifinals(three_groups):
    teams = three_groups.teams
    semi_round = generate_semifinals(three_groups.db)

    assert semi_round.type == RoundType.SEMI
    assert semi_round.status == RoundStatus.PENDING
    assert semi_round.number == 2

    matches = get_round_matches(three_groups.db, semi_round.id)
    assert [(m.court, m.team1_id, m.team2_id) for m in matches] == [
        (1, teams["A1"].id, teams["B2"].id),
        (2, teams["B1"].id, teams["C1"].id),
    ]
    assert all(m.status == MatchStatus.PENDING and m.score1 == 0 and m.score2 == 0 for m in matches)


def test_generate_semifinals_without_enough_qualifiers_changes_nothing(two_groups):
    db = two_groups.db
    rounds_before = len(get_rounds(db))
    matches_before = db.query(Match).count()

    with pytest.raises(InsufficientQualifiers):
        generate_semifinals(db)

    assert len(get_rounds(db)) == rounds_before
    assert db.query(Match).count() == matches_before


def test_generate_final_from_semifinal_winners(three_groups):
    teams = three_groups.teams
    semi_round = generate_semifinals(three_groups.db)
    # A1 beats B2 on court 1, C1 beats B1 on court 2
    _play(three_groups, semi_round, [(21, 18), (12, 21)])

    final_round = generate_final(three_groups.db)

    assert final_round.type == RoundType.FINAL
    assert final_round.number == 3
    matches = get_round_matches(three_groups.db, final_round.id)
    assert len(matches) == 1
    assert (matches[0].court, matches[0].team1_id, matches[0].team2_id) == (
        1, teams["A1"].id, teams["C1"].id
    )


def test_generate_final_without_finished_semifinal(three_groups):
    with pytest.raises(SemifinalsNotFinished):
        generate_final(three_groups.db)

    semi_round = generate_semifinals(three_groups.db)
    start_round(three_groups.db, semi_round.id)
    with pytest.raises(SemifinalsNotFinished):
        generate_final(three_groups.db)


def test_generate_final_with_two_finished_semifinal_rounds(three_groups):
    for _ in range(2):
        _play(three_groups, generate_semifinals(three_groups.db), [(21, 10), (21, 10)])

    with pytest.raises(SemifinalsNotFinished):
        generate_final(three_groups.db)


def test_tied_semifinal_blocks_final(three_groups):
    db = three_groups.db
    _play(three_groups, generate_semifinals(db), [(21, 21), (21, 10)])
    rounds_before = len(get_rounds(db))

    with pytest.raises(SemifinalUndecided):
        generate_final(db)
    assert len(get_rounds(db)) == rounds_before


def test_match_winner():
    assert match_winner(SimpleNamespace(team1_id=1, team2_id=2, score1=21, score2=3, court=1)) == 1
    assert match_winner(SimpleNamespace(team1_id=1, team2_id=2, score1=3, score2=21, court=1)) == 2
    with pytest.raises(SemifinalUndecided):
        match_winner(SimpleNamespace(team1_id=1, team2_id=2, score1=5, score2=5, court=2))


def test_final_pairing_needs_two_finished_matches():
    finished = SimpleNamespace(team1_id=1, team2_id=2, score1=21, score2=3, court=1,
                               status=MatchStatus.FINISHED)
    pending = SimpleNamespace(team1_id=3, team2_id=4, score1=0, score2=0, court=2,
                              status=MatchStatus.PENDING)

    with pytest.raises(InvalidSemifinalResult):
        final_pairing([finished])
    with pytest.raises(InvalidSemifinalResult):
        final_pairing([finished, pending])
