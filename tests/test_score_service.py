"""
Unit tests for server-side score changes
"""
import pytest

from api.crud.round_crud import get_round_matches
from core.events import changefeed
from core.exceptions import MatchNotActive, MatchNotFound
from services.round_lifecycle import finish_round, start_round
from services.score_service import apply_score_delta


@pytest.fixture
def active_match(builder):
    builder.group("A")
    builder.team("T1", "A")
    builder.team("T2", "A")
    db_round = builder.round(1)
    match = builder.match(db_round, 1, "T1", "T2")
    start_round(builder.db, db_round.id)
    return match


def test_increment_bumps_version(db, active_match):
    match = apply_score_delta(db, active_match.id, "score1", 1)
    assert (match.score1, match.score2, match.version) == (1, 0, 1)

    match = apply_score_delta(db, active_match.id, "score2", 1)
    assert (match.score1, match.score2, match.version) == (1, 1, 2)


def test_decrement_below_zero_is_ignored(db, active_match):
    events = []
    with changefeed.subscribe("matches", handler=events.append):
        match = apply_score_delta(db, active_match.id, "score1", -1)

    assert match.score1 == 0
    assert match.version == 0
    assert events == []


def test_decrement(db, active_match):
    apply_score_delta(db, active_match.id, "score2", 1)
    match = apply_score_delta(db, active_match.id, "score2", -1)
    assert match.score2 == 0
    assert match.version == 2


def test_score_change_is_published(db, active_match):
    events = []
    with changefeed.subscribe("matches", "UPDATE", filters={"court": 1}, handler=events.append):
        apply_score_delta(db, active_match.id, "score1", 1)

    assert len(events) == 1
    assert events[0].old_row["score1"] == 0
    assert events[0].new_row["score1"] == 1
    assert events[0].new_row["version"] == 1


def test_only_active_matches_take_scores(db, active_match):
    finish_round(db, active_match.round_id)
    with pytest.raises(MatchNotActive):
        apply_score_delta(db, active_match.id, "score1", 1)
    assert get_round_matches(db, active_match.round_id)[0].score1 == 0


def test_unknown_match(db):
    with pytest.raises(MatchNotFound):
        apply_score_delta(db, 404, "score1", 1)


def test_unknown_field(db, active_match):
    with pytest.raises(ValueError):
        apply_score_delta(db, active_match.id, "team1_id", 1)
