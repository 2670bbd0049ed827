"""
Single-elimination bracket after the group stage.

Semifinals pair seeds 1v4 and 2v3 from the qualifier list; the final pairs
the two semifinal winners in court order. Bracket rounds get the next free
round number. Preconditions are checked before anything is written.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from api.crud.round_crud import create_round_with_matches, get_round_matches, get_rounds_by_type
from core.exceptions import (
    InsufficientQualifiers, SemifinalsNotFinished, InvalidSemifinalResult, SemifinalUndecided
)
from models.match import Match, MatchStatus
from models.round import Round, RoundStatus, RoundType
from services.standings_service import SEMIFINAL_QUALIFIERS, load_standings

logger = logging.getLogger(__name__)


def semifinal_pairings(qualifier_ids: List[int]):
    """(court, team1_id, team2_id) for seed 1 v 4 and seed 2 v 3"""
    if len(qualifier_ids) < SEMIFINAL_QUALIFIERS:
        raise InsufficientQualifiers(len(qualifier_ids))
    return [
        (1, qualifier_ids[0], qualifier_ids[3]),
        (2, qualifier_ids[1], qualifier_ids[2]),
    ]


def match_winner(match: Match) -> int:
    if match.score1 > match.score2:
        return match.team1_id
    if match.score2 > match.score1:
        return match.team2_id
    raise SemifinalUndecided(match.court)


def final_pairing(semifinal_matches: List[Match]):
    finished = [m for m in semifinal_matches if m.status == MatchStatus.FINISHED]
    if len(semifinal_matches) != 2 or len(finished) != 2:
        raise InvalidSemifinalResult()
    first, second = finished
    return [(1, match_winner(first), match_winner(second))]


def generate_semifinals(db: Session) -> Round:
    """
    Create a pending semifinal round from the current qualifiers.
    Calling it twice creates two semifinal rounds.
    """
    qualifier_ids = load_standings(db).qualifier_ids
    pairings = semifinal_pairings(qualifier_ids)

    semi_round = create_round_with_matches(db, RoundType.SEMI, pairings)
    logger.info(f"Semifinals created as round {semi_round.number}: {pairings}")
    return semi_round


def generate_final(db: Session) -> Round:
    """Create a pending final round from the single finished semifinal round"""
    finished_semis = get_rounds_by_type(db, RoundType.SEMI, RoundStatus.FINISHED)
    if len(finished_semis) != 1:
        raise SemifinalsNotFinished()

    pairings = final_pairing(get_round_matches(db, finished_semis[0].id))

    final_round = create_round_with_matches(db, RoundType.FINAL, pairings)
    logger.info(f"Final created as round {final_round.number}: {pairings}")
    return final_round
