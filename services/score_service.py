import logging

from sqlalchemy.orm import Session

from api.crud.match_crud import update_match_score
from core.exceptions import MatchNotActive
from core.validators import validate_match_exists
from models.match import Match, MatchStatus
from schemas.tournament import ScoreField

logger = logging.getLogger(__name__)


def apply_score_delta(db: Session, match_id: int, field, delta: int) -> Match:
    """
    Add delta to one score of an active match and bump its version.
    A result below zero is ignored and the match is returned unchanged.
    """
    field = ScoreField(field).value
    match = validate_match_exists(db, match_id)
    if match.status != MatchStatus.ACTIVE:
        raise MatchNotActive()

    new_value = getattr(match, field) + delta
    if new_value < 0:
        logger.info(f"Ignored {field} {delta:+d} on match {match_id}: score would go below zero")
        return match

    return update_match_score(db, match, field, new_value)
