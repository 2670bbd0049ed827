from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from api.crud.match_crud import get_active_match_for_court
from schemas.tournament import CourtMatch
from services.round_lifecycle import elapsed_seconds, format_clock


def get_court_match(db: Session, court: int, now: Optional[datetime] = None) -> Optional[CourtMatch]:
    """What a court screen shows: the active match, team names and the round clock"""
    match = get_active_match_for_court(db, court)
    if not match:
        return None

    db_round = match.round
    match.start_time = db_round.start_time
    match.is_paused = db_round.is_paused
    match.elapsed_seconds = elapsed_seconds(db_round, now)
    match.clock = format_clock(match.elapsed_seconds)
    return CourtMatch.model_validate(match)
