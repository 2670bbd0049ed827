from sqlalchemy.orm import Session, joinedload
from typing import Optional
from models.match import Match, MatchStatus
from models.round import Round, RoundStatus
from schemas.tournament import MatchCreate
from core.events import changefeed, serialize_row
from core.validators import validate_new_match


def create_match(db: Session, match_data: MatchCreate):
    db_round = validate_new_match(db, match_data)

    db_match = Match(
        round_id=match_data.round_id,
        court=match_data.court,
        team1_id=match_data.team1_id,
        team2_id=match_data.team2_id,
        status=db_round.status,
    )
    db.add(db_match)
    db.commit()
    db.refresh(db_match)
    changefeed.publish("matches", "INSERT", new_row=serialize_row(db_match))
    return db_match


def get_match(db: Session, match_id: int):
    return db.query(Match).filter(Match.id == match_id).first()


def _attach_display_fields(match: Match):
    match.round_number = match.round.number if match.round else None
    match.team1_name = match.team1.name if match.team1 else ""
    match.team2_name = match.team2.name if match.team2 else ""
    return match


def get_matches(db: Session):
    """All matches with round number and team names attached"""
    matches = db.query(Match).options(
        joinedload(Match.round),
        joinedload(Match.team1),
        joinedload(Match.team2),
    ).order_by(Match.round_id, Match.court).all()
    return [_attach_display_fields(m) for m in matches]


def get_active_match_for_court(db: Session, court: int) -> Optional[Match]:
    """The active match on a court inside an active round (latest round first)"""
    match = db.query(Match).join(Round, Match.round_id == Round.id).options(
        joinedload(Match.round),
        joinedload(Match.team1),
        joinedload(Match.team2),
    ).filter(
        Round.status == RoundStatus.ACTIVE,
        Match.court == court,
        Match.status == MatchStatus.ACTIVE,
    ).order_by(Round.number.desc()).first()
    if match:
        _attach_display_fields(match)
    return match


def update_match_score(db: Session, match: Match, field: str, value: int):
    old_row = serialize_row(match)
    setattr(match, field, value)
    match.version = (match.version or 0) + 1
    db.commit()
    db.refresh(match)
    changefeed.publish("matches", "UPDATE", old_row=old_row, new_row=serialize_row(match))
    return match
