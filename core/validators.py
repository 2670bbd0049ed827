from sqlalchemy.orm import Session
from models.group import Group
from models.team import Team
from models.round import Round
from models.match import Match
from core.config import settings
from core.exceptions import (
    GroupNotFound, TeamNotFound, RoundNotFound, MatchNotFound,
    InvalidMatchTeams, InvalidCourt, CourtTaken
)


def validate_group_exists(db: Session, group_id: int) -> Group:
    """Validate group exists and return it"""
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise GroupNotFound()
    return group


def validate_team_exists(db: Session, team_id: int) -> Team:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise TeamNotFound(team_id)
    return team


def validate_round_exists(db: Session, round_id: int) -> Round:
    """Validate round exists and return it"""
    db_round = db.query(Round).filter(Round.id == round_id).first()
    if not db_round:
        raise RoundNotFound()
    return db_round


def validate_match_exists(db: Session, match_id: int) -> Match:
    match = db.query(Match).filter(Match.id == match_id).first()
    if not match:
        raise MatchNotFound()
    return match


def validate_court(court: int, court_count: int = None):
    court_count = court_count or settings.court_count
    if not (1 <= court <= court_count):
        raise InvalidCourt(court, court_count)


def validate_new_match(db: Session, match_data) -> Round:
    """
    Check a match before insert: round exists, court in range and free in that
    round, both teams exist and differ. Returns the round.
    """
    db_round = validate_round_exists(db, match_data.round_id)
    validate_court(match_data.court)

    if match_data.team1_id == match_data.team2_id:
        raise InvalidMatchTeams()
    validate_team_exists(db, match_data.team1_id)
    validate_team_exists(db, match_data.team2_id)

    taken = db.query(Match).filter(
        Match.round_id == match_data.round_id,
        Match.court == match_data.court
    ).first()
    if taken:
        raise CourtTaken(match_data.court)

    return db_round
