from sqlalchemy.orm import Session, joinedload
from models.team import Team
from schemas.tournament import TeamCreate
from core.events import changefeed, serialize_row
from core.validators import validate_group_exists


def create_team(db: Session, team_data: TeamCreate):
    if team_data.group_id is not None:
        validate_group_exists(db, team_data.group_id)

    db_team = Team(name=team_data.name, group_id=team_data.group_id)
    db.add(db_team)
    db.commit()
    db.refresh(db_team)
    changefeed.publish("teams", "INSERT", new_row=serialize_row(db_team))
    return db_team


def get_team(db: Session, team_id: int):
    return db.query(Team).filter(Team.id == team_id).first()


def get_teams(db: Session):
    """All teams with their group name attached (blank when unresolved)"""
    teams = db.query(Team).options(joinedload(Team.group)).order_by(Team.id).all()
    for team in teams:
        team.group_name = team.group.name if team.group else ""
    return teams
