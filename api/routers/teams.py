from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from api.deps.db import get_db
from api.crud.team_crud import create_team, get_teams
from schemas.tournament import Team, TeamCreate

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.post("/", response_model=Team, status_code=201)
async def create_new_team(team: TeamCreate, db: Session = Depends(get_db)):
    """Create a team, optionally inside a group"""
    db_team = create_team(db, team)
    db_team.group_name = db_team.group.name if db_team.group else ""
    return db_team


@router.get("/", response_model=List[Team])
async def list_teams(db: Session = Depends(get_db)):
    """All teams with their group name (blank when the group is missing)"""
    return get_teams(db)
