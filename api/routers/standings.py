from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from api.deps.db import get_db
from schemas.tournament import StandingsResponse
from services.standings_service import load_standings

router = APIRouter(prefix="/standings", tags=["Standings"])


@router.get("/", response_model=StandingsResponse)
async def get_standings(db: Session = Depends(get_db)):
    """Group standings and semifinal qualifiers"""
    return load_standings(db).to_response()
