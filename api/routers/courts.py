from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from api.deps.db import get_db
from core.validators import validate_court
from schemas.tournament import CourtMatch
from services.court_service import get_court_match

router = APIRouter(prefix="/courts", tags=["Courts"])


@router.get("/{court}/active-match", response_model=Optional[CourtMatch])
async def get_active_match(court: int, db: Session = Depends(get_db)):
    """Active match on a court with its running clock; null when the court is idle"""
    validate_court(court)
    return get_court_match(db, court)
