from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from api.deps.db import get_db
from api.crud.match_crud import create_match, get_matches
from schemas.tournament import Match, MatchCreate, MatchListItem, ScoreDelta
from services.score_service import apply_score_delta

router = APIRouter(prefix="/matches", tags=["Matches"])


@router.post("/", response_model=Match, status_code=201)
async def create_new_match(match: MatchCreate, db: Session = Depends(get_db)):
    """Create a match on a court of an existing round"""
    return create_match(db, match)


@router.get("/", response_model=List[MatchListItem])
async def list_matches(db: Session = Depends(get_db)):
    """All matches with round number and team names"""
    return get_matches(db)


@router.patch("/{match_id}/score", response_model=Match)
async def update_score(match_id: int, score: ScoreDelta, db: Session = Depends(get_db)):
    """Add +1/-1 to one score of an active match"""
    return apply_score_delta(db, match_id, score.field, score.delta)
