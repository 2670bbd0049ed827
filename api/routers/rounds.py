from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from api.deps.db import get_db
from api.crud.round_crud import create_round, get_rounds
from schemas.tournament import Round, RoundCreate, ReconcileResult
from services import round_lifecycle
from services.bracket_service import generate_semifinals, generate_final
from services.notification_service import notify_round_started

router = APIRouter(prefix="/rounds", tags=["Rounds"])


@router.post("/", response_model=Round, status_code=201)
async def create_new_round(round_data: RoundCreate, db: Session = Depends(get_db)):
    """Create a numbered group-stage round"""
    return create_round(db, round_data)


@router.get("/", response_model=List[Round])
async def list_rounds(db: Session = Depends(get_db)):
    """All rounds ordered by number"""
    return get_rounds(db)


@router.post("/semifinals", response_model=Round, status_code=201)
async def create_semifinals(db: Session = Depends(get_db)):
    """Seed 1 v 4 on court 1 and seed 2 v 3 on court 2 from the current qualifiers"""
    return generate_semifinals(db)


@router.post("/final", response_model=Round, status_code=201)
async def create_final(db: Session = Depends(get_db)):
    """Pair the two semifinal winners on court 1"""
    return generate_final(db)


@router.post("/reconcile", response_model=ReconcileResult)
async def reconcile_statuses(db: Session = Depends(get_db)):
    """Repair matches whose status drifted from their round's status"""
    return ReconcileResult(repaired_matches=round_lifecycle.reconcile_round_matches(db))


@router.post("/{round_id}/start", response_model=Round)
async def start_round(round_id: int, db: Session = Depends(get_db)):
    db_round = round_lifecycle.start_round(db, round_id)
    await notify_round_started(db_round.id)
    return db_round


@router.post("/{round_id}/pause", response_model=Round)
async def pause_round(round_id: int, db: Session = Depends(get_db)):
    return round_lifecycle.pause_round(db, round_id)


@router.post("/{round_id}/resume", response_model=Round)
async def resume_round(round_id: int, db: Session = Depends(get_db)):
    return round_lifecycle.resume_round(db, round_id)


@router.post("/{round_id}/finish", response_model=Round)
async def finish_round(round_id: int, db: Session = Depends(get_db)):
    return round_lifecycle.finish_round(db, round_id)


@router.post("/{round_id}/restart", response_model=Round)
async def restart_round(
    round_id: int,
    reset_scores: Optional[bool] = Query(None, description="Override the configured restart policy"),
    db: Session = Depends(get_db)
):
    """Finished -> pending; scores are kept unless the restart policy resets them"""
    return round_lifecycle.restart_round(db, round_id, reset_scores=reset_scores)


@router.delete("/{round_id}", status_code=204)
async def delete_round(round_id: int, db: Session = Depends(get_db)):
    """Delete a semifinal or final round together with its matches"""
    round_lifecycle.delete_round(db, round_id)
