"""
Round lifecycle: pending -> active -> finished, pause/resume while active,
restart from finished back to pending, deletion of bracket rounds.

Every transition that changes the round status writes the round and all of
its matches in one commit.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from api.crud.round_crud import (
    get_active_rounds, update_round_and_matches, update_round, delete_round_with_matches
)
from core.config import settings
from core.events import changefeed, serialize_row
from core.exceptions import InvalidRoundTransition, RoundNotDeletable
from core.validators import validate_round_exists
from models.round import Round, RoundStatus, RoundType

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _require_status(db_round: Round, action: str, expected: RoundStatus):
    if db_round.status != expected:
        raise InvalidRoundTransition(action, db_round.status.value)


def start_round(db: Session, round_id: int, now: Optional[datetime] = None) -> Round:
    """pending -> active; every match of the round becomes active"""
    db_round = validate_round_exists(db, round_id)
    _require_status(db_round, "start", RoundStatus.PENDING)

    already_active = [r.number for r in get_active_rounds(db)]
    if already_active:
        logger.warning(f"Starting round {db_round.number} while rounds {already_active} are still active")

    db_round = update_round_and_matches(
        db, db_round,
        {"status": RoundStatus.ACTIVE, "start_time": now or utcnow(),
         "is_paused": False, "last_pause_start": None,
         "paused_time_at_start": db_round.total_paused_time or 0},
        {"status": RoundStatus.ACTIVE},
    )
    logger.info(f"Round {db_round.number} started")
    return db_round


def pause_round(db: Session, round_id: int, now: Optional[datetime] = None) -> Round:
    db_round = validate_round_exists(db, round_id)
    _require_status(db_round, "pause", RoundStatus.ACTIVE)
    if db_round.is_paused:
        return db_round

    db_round = update_round(db, db_round, {"is_paused": True, "last_pause_start": now or utcnow()})
    logger.info(f"Round {db_round.number} paused")
    return db_round


def resume_round(db: Session, round_id: int, now: Optional[datetime] = None) -> Round:
    """Close the open pause interval and add its length to total_paused_time"""
    db_round = validate_round_exists(db, round_id)
    _require_status(db_round, "resume", RoundStatus.ACTIVE)
    if not db_round.is_paused or db_round.last_pause_start is None:
        logger.debug(f"Round {db_round.number} has no open pause; resume ignored")
        return db_round

    now = now or utcnow()
    pause_duration = max(0, math.floor((now - as_utc(db_round.last_pause_start)).total_seconds()))
    db_round = update_round(db, db_round, {
        "total_paused_time": (db_round.total_paused_time or 0) + pause_duration,
        "is_paused": False,
        "last_pause_start": None,
    })
    logger.info(f"Round {db_round.number} resumed after {pause_duration}s pause")
    return db_round


def finish_round(db: Session, round_id: int, now: Optional[datetime] = None) -> Round:
    """active -> finished; pause fields are left as they are"""
    db_round = validate_round_exists(db, round_id)
    _require_status(db_round, "finish", RoundStatus.ACTIVE)

    db_round = update_round_and_matches(
        db, db_round,
        {"status": RoundStatus.FINISHED, "end_time": now or utcnow()},
        {"status": RoundStatus.FINISHED},
    )
    logger.info(f"Round {db_round.number} finished")
    return db_round


def restart_round(db: Session, round_id: int, reset_scores: Optional[bool] = None) -> Round:
    """
    finished -> pending. Scores are kept unless reset_scores (or the
    RESTART_RESETS_SCORES setting) asks for the older zeroing behaviour.
    """
    db_round = validate_round_exists(db, round_id)
    _require_status(db_round, "restart", RoundStatus.FINISHED)
    if reset_scores is None:
        reset_scores = settings.restart_resets_scores

    round_values = {"status": RoundStatus.PENDING, "is_paused": False, "last_pause_start": None}
    match_values = {"status": RoundStatus.PENDING}
    if reset_scores:
        round_values.update({"start_time": None, "end_time": None})
        match_values.update({"score1": 0, "score2": 0})

    db_round = update_round_and_matches(db, db_round, round_values, match_values, bump_version=reset_scores)
    logger.info(f"Round {db_round.number} restarted (scores {'reset' if reset_scores else 'kept'})")
    return db_round


def delete_round(db: Session, round_id: int):
    db_round = validate_round_exists(db, round_id)
    if db_round.type not in (RoundType.SEMI, RoundType.FINAL):
        raise RoundNotDeletable()
    number = db_round.number
    delete_round_with_matches(db, db_round)
    logger.info(f"Round {number} deleted with its matches")


def reconcile_round_matches(db: Session) -> int:
    """
    Repair matches whose status differs from their round's status.
    Returns the number of matches changed.
    """
    mismatched = [
        (match, db_round)
        for db_round in db.query(Round).all()
        for match in db_round.matches
        if match.status != db_round.status
    ]
    if not mismatched:
        return 0

    changes = []
    for match, db_round in mismatched:
        old_row = serialize_row(match)
        match.status = db_round.status
        changes.append((old_row, match))
    db.commit()

    for old_row, match in changes:
        db.refresh(match)
        changefeed.publish("matches", "UPDATE", old_row=old_row, new_row=serialize_row(match))
    logger.warning(f"Reconciled status of {len(changes)} matches with their rounds")
    return len(changes)


def elapsed_seconds(db_round: Round, now: Optional[datetime] = None) -> int:
    """
    Running time of the current run: wall time since start, minus pauses
    taken since that start, minus the currently open pause. Finished rounds stop at end_time.
    """
    start = as_utc(db_round.start_time)
    if start is None:
        return 0

    reference = now or utcnow()
    if db_round.status == RoundStatus.FINISHED and db_round.end_time is not None:
        reference = as_utc(db_round.end_time)

    paused = (db_round.total_paused_time or 0) - (db_round.paused_time_at_start or 0)
    if db_round.is_paused and db_round.last_pause_start is not None:
        paused += max(0, (reference - as_utc(db_round.last_pause_start)).total_seconds())

    return max(0, math.floor((reference - start).total_seconds() - paused))


def format_clock(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"
