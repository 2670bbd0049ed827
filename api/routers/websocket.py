from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session
from datetime import datetime
import asyncio
import json
from typing import Optional
import logging

from api.crud.match_crud import get_active_match_for_court
from api.deps.db import get_db
from core.config import settings
from core.events import changefeed, serialize_row
from core.exceptions import TournamentException
from schemas.tournament import ScoreDelta
from services.court_service import get_court_match
from services.notification_service import round_updates, ROUND_STARTED_EVENT
from services.score_service import apply_score_delta
from services.standings_service import load_standings
from services.websocket_manager import websocket_manager, court_topic, STANDINGS_TOPIC

logger = logging.getLogger(__name__)

router = APIRouter()

# Round start wake-up goes to every connected court screen
round_updates().on(ROUND_STARTED_EVENT, websocket_manager.notify_round_started)


def _timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


async def send_error(websocket: WebSocket, error_type: str, message: str, code: int = 1008):
    """Send an error frame, then close"""
    try:
        await websocket.send_json({
            "type": "error",
            "error_type": error_type,
            "message": message,
            "code": code,
            "timestamp": _timestamp()
        })
    finally:
        await websocket.close(code=code, reason=message)


def _court_snapshot(db: Session, court: int):
    # End the previous read so the snapshot sees other sessions' commits
    db.rollback()
    court_match = get_court_match(db, court)
    return court_match.model_dump(mode="json") if court_match else None


async def _handle_command(websocket: WebSocket, db: Session, data: str, court: Optional[int] = None):
    if data == "ping":
        await websocket.send_json({"type": "pong", "timestamp": _timestamp()})
        return

    try:
        command = json.loads(data)
    except json.JSONDecodeError:
        await websocket.send_json({"type": "error", "error_type": "validation_error", "message": "Invalid JSON"})
        return

    if command.get("type") == "ping":
        await websocket.send_json({"type": "pong", "timestamp": _timestamp()})
    elif command.get("type") == "score":
        try:
            score = ScoreDelta(field=command.get("field"), delta=command.get("delta"))
            active = get_active_match_for_court(db, court) if court is not None else None
            if active is None or active.id != command.get("match_id"):
                await websocket.send_json({"type": "error", "error_type": "score_rejected",
                                           "message": "Match is not active on this court"})
                return
            match = apply_score_delta(db, command.get("match_id"), score.field, score.delta)
            await websocket.send_json({"type": "score_ack", "match": serialize_row(match)})
        except TournamentException as e:
            await websocket.send_json({"type": "error", "error_type": "score_rejected", "message": e.detail})
        except (TypeError, ValueError) as e:
            await websocket.send_json({"type": "error", "error_type": "validation_error", "message": str(e)})


async def _receive_loop(websocket: WebSocket, db: Session, court: Optional[int] = None):
    heartbeat = settings.ws_heartbeat_interval
    while True:
        try:
            data = await asyncio.wait_for(websocket.receive_text(), timeout=heartbeat)
        except asyncio.TimeoutError:
            await websocket.send_json({"type": "ping", "timestamp": _timestamp()})
            continue
        await _handle_command(websocket, db, data, court)


@router.websocket("/ws/court/{court}")
async def court_websocket(websocket: WebSocket, court: int, db: Session = Depends(get_db)):
    """
    Live feed for one court.

    Messages sent:
    - {"type": "snapshot", "match": {...} | null} on connect and whenever the
      round or the court's match set changes
    - {"type": "match_update", "match": {...}} when the tracked match row changes
    - {"type": "round_started", "roundId": id} wake-up broadcast

    Messages accepted: "ping", {"type": "ping"},
    {"type": "score", "match_id": id, "field": "score1"|"score2", "delta": 1|-1}
    """
    if not 1 <= court <= settings.court_count:
        await websocket.accept()
        await send_error(websocket, "validation_error", f"Unknown court {court}")
        return

    await websocket_manager.connect(websocket, court_topic(court))
    changes: asyncio.Queue = asyncio.Queue()
    subscriptions = [
        changefeed.subscribe("matches", filters={"court": court}, handler=changes.put_nowait),
        changefeed.subscribe("rounds", handler=changes.put_nowait),
    ]

    async def forward():
        tracked = _court_snapshot(db, court)
        await websocket.send_json({"type": "snapshot", "match": tracked})
        while True:
            change = await changes.get()
            row = change.new_row
            if tracked and change.table == "matches" and row and row.get("id") == tracked["id"] \
                    and row.get("status") == "active":
                # Echoes not newer than what the screen already has are dropped
                if (row.get("version") or 0) > (tracked.get("version") or 0):
                    tracked.update(row)
                    await websocket.send_json({"type": "match_update", "match": tracked})
            else:
                tracked = _court_snapshot(db, court)
                await websocket.send_json({"type": "snapshot", "match": tracked})

    forward_task = asyncio.create_task(forward())
    try:
        await _receive_loop(websocket, db, court)
    except WebSocketDisconnect:
        logger.info(f"Court {court} screen disconnected")
    except Exception as e:
        logger.error(f"Websocket error on court {court}: {e}")
    finally:
        forward_task.cancel()
        for subscription in subscriptions:
            subscription.close()
        await websocket_manager.disconnect(websocket)


@router.websocket("/ws/standings")
async def standings_websocket(websocket: WebSocket, db: Session = Depends(get_db)):
    """Pushes {"type": "standings", "data": {...}} on connect and after every match change"""
    await websocket_manager.connect(websocket, STANDINGS_TOPIC)
    changes: asyncio.Queue = asyncio.Queue()
    subscription = changefeed.subscribe("matches", handler=changes.put_nowait)

    async def forward():
        while True:
            db.rollback()
            standings = load_standings(db).to_response()
            await websocket.send_json({"type": "standings", "data": standings.model_dump(mode="json")})
            await changes.get()
            # Coalesce a burst (a round finishing updates every match)
            while not changes.empty():
                changes.get_nowait()

    forward_task = asyncio.create_task(forward())
    try:
        await _receive_loop(websocket, db)
    except WebSocketDisconnect:
        logger.info("Standings screen disconnected")
    except Exception as e:
        logger.error(f"Websocket error on standings feed: {e}")
    finally:
        forward_task.cancel()
        subscription.close()
        await websocket_manager.disconnect(websocket)
