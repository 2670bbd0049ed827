"""
Courtside score keeping with optimistic updates.

A CourtScoreboard holds the local view of the match active on one court.
Score changes are shown immediately, written through an async writer, and
rolled back if the write fails. Rows coming back from the writer or from the
change feed are merged by version: an echo whose version is not newer than
the one already seen never overwrites scores, and a score with a write still
in flight keeps its local value.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from core.events import ChangeEvent, serialize_row
from core.exceptions import ScoreUpdateFailed, TournamentException
from schemas.tournament import ScoreField
from services.score_service import apply_score_delta

logger = logging.getLogger(__name__)

SCORE_FIELDS = (ScoreField.SCORE1.value, ScoreField.SCORE2.value)
FAILURE_NOTICE = "Failed to update score. Please try again."

ScoreWriter = Callable[[int, str, int], Awaitable[Optional[Dict[str, Any]]]]


class CourtScoreboard:
    def __init__(self, court: int, writer: ScoreWriter, notify: Optional[Callable[[str], Any]] = None):
        self.court = court
        self.writer = writer
        self.notify = notify or logger.warning
        self.match: Optional[Dict[str, Any]] = None
        self._pending = {field: 0 for field in SCORE_FIELDS}

    def track(self, match_row: Optional[Dict[str, Any]]):
        """Replace the tracked match (None when the court is idle)."""
        self.match = dict(match_row) if match_row else None
        self._pending = {field: 0 for field in SCORE_FIELDS}

    @property
    def match_id(self) -> Optional[int]:
        return self.match["id"] if self.match else None

    def is_tracking(self, match_id: int) -> bool:
        return self.match is not None and self.match["id"] == match_id

    async def apply_delta(self, match_id: int, field, delta: int) -> bool:
        """
        Optimistically add delta to a score. Returns True when the remote write
        succeeded; False when the call was ignored or rolled back.
        """
        field = ScoreField(field).value
        if not self.is_tracking(match_id):
            return False

        previous = self.match[field]
        new_value = previous + delta
        if new_value < 0:
            return False

        self.match[field] = new_value
        self._pending[field] += 1
        try:
            row = await self.writer(match_id, field, delta)
        except Exception as e:
            logger.error(f"Score update failed on court {self.court}: {e}")
            if self.is_tracking(match_id):
                self.match[field] = previous
            self.notify(FAILURE_NOTICE)
            return False
        finally:
            self._pending[field] = max(0, self._pending[field] - 1)

        if row:
            self.reconcile(row)
        return True

    def reconcile(self, row: Dict[str, Any]) -> bool:
        """
        Merge an authoritative row for the tracked match. Returns False when the
        row belongs to another match, so the caller should re-fetch instead.
        """
        if self.match is None or row.get("id") != self.match["id"]:
            return False

        incoming = row.get("version", 0) or 0
        fresh = incoming > (self.match.get("version", 0) or 0)
        for key, value in row.items():
            if key == "version":
                continue
            if key in SCORE_FIELDS:
                if fresh and not self._pending[key]:
                    self.match[key] = value
            else:
                self.match[key] = value
        if fresh:
            self.match["version"] = incoming
        return True

    def handle_event(self, change: ChangeEvent) -> bool:
        if change.table != "matches" or change.new_row is None:
            return False
        return self.reconcile(change.new_row)


def make_store_writer(session_factory) -> ScoreWriter:
    """Writer that applies the delta directly against the store."""

    def _write(match_id: int, field: str, delta: int):
        db = session_factory()
        try:
            return serialize_row(apply_score_delta(db, match_id, field, delta))
        except TournamentException as e:
            raise ScoreUpdateFailed(e.detail)
        finally:
            db.close()

    async def writer(match_id: int, field: str, delta: int):
        return await run_in_threadpool(_write, match_id, field, delta)

    return writer
