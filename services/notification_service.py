"""
Broadcast messages about tournament events.
"""
import logging

from core.events import broadcast

logger = logging.getLogger(__name__)

ROUND_UPDATES_CHANNEL = "round_updates"
ROUND_STARTED_EVENT = "round_started"


def round_updates():
    return broadcast.channel(ROUND_UPDATES_CHANNEL)


async def notify_round_started(round_id: int) -> int:
    """
    Wake-up signal for courtside clients after a round starts. Best effort:
    clients also follow the rounds change feed.
    """
    delivered = await round_updates().send(ROUND_STARTED_EVENT, {"roundId": round_id})
    logger.info(f"Sent round_started for round {round_id} to {delivered} handlers")
    return delivered
