from typing import Dict, List
from fastapi import WebSocket
from collections import defaultdict
import logging

logger = logging.getLogger(__name__)

STANDINGS_TOPIC = "standings"


def court_topic(court: int) -> str:
    return f"court:{court}"


class TournamentWebSocketManager:
    """
    Open websocket connections grouped by topic ("court:<n>" or "standings").
    One topic may have several connections (several screens on one court).
    """

    def __init__(self):
        self.topic_connections: Dict[str, List[WebSocket]] = defaultdict(list)
        self.websocket_to_topic: Dict[WebSocket, str] = {}

    async def connect(self, websocket: WebSocket, topic: str):
        await websocket.accept()
        self.topic_connections[topic].append(websocket)
        self.websocket_to_topic[websocket] = topic
        logger.info(f"Websocket connected to {topic}")

    async def disconnect(self, websocket: WebSocket):
        if websocket not in self.websocket_to_topic:
            return

        topic = self.websocket_to_topic.pop(websocket)
        if websocket in self.topic_connections.get(topic, []):
            self.topic_connections[topic].remove(websocket)
        if not self.topic_connections.get(topic):
            self.topic_connections.pop(topic, None)
        logger.info(f"Websocket disconnected from {topic}")

    async def send_to_topic(self, topic: str, message: dict):
        disconnected = []
        for ws in list(self.topic_connections.get(topic, [])):
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send message to {topic}: {e}")
                disconnected.append(ws)

        # Drop dead connections
        for ws in disconnected:
            await self.disconnect(ws)

    async def broadcast_to_courts(self, message: dict):
        for topic in [t for t in self.topic_connections if t.startswith("court:")]:
            await self.send_to_topic(topic, message)

    async def notify_round_started(self, payload: dict):
        """round_updates/round_started handler: wake every court screen"""
        await self.broadcast_to_courts({"type": "round_started", "roundId": payload.get("roundId")})

    def get_connection_count(self, topic: str = None) -> int:
        if topic:
            return len(self.topic_connections.get(topic, []))
        return sum(len(connections) for connections in self.topic_connections.values())


# Global manager instance
websocket_manager = TournamentWebSocketManager()
