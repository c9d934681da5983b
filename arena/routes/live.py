"""
Live scoreboard WebSocket.

Clients send JSON actions:
    {"action": "join-match", "matchId": 42}
    {"action": "leave-match", "matchId": 42}
    {"action": "join-live-scoreboard"}
    {"action": "leave-live-scoreboard"}

and receive every event of the topics they joined as
    {"event": "score-update", "topic": "match-42", "data": {...}}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from arena.events import LIVE_SCOREBOARD, Event, EventBus, get_event_bus, match_topic

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


class LiveConnection:
    """One viewer's socket and the topics it has joined."""

    def __init__(self, websocket: WebSocket, bus: EventBus):
        self.websocket = websocket
        self.bus = bus
        self.topics: set[str] = set()

    async def deliver(self, event: Event) -> None:
        await self.websocket.send_json(event.to_message())

    def join(self, topic: str) -> None:
        if topic in self.topics:
            return
        self.bus.subscribe(topic, self.deliver)
        self.topics.add(topic)

    def leave(self, topic: str) -> None:
        if topic not in self.topics:
            return
        self.bus.unsubscribe(topic, self.deliver)
        self.topics.discard(topic)

    def leave_all(self) -> None:
        for topic in list(self.topics):
            self.leave(topic)


def _resolve_topic(action: str, message: dict) -> Optional[str]:
    if action in ("join-match", "leave-match"):
        match_id = message.get("matchId")
        return match_topic(match_id) if match_id is not None else None
    if action in ("join-live-scoreboard", "leave-live-scoreboard"):
        return LIVE_SCOREBOARD
    return None


@router.websocket("/ws")
async def live_socket(websocket: WebSocket, bus: EventBus = Depends(get_event_bus)):
    await websocket.accept()
    connection = LiveConnection(websocket, bus)
    logger.info(f"[LIVE] viewer connected: {websocket.client}")

    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                await websocket.send_json({"event": "error", "data": {"error": "Messages must be JSON"}})
                continue
            action = message.get("action") if isinstance(message, dict) else None
            topic = _resolve_topic(action, message) if action else None
            if topic is None:
                await websocket.send_json({"event": "error", "data": {"error": f"Unsupported message: {message}"}})
                continue

            if action.startswith("join"):
                connection.join(topic)
                await websocket.send_json({"event": "joined", "topic": topic})
            else:
                connection.leave(topic)
                await websocket.send_json({"event": "left", "topic": topic})
            logger.debug(f"[LIVE] {websocket.client} {action} {topic}")
    except WebSocketDisconnect:
        logger.info(f"[LIVE] viewer disconnected: {websocket.client}")
    finally:
        connection.leave_all()
