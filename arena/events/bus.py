"""
Event Bus: topic-keyed fan-out of live match events.

Design:
- asyncio.Queue for immediate in-process dispatch (bounded, never blocks the publisher)
- Subscribers register per topic: "match-{id}" for a single match room,
  "live-scoreboard" for the global scoreboard
- Persisted match state is the source of truth: a dropped or failed event is
  logged and counted, never raised back to the score update that produced it
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from arena.telemetry.metrics import record_event_published, record_publish_failure

logger = logging.getLogger("arena.events")

# ── Topics and event kinds ───────────────────────────────────────────────────
LIVE_SCOREBOARD = "live-scoreboard"

SCORE_UPDATE = "score-update"
LIVE_SCORE_UPDATE = "live-score-update"
MATCH_STARTED = "match-started"
MATCH_ENDED = "match-ended"


def match_topic(match_id: Any) -> str:
    return f"match-{match_id}"


# ── Event ────────────────────────────────────────────────────────────────────
class Event:
    """Immutable event payload addressed to one topic."""

    __slots__ = ("topic", "kind", "payload", "created_at")

    def __init__(self, topic: str, kind: str, payload: Dict[str, Any]):
        self.topic = topic
        self.kind = kind
        self.payload = payload
        self.created_at = datetime.now(timezone.utc)

    def to_message(self) -> Dict[str, Any]:
        return {"event": self.kind, "topic": self.topic, "data": self.payload}

    def __repr__(self):
        return f"Event({self.kind}, topic={self.topic}, match_id={self.payload.get('matchId')})"


Handler = Callable[[Event], Awaitable[None]]


class Publisher(Protocol):
    """Capability the match orchestrator publishes through."""

    async def publish(self, topic: str, kind: str, payload: Dict[str, Any]) -> None:
        ...


# ── EventBus ─────────────────────────────────────────────────────────────────
class EventBus:
    """
    In-memory topic bus with async consumer.

    Events are dispatched to the topic's handlers in subscription order.
    Events for a topic nobody listens to are discarded silently.
    """

    def __init__(self, max_queue_size: int = 1000):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self._handlers: Dict[str, List[Handler]] = {}
        self._task: Optional[asyncio.Task] = None
        self._running = False

    def subscribe(self, topic: str, handler: Handler) -> Handler:
        """Register an async handler for a topic."""
        self._handlers.setdefault(topic, []).append(handler)
        logger.debug(f"EventBus: subscribed {getattr(handler, '__name__', handler)} to {topic}")
        return handler

    def unsubscribe(self, topic: str, handler: Handler) -> None:
        handlers = self._handlers.get(topic)
        if not handlers:
            return
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            del self._handlers[topic]

    async def publish(self, topic: str, kind: str, payload: Dict[str, Any]) -> None:
        """Queue an event for async delivery. Never raises on a full queue."""
        event = Event(topic, kind, payload)
        try:
            self._queue.put_nowait(event)
            record_event_published(kind)
            logger.debug(f"EventBus: queued {event}")
        except asyncio.QueueFull:
            record_publish_failure(kind)
            logger.error(f"EventBus: queue full ({self._queue.maxsize}), dropping {event}")

    async def start(self):
        """Start the background consumer task."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._consumer_loop())
        logger.info("EventBus: started consumer loop")

    async def stop(self):
        """Graceful shutdown: drain queue then stop."""
        self._running = False
        if self._task:
            # Sentinel to unblock the consumer
            await self._queue.put(None)
            try:
                await asyncio.wait_for(self._task, timeout=10.0)
            except asyncio.TimeoutError:
                self._task.cancel()
                logger.warning("EventBus: consumer did not finish in 10s, cancelled")
            self._task = None
        logger.info(f"EventBus: stopped (pending={self._queue.qsize()})")

    async def _consumer_loop(self):
        """Process events sequentially from the queue."""
        while True:
            try:
                event = await self._queue.get()
                if event is None:
                    break
                await self._dispatch(event)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"EventBus: consumer loop error: {e}", exc_info=True)

    async def _dispatch(self, event: Event):
        """Deliver an event to every handler of its topic; one failing handler does not stop the rest."""
        # Copy: handlers may unsubscribe while we iterate
        for handler in list(self._handlers.get(event.topic, [])):
            try:
                await handler(event)
            except Exception as e:
                record_publish_failure(event.kind)
                logger.error(
                    f"EventBus: handler {getattr(handler, '__name__', handler)} failed for {event}: {e}",
                    exc_info=True,
                )

    @property
    def pending_count(self) -> int:
        return self._queue.qsize()

    def subscriber_count(self, topic: str) -> int:
        return len(self._handlers.get(topic, []))


# ── Singleton ────────────────────────────────────────────────────────────────

_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get or create the singleton EventBus instance."""
    global _bus_instance
    if _bus_instance is None:
        from arena.config import get_settings

        _bus_instance = EventBus(max_queue_size=get_settings().EVENT_BUS_MAX_QUEUE)
    return _bus_instance
