"""
Live event fan-out.

Usage:
    from arena.events import get_event_bus, match_topic, SCORE_UPDATE

    bus = get_event_bus()
    bus.subscribe(match_topic(42), handler)
    await bus.start()
    await bus.publish(match_topic(42), SCORE_UPDATE, {"matchId": 42})
"""

from arena.events.bus import (
    LIVE_SCORE_UPDATE,
    LIVE_SCOREBOARD,
    MATCH_ENDED,
    MATCH_STARTED,
    SCORE_UPDATE,
    Event,
    EventBus,
    Publisher,
    get_event_bus,
    match_topic,
)

__all__ = [
    "LIVE_SCORE_UPDATE",
    "LIVE_SCOREBOARD",
    "MATCH_ENDED",
    "MATCH_STARTED",
    "SCORE_UPDATE",
    "Event",
    "EventBus",
    "Publisher",
    "get_event_bus",
    "match_topic",
]
