"""Live scoreboard WebSocket: join/leave bookkeeping and event delivery."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from arena.events import LIVE_SCOREBOARD, MATCH_STARTED, Event, EventBus, get_event_bus
from arena.main import app
from arena.routes.live import LiveConnection


@pytest.fixture
def bus():
    bus = EventBus()
    app.dependency_overrides[get_event_bus] = lambda: bus
    yield bus
    app.dependency_overrides.clear()


class TestLiveSocket:
    def test_join_and_leave_match_room(self, bus):
        client = TestClient(app)
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"action": "join-match", "matchId": 12})
            assert ws.receive_json() == {"event": "joined", "topic": "match-12"}
            assert bus.subscriber_count("match-12") == 1

            ws.send_json({"action": "leave-match", "matchId": 12})
            assert ws.receive_json() == {"event": "left", "topic": "match-12"}
            assert bus.subscriber_count("match-12") == 0

    def test_joining_twice_subscribes_once(self, bus):
        client = TestClient(app)
        with client.websocket_connect("/ws") as ws:
            for _ in range(2):
                ws.send_json({"action": "join-live-scoreboard"})
                ws.receive_json()
            assert bus.subscriber_count(LIVE_SCOREBOARD) == 1

    def test_unsupported_message(self, bus):
        client = TestClient(app)
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"action": "shout"})
            assert ws.receive_json()["event"] == "error"
            ws.send_text("not json")
            assert ws.receive_json()["event"] == "error"


@pytest.mark.anyio
class TestLiveConnection:
    async def test_deliver_sends_event_message(self):
        websocket = AsyncMock()
        connection = LiveConnection(websocket, EventBus())
        await connection.deliver(Event(LIVE_SCOREBOARD, MATCH_STARTED, {"matchId": 1}))
        websocket.send_json.assert_awaited_once_with(
            {"event": "match-started", "topic": "live-scoreboard", "data": {"matchId": 1}}
        )

    async def test_leave_all(self):
        bus = EventBus()
        connection = LiveConnection(AsyncMock(), bus)
        connection.join("match-1")
        connection.join(LIVE_SCOREBOARD)
        connection.leave_all()
        assert bus.subscriber_count("match-1") == 0
        assert bus.subscriber_count(LIVE_SCOREBOARD) == 0
        assert connection.topics == set()
