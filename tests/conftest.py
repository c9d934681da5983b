"""Shared fixtures: in-memory database, recording publisher, services."""

import pytest

from arena.database import build_engine, build_session_factory, init_db
from arena.matches import MatchService, SqlMatchStore
from arena.teams import TeamService
from arena.tournaments import TournamentService


@pytest.fixture
def anyio_backend():
    return "asyncio"


class RecordingPublisher:
    """Publisher that keeps every (topic, kind, payload) it is handed."""

    def __init__(self):
        self.events: list[tuple[str, str, dict]] = []

    async def publish(self, topic: str, kind: str, payload: dict) -> None:
        self.events.append((topic, kind, payload))

    def kinds(self, topic: str) -> list[str]:
        return [kind for t, kind, _ in self.events if t == topic]


class FailingPublisher:
    """Publisher whose transport is down."""

    def __init__(self):
        self.attempts = 0

    async def publish(self, topic: str, kind: str, payload: dict) -> None:
        self.attempts += 1
        raise ConnectionError("socket transport unavailable")


@pytest.fixture
async def session_factory():
    engine = build_engine("sqlite:///:memory:")
    await init_db(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def match_store(session_factory):
    return SqlMatchStore(session_factory)


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def match_service(match_store, publisher):
    return MatchService(match_store, publisher)


@pytest.fixture
def team_service(session_factory):
    return TeamService(session_factory)


@pytest.fixture
def tournament_service(session_factory, match_store):
    return TournamentService(session_factory, match_store)
