"""Shared singletons for the arena application.

Singleton-by-import pattern: main.py and the routers resolve services from
this module so they all share one event bus, one match store and one set of
per-match locks. Tests replace them through app.dependency_overrides.
"""

from functools import lru_cache

from arena.config import get_settings
from arena.database import AsyncSessionLocal
from arena.events import get_event_bus
from arena.matches import MatchService, SqlMatchStore
from arena.teams import TeamService
from arena.tournaments import TournamentService


@lru_cache
def get_match_store() -> SqlMatchStore:
    return SqlMatchStore(AsyncSessionLocal)


@lru_cache
def get_match_service() -> MatchService:
    return MatchService(
        get_match_store(),
        get_event_bus(),
        default_created_by=get_settings().DEFAULT_CREATED_BY,
    )


@lru_cache
def get_team_service() -> TeamService:
    return TeamService(AsyncSessionLocal)


@lru_cache
def get_tournament_service() -> TournamentService:
    return TournamentService(AsyncSessionLocal, get_match_store())
