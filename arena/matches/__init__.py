"""Match lifecycle, live scoring orchestration and persistence."""

from arena.matches.service import MatchService, parse_sport
from arena.matches.store import MatchStore, SqlMatchStore

__all__ = ["MatchService", "MatchStore", "SqlMatchStore", "parse_sport"]
