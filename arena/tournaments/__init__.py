"""Tournaments and fixture generation."""

from arena.tournaments.scheduling import Fixtures, generate_fixtures, knockout_first_round, round_robin
from arena.tournaments.service import TournamentService, tournament_to_dict

__all__ = [
    "Fixtures",
    "TournamentService",
    "generate_fixtures",
    "knockout_first_round",
    "round_robin",
    "tournament_to_dict",
]
