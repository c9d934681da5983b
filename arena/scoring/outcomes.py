"""
Winning-condition evaluator.

evaluate(match) -> Outcome | None

Pure function of (sport, score, match settings); called after every applied
action. Returns None while the match is still going, and for any match that
has no score record yet.

Format constants are fixed here rather than in settings so that the same
history always evaluates to the same outcome.

Known quirks kept as-is:
- Cricket "overs completed" awards the match to teamB unless teamA has
  strictly more runs, so a tie goes to teamB.
- Basketball compares the clock (seconds, default 600) against 12, a
  minutes-scale threshold: any final-quarter clock of 12s or more concludes.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from arena.scoring.records import (
    BasketballScore,
    ChessScore,
    CricketScore,
    FootballScore,
    RallyScore,
    Sport,
    VolleyballScore,
    load_score,
)

DRAW = "draw"

CRICKET_MAX_OVERS = 20
CRICKET_ALL_OUT = 10
FOOTBALL_FULL_TIME = 90
BASKETBALL_FINAL_QUARTER = 4
BASKETBALL_END_TIME = 12

DEFAULT_TOTAL_SETS = 3
DEFAULT_TOTAL_GAMES = {Sport.BADMINTON: 3, Sport.TABLE_TENNIS: 5}

CHESS_ONGOING = "ongoing"
CHESS_SIDE_A_RESULTS = ("1-0", "teamA")
CHESS_SIDE_B_RESULTS = ("0-1", "teamB")


@dataclass(frozen=True)
class Outcome:
    """Who won a concluded match (a side label or "draw") and why."""

    winner: str
    reason: str


def evaluate(match: Any) -> Optional[Outcome]:
    """Evaluate a match-like object exposing sport, score and match_settings."""
    return evaluate_score(match.sport, match.score, getattr(match, "match_settings", None))


def evaluate_score(sport: str, score_data: Optional[dict], match_settings: Optional[dict] = None) -> Optional[Outcome]:
    try:
        sport = Sport(sport)
    except ValueError:
        return None
    score = load_score(sport, score_data)
    if score is None:
        return None

    settings = match_settings or {}
    if sport == Sport.CRICKET:
        return _cricket(score)
    if sport == Sport.FOOTBALL:
        return _football(score)
    if sport == Sport.BASKETBALL:
        return _basketball(score)
    if sport == Sport.VOLLEYBALL:
        return _volleyball(score, settings)
    if sport in (Sport.BADMINTON, Sport.TABLE_TENNIS):
        return _rally(score, sport, settings)
    if sport == Sport.CHESS:
        return _chess(score)
    return None


def _higher(a: int, b: int, label_a: str = "teamA", label_b: str = "teamB") -> str:
    if a > b:
        return label_a
    if b > a:
        return label_b
    return DRAW


def _cricket(score: CricketScore) -> Optional[Outcome]:
    if score.overs >= CRICKET_MAX_OVERS:
        winner = "teamA" if score.team_a.runs > score.team_b.runs else "teamB"
        return Outcome(winner, "Overs completed")

    if score.team_a.wickets >= CRICKET_ALL_OUT or score.team_b.wickets >= CRICKET_ALL_OUT:
        winner = "teamA" if score.team_a.wickets < CRICKET_ALL_OUT else "teamB"
        return Outcome(winner, "All wickets taken")

    return None


def _football(score: FootballScore) -> Optional[Outcome]:
    if score.time >= FOOTBALL_FULL_TIME:
        return Outcome(_higher(score.team_a.goals, score.team_b.goals), "Full time")
    return None


def _basketball(score: BasketballScore) -> Optional[Outcome]:
    if score.quarter >= BASKETBALL_FINAL_QUARTER and score.time >= BASKETBALL_END_TIME:
        return Outcome(_higher(score.team_a.points, score.team_b.points), "Game completed")
    return None


def _best_of(settings: dict, key: str, default: int) -> tuple[int, int]:
    """Return (total, required to win). Missing or zero totals fall back to the default."""
    total = settings.get(key) or default
    return total, math.ceil(total / 2)


def _volleyball(score: VolleyballScore, settings: dict) -> Optional[Outcome]:
    total, required = _best_of(settings, "totalSets", DEFAULT_TOTAL_SETS)
    if score.team_a.sets >= required or score.team_b.sets >= required:
        winner = "teamA" if score.team_a.sets >= required else "teamB"
        return Outcome(winner, f"Best of {total} sets completed")
    return None


def _rally(score: RallyScore, sport: Sport, settings: dict) -> Optional[Outcome]:
    total, required = _best_of(settings, "totalGames", DEFAULT_TOTAL_GAMES[sport])
    if score.player_a.games >= required or score.player_b.games >= required:
        winner = "playerA" if score.player_a.games >= required else "playerB"
        return Outcome(winner, f"Best of {total} games completed")
    return None


def _chess(score: ChessScore) -> Optional[Outcome]:
    if not score.result or score.result == CHESS_ONGOING:
        return None
    if score.result in CHESS_SIDE_A_RESULTS:
        winner = "teamA"
    elif score.result in CHESS_SIDE_B_RESULTS:
        winner = "teamB"
    else:
        winner = DRAW
    return Outcome(winner, "Game concluded")
