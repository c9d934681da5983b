"""
Per-sport score records.

A match carries exactly one active score record, selected by its sport.
Records are stored as camelCase JSON (the scoreboard client reads the same
keys) and materialised lazily: a match has no record until its first
scoring action, at which point the sport's zero-state is created.

| Sport        | Record          | Zero-state                                          |
|--------------|-----------------|-----------------------------------------------------|
| cricket      | CricketScore    | all counters 0                                      |
| football     | FootballScore   | goals/cards 0, time 0, period "1st Half"            |
| basketball   | BasketballScore | points/fouls 0, quarter 1, time 600 (seconds)       |
| chess        | ChessScore      | no result, 1800s per clock, white to move           |
| volleyball   | VolleyballScore | points/sets 0, set 1, teamA serving, no set history |
| badminton    | RallyScore      | points/games 0, game 1, playerA serving             |
| table-tennis | RallyScore      | same as badminton                                   |
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Sport(str, Enum):
    CRICKET = "cricket"
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    VOLLEYBALL = "volleyball"
    BADMINTON = "badminton"
    TABLE_TENNIS = "table-tennis"
    CHESS = "chess"


TEAM_SIDES = ("teamA", "teamB")
PLAYER_SIDES = ("playerA", "playerB")

# Badminton and table tennis are scored per player, everything else per team.
INDIVIDUAL_SPORTS = frozenset({Sport.BADMINTON, Sport.TABLE_TENNIS})


def side_labels(sport: Sport) -> tuple[str, str]:
    """Return the (A, B) side labels a sport's score record is keyed by."""
    return PLAYER_SIDES if Sport(sport) in INDIVIDUAL_SPORTS else TEAM_SIDES


class ScoreRecord(BaseModel):
    """Base for all sport records: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# ── Cricket ──────────────────────────────────────────────────────────────────

class CricketExtras(ScoreRecord):
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0


class CricketSide(ScoreRecord):
    """Runs and wickets credited to one batting side."""

    runs: int = 0
    wickets: int = 0


class CricketScore(ScoreRecord):
    runs: int = 0
    wickets: int = 0
    overs: int = 0
    balls: int = 0
    extras: CricketExtras = Field(default_factory=CricketExtras)
    team_a: CricketSide = Field(default_factory=CricketSide)
    team_b: CricketSide = Field(default_factory=CricketSide)


# ── Football ─────────────────────────────────────────────────────────────────

FOOTBALL_PERIODS = ("1st Half", "2nd Half", "Extra Time", "Penalties")


class CardTally(ScoreRecord):
    yellow: int = 0
    red: int = 0


class FootballSide(ScoreRecord):
    goals: int = 0
    cards: CardTally = Field(default_factory=CardTally)


class FootballScore(ScoreRecord):
    team_a: FootballSide = Field(default_factory=FootballSide)
    team_b: FootballSide = Field(default_factory=FootballSide)
    time: int = 0  # minutes
    period: str = "1st Half"


# ── Basketball ───────────────────────────────────────────────────────────────

class BasketballSide(ScoreRecord):
    points: int = 0
    fouls: int = 0


class BasketballScore(ScoreRecord):
    team_a: BasketballSide = Field(default_factory=BasketballSide)
    team_b: BasketballSide = Field(default_factory=BasketballSide)
    quarter: int = 1
    time: int = 600  # seconds left in the quarter


# ── Chess ────────────────────────────────────────────────────────────────────

CHESS_RESULTS = ("1-0", "0-1", "1/2-1/2", "ongoing")


class ChessScore(ScoreRecord):
    result: Optional[str] = None
    white_time: int = 1800
    black_time: int = 1800
    current_player: str = "white"


# ── Set / game based sports ──────────────────────────────────────────────────

class VolleyballSide(ScoreRecord):
    points: int = 0
    sets: int = 0


class VolleyballScore(ScoreRecord):
    team_a: VolleyballSide = Field(default_factory=VolleyballSide)
    team_b: VolleyballSide = Field(default_factory=VolleyballSide)
    current_set: int = 1
    serving: str = "teamA"
    # Final point tally of each completed set, keyed by side label
    set_scores: list[dict[str, int]] = Field(default_factory=list)


class RallySide(ScoreRecord):
    points: int = 0
    games: int = 0


class RallyScore(ScoreRecord):
    """Badminton and table tennis share this shape."""

    player_a: RallySide = Field(default_factory=RallySide)
    player_b: RallySide = Field(default_factory=RallySide)
    current_game: int = 1
    serving: str = "playerA"
    game_scores: list[dict[str, int]] = Field(default_factory=list)


SCORE_TYPES: dict[Sport, type[ScoreRecord]] = {
    Sport.CRICKET: CricketScore,
    Sport.FOOTBALL: FootballScore,
    Sport.BASKETBALL: BasketballScore,
    Sport.CHESS: ChessScore,
    Sport.VOLLEYBALL: VolleyballScore,
    Sport.BADMINTON: RallyScore,
    Sport.TABLE_TENNIS: RallyScore,
}


def materialize_default(sport: Sport) -> ScoreRecord:
    """Create the zero-state record for a sport."""
    return SCORE_TYPES[Sport(sport)]()


def load_score(sport: Sport, data: Optional[dict]) -> Optional[ScoreRecord]:
    """Parse a stored score document. Returns None when the match has no record yet."""
    if data is None:
        return None
    return SCORE_TYPES[Sport(sport)].model_validate(data)
