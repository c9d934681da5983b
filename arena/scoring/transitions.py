"""
Score transition engine.

apply_action(sport, score, action, side, details) -> score

Pure: the input record is never mutated, a new record is returned. Each sport
has its own transition function; they share only this calling convention.

Unknown actions are no-ops and return the input untouched (including None
for a match that has no score record yet). Known actions materialise the
sport's zero-state on first use and reject missing or mistyped details with
InvalidAction before anything is changed.
"""

import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from arena.errors import ValidationFailure
from arena.scoring.records import (
    CHESS_RESULTS,
    FOOTBALL_PERIODS,
    PLAYER_SIDES,
    TEAM_SIDES,
    BasketballScore,
    ChessScore,
    CricketScore,
    FootballScore,
    ScoreRecord,
    Sport,
    materialize_default,
    side_labels,
)

logger = logging.getLogger(__name__)

# Explicit wholesale replacement of a set/game score by an authoritative feed
SYNC_SCORE = "syncScore"

ACTIONS: dict[Sport, frozenset[str]] = {
    Sport.CRICKET: frozenset({"runs", "boundary", "wicket", "wide", "noBall"}),
    Sport.FOOTBALL: frozenset({"goal", "card", "time"}),
    Sport.BASKETBALL: frozenset({"points", "foul", "quarter", "time"}),
    Sport.CHESS: frozenset({"result", "time", "switch"}),
    Sport.VOLLEYBALL: frozenset({"point", "set", "serve", SYNC_SCORE}),
    Sport.BADMINTON: frozenset({"point", "game", "serve", SYNC_SCORE}),
    Sport.TABLE_TENNIS: frozenset({"point", "game", "serve", SYNC_SCORE}),
}

# Side results older clients still send for chess
LEGACY_CHESS_RESULTS = ("teamA", "teamB", "draw")

CRICKET_OVER_BALLS = 6


class InvalidAction(ValidationFailure):
    """A known action arrived with unusable details or side."""


def is_known_action(sport: Sport, action: str) -> bool:
    return action in ACTIONS[Sport(sport)]


def apply_action(
    sport: Sport,
    score: Optional[ScoreRecord],
    action: str,
    side: Optional[str],
    details: Optional[dict[str, Any]],
) -> Optional[ScoreRecord]:
    """Apply one scoring action and return the next score record."""
    sport = Sport(sport)
    if not is_known_action(sport, action):
        logger.debug(f"[SCORE] Ignoring unknown {sport.value} action {action!r}")
        return score

    current = score.model_copy(deep=True) if score is not None else materialize_default(sport)
    return _TRANSITIONS[sport](current, sport, action, side, details or {})


# ── Detail helpers ───────────────────────────────────────────────────────────

def _int_detail(details: dict, key: str, action: str) -> int:
    value = details.get(key)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAction(f"Action '{action}' requires an integer details.{key}")
    return value


def _side_attr(sport: Sport, side: Optional[str], action: str) -> str:
    """
    Map an acting side to the record attribute it scores on.

    Both label families are accepted for every sport (a badminton scorer
    sending "teamA" means playerA).
    """
    if side in (TEAM_SIDES[0], PLAYER_SIDES[0]):
        index = 0
    elif side in (TEAM_SIDES[1], PLAYER_SIDES[1]):
        index = 1
    else:
        raise InvalidAction(f"Action '{action}' requires a side (teamA/teamB or playerA/playerB), got {side!r}")
    return _side_fields(sport)[index]


# ── Cricket ──────────────────────────────────────────────────────────────────

def _apply_cricket(score: CricketScore, sport, action, side, details) -> CricketScore:
    consumes_ball = False

    if action == "runs":
        batting = getattr(score, _side_attr(sport, side, action))
        runs = _int_detail(details, "runs", action)
        score.runs += runs
        batting.runs += runs
        # Only 1, 2 and 3 use up a ball on this action; "boundary" always does.
        consumes_ball = runs in (1, 2, 3)
    elif action == "boundary":
        batting = getattr(score, _side_attr(sport, side, action))
        runs = _int_detail(details, "runs", action)
        score.runs += runs
        batting.runs += runs
        consumes_ball = True
    elif action == "wicket":
        batting = getattr(score, _side_attr(sport, side, action))
        score.wickets += 1
        batting.wickets += 1
        consumes_ball = True
    elif action in ("wide", "noBall"):
        if action == "wide":
            score.extras.wides += 1
        else:
            score.extras.no_balls += 1
        score.runs += 1
        # Extras are credited to a side only when the scorer names one.
        if side is not None:
            getattr(score, _side_attr(sport, side, action)).runs += 1

    if consumes_ball:
        score.balls += 1
    if score.balls >= CRICKET_OVER_BALLS:
        score.overs += 1
        score.balls = 0
    return score


# ── Football ─────────────────────────────────────────────────────────────────

def _apply_football(score: FootballScore, sport, action, side, details) -> FootballScore:
    if action == "goal":
        getattr(score, _side_attr(sport, side, action)).goals += 1
    elif action == "card":
        team = getattr(score, _side_attr(sport, side, action))
        card_type = details.get("cardType")
        if card_type == "yellow":
            team.cards.yellow += 1
        elif card_type == "red":
            team.cards.red += 1
    elif action == "time":
        score.time = _int_detail(details, "time", action)
        if "period" in details:
            if details["period"] not in FOOTBALL_PERIODS:
                raise InvalidAction(f"Unknown football period {details['period']!r}")
            score.period = details["period"]
    return score


# ── Basketball ───────────────────────────────────────────────────────────────

def _apply_basketball(score: BasketballScore, sport, action, side, details) -> BasketballScore:
    if action == "points":
        getattr(score, _side_attr(sport, side, action)).points += _int_detail(details, "points", action)
    elif action == "foul":
        getattr(score, _side_attr(sport, side, action)).fouls += 1
    elif action in ("quarter", "time"):
        # Either action may carry both the quarter and the clock.
        if "quarter" not in details and "time" not in details:
            raise InvalidAction(f"Action '{action}' requires details.quarter and/or details.time")
        if "quarter" in details:
            score.quarter = _int_detail(details, "quarter", action)
        if "time" in details:
            score.time = _int_detail(details, "time", action)
    return score


# ── Chess ────────────────────────────────────────────────────────────────────

def _chess_player(details: dict, action: str) -> str:
    player = details.get("currentPlayer")
    if player not in ("white", "black"):
        raise InvalidAction(f"Action '{action}' requires details.currentPlayer of 'white' or 'black'")
    return player


def _apply_chess(score: ChessScore, sport, action, side, details) -> ChessScore:
    if action == "result":
        result = details.get("result")
        if result not in CHESS_RESULTS and result not in LEGACY_CHESS_RESULTS:
            raise InvalidAction(f"Unknown chess result {result!r}")
        score.result = result
    elif action == "time":
        # Partial update: absent clocks are left alone.
        if "whiteTime" in details:
            score.white_time = _int_detail(details, "whiteTime", action)
        if "blackTime" in details:
            score.black_time = _int_detail(details, "blackTime", action)
        if "currentPlayer" in details:
            score.current_player = _chess_player(details, action)
    elif action == "switch":
        score.current_player = _chess_player(details, action)
    return score


# ── Volleyball / badminton / table tennis ────────────────────────────────────

# sport -> (tally field, current field, history field, completion action)
_SET_FIELDS = {
    Sport.VOLLEYBALL: ("sets", "current_set", "set_scores", "set"),
    Sport.BADMINTON: ("games", "current_game", "game_scores", "game"),
    Sport.TABLE_TENNIS: ("games", "current_game", "game_scores", "game"),
}


def snapshot_labels(sport: Sport, details: Any) -> Optional[tuple[str, str]]:
    """Return the side labels used by a full-score snapshot, or None if details is not one."""
    if not isinstance(details, dict):
        return None
    for labels in (side_labels(sport), TEAM_SIDES):
        if all(label in details for label in labels):
            return labels
    return None


def _sync_score(score: ScoreRecord, sport: Sport, details: dict, action: str) -> ScoreRecord:
    """
    Replace the current set/game score wholesale from an authoritative snapshot.

    Side values may be a bare point count or a {points, sets|games} object.
    Top-level keys present in the snapshot (current set/game, serving,
    history) replace the stored ones as well.
    """
    labels = snapshot_labels(sport, details)
    if labels is None:
        raise InvalidAction(f"Action '{action}' requires both sides in details")

    data = score.to_dict()
    for incoming, own in zip(labels, side_labels(sport)):
        value = details[incoming]
        if isinstance(value, dict):
            data[own] = {**data[own], **value}
        else:
            data[own] = {**data[own], "points": value}

    _, current, history, _ = _SET_FIELDS[sport]
    for field in (current, history):
        key = to_camel(field)
        if key in details:
            data[key] = details[key]
    if "serving" in details:
        data["serving"] = _serving_label(sport, details["serving"])

    try:
        return type(score).model_validate(data)
    except ValidationError as e:
        raise InvalidAction(f"Invalid score snapshot: {e.errors()[0]['msg']}") from e


def _serving_label(sport: Sport, serving) -> str:
    """Normalise a snapshot's serving side to the sport's own label family."""
    for index, labels in enumerate(zip(TEAM_SIDES, PLAYER_SIDES)):
        if serving in labels:
            return side_labels(sport)[index]
    raise InvalidAction(f"details.serving must be one of {side_labels(sport)}, got {serving!r}")


def _apply_set_sport(score, sport, action, side, details):
    tally, current, history, completion = _SET_FIELDS[sport]

    if action == SYNC_SCORE:
        return _sync_score(score, sport, details, action)

    if action == "point":
        # Legacy clients push the whole score through "point".
        if snapshot_labels(sport, details) is not None:
            return _sync_score(score, sport, details, action)
        getattr(score, _side_attr(sport, side, action)).points += 1
    elif action == completion:
        winner = getattr(score, _side_attr(sport, side, action))
        label_a, label_b = side_labels(sport)
        side_a, side_b = (getattr(score, name) for name in _side_fields(sport))
        getattr(score, history).append({label_a: side_a.points, label_b: side_b.points})
        setattr(winner, tally, getattr(winner, tally) + 1)
        setattr(score, current, getattr(score, current) + 1)
        side_a.points = 0
        side_b.points = 0
    elif action == "serve":
        serving = details.get("serving")
        if serving not in side_labels(sport):
            raise InvalidAction(f"details.serving must be one of {side_labels(sport)}, got {serving!r}")
        score.serving = serving
    return score


def _side_fields(sport: Sport) -> tuple[str, str]:
    if sport in (Sport.BADMINTON, Sport.TABLE_TENNIS):
        return ("player_a", "player_b")
    return ("team_a", "team_b")


_TRANSITIONS: dict[Sport, Callable[..., ScoreRecord]] = {
    Sport.CRICKET: _apply_cricket,
    Sport.FOOTBALL: _apply_football,
    Sport.BASKETBALL: _apply_basketball,
    Sport.CHESS: _apply_chess,
    Sport.VOLLEYBALL: _apply_set_sport,
    Sport.BADMINTON: _apply_set_sport,
    Sport.TABLE_TENNIS: _apply_set_sport,
}
