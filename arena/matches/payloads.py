"""Client-facing shapes: match documents and live event payloads.

Keys are camelCase to match what the scoreboard client renders.
"""

from datetime import datetime
from typing import Any, Optional

from arena.models import Match, utcnow


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def current_score(match: Match) -> Optional[dict]:
    """The match's active score record (None until the first scoring action)."""
    return match.score


def match_to_dict(match: Match) -> dict[str, Any]:
    return {
        "id": match.id,
        "tournament": match.tournament_id,
        "sport": match.sport,
        "teamA": match.team_a,
        "teamB": match.team_b,
        "playerA": match.player_a,
        "playerB": match.player_b,
        "status": match.status,
        "startTime": _iso(match.start_time),
        "endTime": _iso(match.end_time),
        "venue": match.venue,
        "score": current_score(match),
        "matchSettings": match.match_settings or {},
        "winner": match.winner,
        "winningReason": match.winning_reason,
        "completedAt": _iso(match.completed_at),
        "createdBy": match.created_by,
        "scoreHistory": match.score_history or [],
        "createdAt": _iso(match.created_at),
        "updatedAt": _iso(match.updated_at),
    }


def _base(match: Match) -> dict[str, Any]:
    return {
        "matchId": match.id,
        "sport": match.sport,
        "score": current_score(match),
        "status": match.status,
        "winner": match.winner,
        "winningReason": match.winning_reason,
        "timestamp": utcnow().isoformat(),
    }


def _sides(match: Match) -> dict[str, Any]:
    return {
        "teamA": match.team_a,
        "teamB": match.team_b,
        "playerA": match.player_a,
        "playerB": match.player_b,
    }


def score_update_payload(match: Match, action: str, side: Optional[str], details: Any) -> dict[str, Any]:
    """score-update, sent to the match room."""
    return {**_base(match), "action": action, "side": side, "details": details}


def live_score_update_payload(match: Match) -> dict[str, Any]:
    """live-score-update, sent to the global scoreboard."""
    return {**_base(match), **_sides(match)}


def match_started_payload(match: Match, scoreboard: bool = False) -> dict[str, Any]:
    payload = {**_base(match), "startTime": _iso(match.start_time)}
    if scoreboard:
        payload.update(_sides(match))
    return payload


def match_ended_payload(match: Match, scoreboard: bool = False) -> dict[str, Any]:
    payload = {
        **_base(match),
        "reason": match.winning_reason,
        "endTime": _iso(match.end_time or match.completed_at),
        "finalScore": current_score(match),
    }
    if scoreboard:
        payload.update(_sides(match))
    return payload
