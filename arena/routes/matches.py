"""Match routes: lifecycle and live scoring.

Reads and score updates are public (scorers tap from the venue without
logging in); clearing every match requires an API key.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from arena.config import get_settings
from arena.matches import MatchService
from arena.matches.payloads import match_to_dict
from arena.security import CallerIdentity, limiter, require_identity
from arena.state import get_match_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/api/matches", tags=["matches"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MatchCreateRequest(_CamelModel):
    sport: str
    team_a: Optional[Any] = None
    team_b: Optional[Any] = None
    player_a: Optional[dict] = None
    player_b: Optional[dict] = None
    venue: Optional[str] = None
    start_time: Optional[datetime] = None
    match_settings: Optional[dict] = None
    tournament: Optional[int] = None
    created_by: Optional[str] = None


class ScoreUpdateRequest(_CamelModel):
    sport: Optional[str] = None
    action: str
    # Older scorer clients send the acting side as "team"
    side: Optional[str] = Field(default=None, validation_alias=AliasChoices("side", "team"))
    details: Optional[dict] = None


class EndMatchRequest(_CamelModel):
    winner: Optional[str] = None
    winning_reason: Optional[str] = None


@router.get("")
@limiter.limit(settings.RATE_LIMIT_PER_MINUTE)
async def list_matches(
    request: Request,
    status: Optional[str] = Query(None),
    tournament: Optional[int] = Query(None),
    service: MatchService = Depends(get_match_service),
):
    matches = await service.list_matches(status=status, tournament_id=tournament)
    return {"success": True, "count": len(matches), "data": [match_to_dict(m) for m in matches]}


@router.get("/live")
@limiter.limit(settings.RATE_LIMIT_PER_MINUTE)
async def list_live_matches(request: Request, service: MatchService = Depends(get_match_service)):
    """Live matches, each carrying its current score under "score"."""
    matches = await service.list_live()
    return {"success": True, "count": len(matches), "data": [match_to_dict(m) for m in matches]}


@router.delete("/clear")
async def clear_matches(
    service: MatchService = Depends(get_match_service),
    caller: CallerIdentity = Depends(require_identity),
):
    deleted = await service.clear_matches()
    logger.warning(f"[MATCHES] {caller.name} cleared all matches ({deleted})")
    return {"success": True, "count": deleted, "message": "All matches cleared"}


@router.get("/{match_id}")
@limiter.limit(settings.RATE_LIMIT_PER_MINUTE)
async def get_match(request: Request, match_id: int, service: MatchService = Depends(get_match_service)):
    match = await service.get_match(match_id)
    return {"success": True, "data": match_to_dict(match)}


@router.post("", status_code=201)
async def create_match(body: MatchCreateRequest, service: MatchService = Depends(get_match_service)):
    match = await service.create_match(
        sport=body.sport,
        team_a=body.team_a,
        team_b=body.team_b,
        player_a=body.player_a,
        player_b=body.player_b,
        venue=body.venue,
        start_time=body.start_time,
        match_settings=body.match_settings,
        tournament_id=body.tournament,
        created_by=body.created_by,
    )
    return {"success": True, "data": match_to_dict(match)}


@router.put("/{match_id}/score")
@limiter.limit(settings.SCORE_UPDATE_RATE_LIMIT)
async def update_match_score(
    request: Request,
    match_id: int,
    body: ScoreUpdateRequest,
    service: MatchService = Depends(get_match_service),
):
    match = await service.apply_score_update(
        match_id,
        body.action,
        side=body.side,
        details=body.details,
        sport=body.sport,
    )
    return {"success": True, "data": match_to_dict(match)}


@router.put("/{match_id}/start")
async def start_match(match_id: int, service: MatchService = Depends(get_match_service)):
    match = await service.start_match(match_id)
    return {"success": True, "data": match_to_dict(match)}


@router.put("/{match_id}/end")
async def end_match(
    match_id: int,
    body: Optional[EndMatchRequest] = None,
    service: MatchService = Depends(get_match_service),
):
    body = body or EndMatchRequest()
    match = await service.end_match(match_id, winner=body.winner, winning_reason=body.winning_reason)
    return {"success": True, "data": match_to_dict(match)}


@router.put("/{match_id}/cancel")
async def cancel_match(match_id: int, service: MatchService = Depends(get_match_service)):
    match = await service.cancel_match(match_id)
    return {"success": True, "data": match_to_dict(match)}


@router.post("/{match_id}/undo")
async def undo_last_ball(match_id: int, service: MatchService = Depends(get_match_service)):
    match = await service.undo_last_cricket_ball(match_id)
    return {
        "success": True,
        "data": {"score": match.score},
        "message": "Cricket score reset",
    }


@router.delete("/{match_id}")
async def delete_match(match_id: int, service: MatchService = Depends(get_match_service)):
    await service.delete_match(match_id)
    return {"success": True, "message": "Match deleted successfully"}
