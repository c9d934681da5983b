"""Team routes. Reads are public; every mutation requires an API key."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from arena.config import get_settings
from arena.security import CallerIdentity, limiter, require_identity
from arena.state import get_team_service
from arena.teams import TeamService, team_to_dict

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/api/teams", tags=["teams"])


class PlayerRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    position: Optional[str] = None
    jersey_number: Optional[int] = None


class TeamCreateRequest(BaseModel):
    name: str
    players: list[PlayerRequest] = []
    captain: Optional[str] = None
    coach: Optional[str] = None
    color: Optional[str] = None
    logo: Optional[str] = None


class TeamUpdateRequest(BaseModel):
    name: Optional[str] = None
    players: Optional[list[PlayerRequest]] = None
    captain: Optional[str] = None
    coach: Optional[str] = None
    color: Optional[str] = None
    logo: Optional[str] = None


def _player_dicts(players: list[PlayerRequest]) -> list[dict]:
    return [p.model_dump(by_alias=True) for p in players]


@router.get("")
@limiter.limit(settings.RATE_LIMIT_PER_MINUTE)
async def list_teams(request: Request, service: TeamService = Depends(get_team_service)):
    teams = await service.list_teams()
    return {"success": True, "count": len(teams), "data": [team_to_dict(t) for t in teams]}


@router.get("/{team_id}")
@limiter.limit(settings.RATE_LIMIT_PER_MINUTE)
async def get_team(request: Request, team_id: int, service: TeamService = Depends(get_team_service)):
    team = await service.get_team(team_id)
    return {"success": True, "data": team_to_dict(team)}


@router.post("", status_code=201)
async def create_team(
    body: TeamCreateRequest,
    service: TeamService = Depends(get_team_service),
    caller: CallerIdentity = Depends(require_identity),
):
    team = await service.create_team(
        body.name,
        players=_player_dicts(body.players),
        captain=body.captain,
        coach=body.coach,
        color=body.color,
        logo=body.logo,
    )
    logger.info(f"[TEAMS] {caller.name} created team {team.id}")
    return {"success": True, "data": team_to_dict(team)}


@router.put("/{team_id}")
async def update_team(
    team_id: int,
    body: TeamUpdateRequest,
    service: TeamService = Depends(get_team_service),
    caller: CallerIdentity = Depends(require_identity),
):
    changes = body.model_dump(exclude_unset=True, exclude={"players"})
    if body.players is not None:
        changes["players"] = _player_dicts(body.players)
    team = await service.update_team(team_id, changes)
    return {"success": True, "data": team_to_dict(team)}


@router.delete("/{team_id}")
async def delete_team(
    team_id: int,
    service: TeamService = Depends(get_team_service),
    caller: CallerIdentity = Depends(require_identity),
):
    await service.delete_team(team_id)
    logger.info(f"[TEAMS] {caller.name} deleted team {team_id}")
    return {"success": True, "message": "Team deleted successfully"}


@router.post("/{team_id}/players", status_code=201)
async def add_player(
    team_id: int,
    body: PlayerRequest,
    service: TeamService = Depends(get_team_service),
    caller: CallerIdentity = Depends(require_identity),
):
    team = await service.add_player(team_id, body.model_dump(by_alias=True))
    return {"success": True, "data": team_to_dict(team)}


@router.delete("/{team_id}/players/{player_id}")
async def remove_player(
    team_id: int,
    player_id: str,
    service: TeamService = Depends(get_team_service),
    caller: CallerIdentity = Depends(require_identity),
):
    team = await service.remove_player(team_id, player_id)
    return {"success": True, "data": team_to_dict(team)}
