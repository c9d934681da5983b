"""Tournament routes. Reads are public; every mutation requires an API key."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from arena.config import get_settings
from arena.matches.payloads import match_to_dict
from arena.security import CallerIdentity, limiter, require_identity
from arena.state import get_tournament_service
from arena.tournaments import TournamentService, tournament_to_dict

settings = get_settings()

router = APIRouter(prefix="/api/tournaments", tags=["tournaments"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TournamentCreateRequest(_CamelModel):
    name: str
    sport: str
    format: str
    start_date: datetime
    end_date: datetime
    teams: list[int] = []
    venue: Optional[str] = None
    description: Optional[str] = None


class AddTeamRequest(_CamelModel):
    team_id: int


class StatusUpdateRequest(_CamelModel):
    status: str
    winner: Optional[int] = None
    runner_up: Optional[int] = None


@router.get("")
@limiter.limit(settings.RATE_LIMIT_PER_MINUTE)
async def list_tournaments(request: Request, service: TournamentService = Depends(get_tournament_service)):
    tournaments = await service.list_tournaments()
    return {"success": True, "count": len(tournaments), "data": [tournament_to_dict(t) for t in tournaments]}


@router.get("/{tournament_id}")
@limiter.limit(settings.RATE_LIMIT_PER_MINUTE)
async def get_tournament(
    request: Request,
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
):
    tournament = await service.get_tournament(tournament_id)
    return {"success": True, "data": tournament_to_dict(tournament)}


@router.post("", status_code=201)
async def create_tournament(
    body: TournamentCreateRequest,
    service: TournamentService = Depends(get_tournament_service),
    caller: CallerIdentity = Depends(require_identity),
):
    tournament = await service.create_tournament(
        name=body.name,
        sport=body.sport,
        format=body.format,
        start_date=body.start_date,
        end_date=body.end_date,
        created_by=caller.name,
        team_ids=body.teams,
        venue=body.venue,
        description=body.description,
    )
    return {"success": True, "data": tournament_to_dict(tournament)}


@router.post("/{tournament_id}/teams")
async def add_team(
    tournament_id: int,
    body: AddTeamRequest,
    service: TournamentService = Depends(get_tournament_service),
    caller: CallerIdentity = Depends(require_identity),
):
    tournament = await service.add_team(tournament_id, body.team_id)
    return {"success": True, "data": tournament_to_dict(tournament)}


@router.post("/{tournament_id}/generate-matches")
async def generate_matches(
    tournament_id: int,
    service: TournamentService = Depends(get_tournament_service),
    caller: CallerIdentity = Depends(require_identity),
):
    tournament, matches = await service.generate_matches(tournament_id, created_by=caller.name)
    return {
        "success": True,
        "count": len(matches),
        "data": {
            "tournament": tournament_to_dict(tournament),
            "matches": [match_to_dict(m) for m in matches],
        },
    }


@router.put("/{tournament_id}/status")
async def update_status(
    tournament_id: int,
    body: StatusUpdateRequest,
    service: TournamentService = Depends(get_tournament_service),
    caller: CallerIdentity = Depends(require_identity),
):
    tournament = await service.update_status(
        tournament_id,
        body.status,
        winner=body.winner,
        runner_up=body.runner_up,
    )
    return {"success": True, "data": tournament_to_dict(tournament)}
