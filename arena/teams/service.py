"""Team CRUD and roster management."""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from arena.errors import NotFound, StoreFailure, ValidationFailure
from arena.models import Team, utcnow

logger = logging.getLogger(__name__)

# Scalar columns a client may set directly; "players" is validated separately
EDITABLE_FIELDS = ("name", "captain", "coach", "color", "logo")


def team_to_dict(team: Team) -> dict[str, Any]:
    return {
        "id": team.id,
        "name": team.name,
        "players": team.players or [],
        "captain": team.captain,
        "coach": team.coach,
        "color": team.color,
        "logo": team.logo,
        "createdAt": team.created_at.isoformat() if team.created_at else None,
        "updatedAt": team.updated_at.isoformat() if team.updated_at else None,
    }


def _clean_player(player: dict) -> dict:
    name = (player.get("name") or "").strip()
    if not name:
        raise ValidationFailure("Player name is required")
    jersey = player.get("jerseyNumber")
    if jersey is not None and (isinstance(jersey, bool) or not isinstance(jersey, int) or not 1 <= jersey <= 99):
        raise ValidationFailure("jerseyNumber must be between 1 and 99")
    position = player.get("position")
    return {
        "id": player.get("id") or uuid.uuid4().hex,
        "name": name,
        "position": position.strip() if isinstance(position, str) else position,
        "jerseyNumber": jersey,
    }


class TeamService:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def list_teams(self) -> list[Team]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Team).order_by(Team.created_at.desc(), Team.id.desc()))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"[TEAMS] list failed: {e}", exc_info=True)
            raise StoreFailure("Failed to list teams") from e

    async def get_team(self, team_id: int) -> Team:
        try:
            async with self._session_factory() as session:
                team = await session.get(Team, team_id)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Failed to load team {team_id}") from e
        if team is None:
            raise NotFound("Team not found")
        return team

    async def create_team(self, name: str, players: Optional[list[dict]] = None, **fields) -> Team:
        if not name or not name.strip():
            raise ValidationFailure("Team name is required")
        team = Team(
            name=name.strip(),
            players=[_clean_player(p) for p in players or []],
            **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS and v is not None},
        )
        team = await self._persist(team)
        logger.info(f"Team {team.id} created: {team.name}")
        return team

    async def update_team(self, team_id: int, changes: dict[str, Any]) -> Team:
        team = await self.get_team(team_id)
        for key, value in changes.items():
            if key not in EDITABLE_FIELDS:
                continue
            if key == "name" and (not value or not str(value).strip()):
                raise ValidationFailure("Team name is required")
            setattr(team, key, value.strip() if isinstance(value, str) else value)
        if "players" in changes:
            team.players = [_clean_player(p) for p in changes["players"] or []]
        team.updated_at = utcnow()
        return await self._persist(team)

    async def delete_team(self, team_id: int) -> None:
        try:
            async with self._session_factory() as session:
                team = await session.get(Team, team_id)
                if team is None:
                    raise NotFound("Team not found")
                await session.delete(team)
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreFailure(f"Failed to delete team {team_id}") from e
        logger.info(f"Team {team_id} deleted")

    async def add_player(self, team_id: int, player: dict) -> Team:
        team = await self.get_team(team_id)
        team.players = [*(team.players or []), _clean_player(player)]
        team.updated_at = utcnow()
        return await self._persist(team)

    async def remove_player(self, team_id: int, player_id: str) -> Team:
        team = await self.get_team(team_id)
        team.players = [p for p in team.players or [] if str(p.get("id")) != str(player_id)]
        team.updated_at = utcnow()
        return await self._persist(team)

    async def _persist(self, team: Team) -> Team:
        try:
            async with self._session_factory() as session:
                merged = await session.merge(team)
                await session.commit()
                await session.refresh(merged)
                return merged
        except SQLAlchemyError as e:
            logger.error(f"[TEAMS] save failed: {e}", exc_info=True)
            raise StoreFailure("Failed to save team") from e
