"""Tournament CRUD and match generation."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from arena.errors import MatchStateConflict, NotFound, StoreFailure, ValidationFailure
from arena.matches.service import parse_sport
from arena.matches.store import MatchStore
from arena.models import TOURNAMENT_FORMATS, TOURNAMENT_STATUSES, Match, Team, Tournament, utcnow
from arena.tournaments.scheduling import generate_fixtures, knockout_rounds

logger = logging.getLogger(__name__)


def tournament_to_dict(tournament: Tournament) -> dict[str, Any]:
    return {
        "id": tournament.id,
        "name": tournament.name,
        "sport": tournament.sport,
        "format": tournament.format,
        "teams": tournament.team_ids or [],
        "status": tournament.status,
        "startDate": tournament.start_date.isoformat() if tournament.start_date else None,
        "endDate": tournament.end_date.isoformat() if tournament.end_date else None,
        "venue": tournament.venue,
        "description": tournament.description,
        "createdBy": tournament.created_by,
        "matches": tournament.match_ids or [],
        "winner": tournament.winner,
        "runnerUp": tournament.runner_up,
        "createdAt": tournament.created_at.isoformat() if tournament.created_at else None,
        "updatedAt": tournament.updated_at.isoformat() if tournament.updated_at else None,
    }


class TournamentService:
    def __init__(self, session_factory: async_sessionmaker, match_store: MatchStore):
        self._session_factory = session_factory
        self._match_store = match_store

    async def list_tournaments(self) -> list[Tournament]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Tournament).order_by(Tournament.created_at.desc(), Tournament.id.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"[TOURNAMENTS] list failed: {e}", exc_info=True)
            raise StoreFailure("Failed to list tournaments") from e

    async def get_tournament(self, tournament_id: int) -> Tournament:
        try:
            async with self._session_factory() as session:
                tournament = await session.get(Tournament, tournament_id)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Failed to load tournament {tournament_id}") from e
        if tournament is None:
            raise NotFound("Tournament not found")
        return tournament

    async def create_tournament(
        self,
        name: str,
        sport: str,
        format: str,
        start_date: datetime,
        end_date: datetime,
        created_by: str,
        team_ids: Optional[list[int]] = None,
        venue: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Tournament:
        if not name or not name.strip():
            raise ValidationFailure("Tournament name is required")
        if format not in TOURNAMENT_FORMATS:
            raise ValidationFailure(f"Format must be one of {TOURNAMENT_FORMATS}")
        if end_date < start_date:
            raise ValidationFailure("endDate must not be before startDate")

        tournament = Tournament(
            name=name.strip(),
            sport=parse_sport(sport).value,
            format=format,
            start_date=start_date,
            end_date=end_date,
            created_by=created_by,
            team_ids=list(team_ids or []),
            venue=venue,
            description=description,
        )
        tournament = await self._persist(tournament)
        logger.info(f"Tournament {tournament.id} created: {tournament.name} ({tournament.format})")
        return tournament

    async def add_team(self, tournament_id: int, team_id: int) -> Tournament:
        tournament = await self.get_tournament(tournament_id)
        await self._require_team(team_id)
        if team_id in (tournament.team_ids or []):
            raise ValidationFailure(f"Team {team_id} is already in this tournament")
        tournament.team_ids = [*(tournament.team_ids or []), team_id]
        tournament.updated_at = utcnow()
        return await self._persist(tournament)

    async def generate_matches(self, tournament_id: int, created_by: str) -> tuple[Tournament, list[Match]]:
        """
        Create the tournament's scheduled matches and mark it ongoing.

        Knockout tournaments get their opening round only; see
        arena.tournaments.scheduling. Fixtures are generated once: a
        tournament that is already under way or has matches is refused.
        """
        tournament = await self.get_tournament(tournament_id)
        if tournament.status != "upcoming" or tournament.match_ids:
            raise MatchStateConflict(f"Tournament {tournament_id} already has its matches")
        team_ids = list(tournament.team_ids or [])
        if len(team_ids) < 2:
            raise ValidationFailure("At least two teams are required to generate matches")

        fixtures = generate_fixtures(tournament.format, team_ids)
        matches = await self._match_store.create_many([
            Match(
                tournament_id=tournament.id,
                sport=tournament.sport,
                team_a=team_a,
                team_b=team_b,
                status="scheduled",
                created_by=created_by,
            )
            for team_a, team_b in fixtures.pairs
        ])

        tournament.match_ids = [m.id for m in matches]
        tournament.status = "ongoing"
        tournament.updated_at = utcnow()
        tournament = await self._persist(tournament)

        logger.info(
            f"Tournament {tournament.id}: generated {len(matches)} {tournament.format} matches"
            + (
                f" (round 1 of {knockout_rounds(len(team_ids))}, byes: {fixtures.byes})"
                if tournament.format == "knockout" else ""
            )
        )
        return tournament, matches

    async def update_status(
        self,
        tournament_id: int,
        status: str,
        winner: Optional[int] = None,
        runner_up: Optional[int] = None,
    ) -> Tournament:
        if status not in TOURNAMENT_STATUSES:
            raise ValidationFailure(f"Status must be one of {TOURNAMENT_STATUSES}")
        tournament = await self.get_tournament(tournament_id)
        tournament.status = status
        if winner is not None:
            tournament.winner = winner
        if runner_up is not None:
            tournament.runner_up = runner_up
        tournament.updated_at = utcnow()
        return await self._persist(tournament)

    async def _require_team(self, team_id: int) -> None:
        try:
            async with self._session_factory() as session:
                team = await session.get(Team, team_id)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Failed to load team {team_id}") from e
        if team is None:
            raise NotFound("Team not found")

    async def _persist(self, tournament: Tournament) -> Tournament:
        try:
            async with self._session_factory() as session:
                merged = await session.merge(tournament)
                await session.commit()
                await session.refresh(merged)
                return merged
        except SQLAlchemyError as e:
            logger.error(f"[TOURNAMENTS] save failed: {e}", exc_info=True)
            raise StoreFailure("Failed to save tournament") from e
