"""Match persistence.

MatchStore is the document-store seam the orchestrator depends on: get by
id, find with an optional status filter (newest first), create, save,
delete. SqlMatchStore implements it over the async SQLAlchemy engine.

Every call opens and commits its own session; instances handed back are
detached and safe to mutate. JSON columns must be re-assigned, not mutated
in place, for the change to be persisted.
"""

import logging
from typing import Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from arena.errors import StoreFailure
from arena.models import Match

logger = logging.getLogger(__name__)


class MatchStore(Protocol):
    async def get(self, match_id: int) -> Optional[Match]:
        ...

    async def find(self, status: Optional[str] = None, tournament_id: Optional[int] = None) -> list[Match]:
        ...

    async def create(self, match: Match) -> Match:
        ...

    async def create_many(self, matches: list[Match]) -> list[Match]:
        ...

    async def save(self, match: Match) -> Match:
        ...

    async def delete(self, match_id: int) -> bool:
        ...

    async def clear(self) -> int:
        ...


class SqlMatchStore:
    """MatchStore backed by the `matches` table."""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def get(self, match_id: int) -> Optional[Match]:
        try:
            async with self._session_factory() as session:
                return await session.get(Match, match_id)
        except SQLAlchemyError as e:
            logger.error(f"[STORE] get match {match_id} failed: {e}", exc_info=True)
            raise StoreFailure(f"Failed to load match {match_id}") from e

    async def find(self, status: Optional[str] = None, tournament_id: Optional[int] = None) -> list[Match]:
        stmt = select(Match)
        if status is not None:
            stmt = stmt.where(Match.status == status)
        if tournament_id is not None:
            stmt = stmt.where(Match.tournament_id == tournament_id)
        stmt = stmt.order_by(Match.created_at.desc(), Match.id.desc())
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"[STORE] list matches (status={status}) failed: {e}", exc_info=True)
            raise StoreFailure("Failed to list matches") from e

    async def create(self, match: Match) -> Match:
        created = await self.create_many([match])
        return created[0]

    async def create_many(self, matches: list[Match]) -> list[Match]:
        try:
            async with self._session_factory() as session:
                session.add_all(matches)
                await session.commit()
                for match in matches:
                    await session.refresh(match)
                return matches
        except SQLAlchemyError as e:
            logger.error(f"[STORE] create {len(matches)} matches failed: {e}", exc_info=True)
            raise StoreFailure("Failed to create match") from e

    async def save(self, match: Match) -> Match:
        try:
            async with self._session_factory() as session:
                merged = await session.merge(match)
                await session.commit()
                return merged
        except SQLAlchemyError as e:
            logger.error(f"[STORE] save match {match.id} failed: {e}", exc_info=True)
            raise StoreFailure(f"Failed to save match {match.id}") from e

    async def delete(self, match_id: int) -> bool:
        try:
            async with self._session_factory() as session:
                match = await session.get(Match, match_id)
                if match is None:
                    return False
                await session.delete(match)
                await session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"[STORE] delete match {match_id} failed: {e}", exc_info=True)
            raise StoreFailure(f"Failed to delete match {match_id}") from e

    async def clear(self) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(delete(Match))
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as e:
            logger.error(f"[STORE] clear matches failed: {e}", exc_info=True)
            raise StoreFailure("Failed to clear matches") from e
