"""
Match update orchestrator.

Owns a match for the duration of one operation:

    load -> apply action -> persist -> evaluate -> persist (if concluded) -> publish

Updates to the same match are serialised through a per-match asyncio.Lock,
so two scorers tapping at once cannot lose each other's points inside one
process. Different matches never wait on each other. Across processes the
store is last-write-wins.

Publishing is fire-and-forget: once state is persisted, a fan-out failure is
logged and counted but never turns the update into an error.

Lifecycle:
    scheduled -> live -> completed
    scheduled | live -> cancelled
Completed and cancelled matches are immutable except for deletion.
"""

import asyncio
import logging
import time
import weakref
from datetime import datetime
from typing import Any, Optional

from arena.errors import MatchStateConflict, NotFound, ValidationFailure
from arena.events.bus import (
    LIVE_SCORE_UPDATE,
    LIVE_SCOREBOARD,
    MATCH_ENDED,
    MATCH_STARTED,
    SCORE_UPDATE,
    Publisher,
    match_topic,
)
from arena.matches.payloads import (
    live_score_update_payload,
    match_ended_payload,
    match_started_payload,
    score_update_payload,
)
from arena.matches.store import MatchStore
from arena.models import Match, utcnow
from arena.scoring import (
    DRAW,
    Sport,
    apply_action,
    evaluate,
    is_known_action,
    load_score,
    materialize_default,
    side_labels,
)
from arena.telemetry.metrics import record_match_completed, record_publish_failure, record_score_update

logger = logging.getLogger(__name__)

CLOSED_STATUSES = ("completed", "cancelled")


def parse_sport(value: Any) -> Sport:
    try:
        return Sport(value)
    except ValueError:
        raise ValidationFailure(f"Unknown sport {value!r}. Expected one of: {', '.join(s.value for s in Sport)}")


class MatchService:
    """Match lifecycle and live scoring on top of a MatchStore and a Publisher."""

    def __init__(self, store: MatchStore, publisher: Publisher, default_created_by: str = "admin"):
        self._store = store
        self._publisher = publisher
        self._default_created_by = default_created_by
        # A lock lives only while some caller holds or awaits it.
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, match_id: int) -> asyncio.Lock:
        lock = self._locks.get(match_id)
        if lock is None:
            lock = self._locks[match_id] = asyncio.Lock()
        return lock

    async def _load(self, match_id: int) -> Match:
        match = await self._store.get(match_id)
        if match is None:
            raise NotFound("Match not found")
        return match

    # ── Reads ────────────────────────────────────────────────────────────────

    async def list_matches(self, status: Optional[str] = None, tournament_id: Optional[int] = None) -> list[Match]:
        matches = await self._store.find(status=status, tournament_id=tournament_id)
        logger.debug(f"Found {len(matches)} matches (status={status})")
        return matches

    async def list_live(self) -> list[Match]:
        return await self._store.find(status="live")

    async def get_match(self, match_id: int) -> Match:
        return await self._load(match_id)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    async def create_match(
        self,
        sport: str,
        team_a: Any = None,
        team_b: Any = None,
        player_a: Optional[dict] = None,
        player_b: Optional[dict] = None,
        venue: Optional[str] = None,
        start_time: Optional[datetime] = None,
        match_settings: Optional[dict] = None,
        tournament_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> Match:
        """Create a scheduled match. The score record is left absent until the first action."""
        match = Match(
            sport=parse_sport(sport).value,
            team_a=team_a,
            team_b=team_b,
            player_a=player_a,
            player_b=player_b,
            venue=venue,
            start_time=start_time,
            match_settings=match_settings or {},
            tournament_id=tournament_id,
            created_by=created_by or self._default_created_by,
        )
        match = await self._store.create(match)
        logger.info(f"Match {match.id} created ({match.sport})")
        return match

    async def start_match(self, match_id: int) -> Match:
        async with self._lock_for(match_id):
            match = await self._load(match_id)
            if match.status != "scheduled":
                raise MatchStateConflict(f"Match {match_id} is {match.status}, only scheduled matches can start")

            now = utcnow()
            match.status = "live"
            match.start_time = now
            match.updated_at = now
            match = await self._store.save(match)
            logger.info(f"Match {match.id} started ({match.sport})")

            await self._publish(match_topic(match.id), MATCH_STARTED, match_started_payload(match))
            await self._publish(LIVE_SCOREBOARD, MATCH_STARTED, match_started_payload(match, scoreboard=True))
            return match

    async def apply_score_update(
        self,
        match_id: int,
        action: str,
        side: Optional[str] = None,
        details: Optional[dict] = None,
        sport: Optional[str] = None,
    ) -> Match:
        """
        Apply one scoring action to a live match.

        The request's sport is optional; when given it must match the
        match's own sport. Unknown actions are recorded in the history and
        otherwise change nothing. Returns the persisted match, completed if
        the action decided it.
        """
        started = time.perf_counter()
        async with self._lock_for(match_id):
            match = await self._load(match_id)
            match_sport = parse_sport(match.sport)

            try:
                if sport is not None and parse_sport(sport) != match_sport:
                    raise ValidationFailure(f"Match {match_id} is {match_sport.value}, not {sport}")
                if match.status != "live":
                    raise MatchStateConflict(f"Match {match_id} is {match.status}, scores can only change while live")
                next_score = apply_action(match_sport, load_score(match_sport, match.score), action, side, details)
            except (ValidationFailure, MatchStateConflict):
                record_score_update(match_sport.value, "rejected")
                raise

            now = utcnow()
            match.score_history = [
                *(match.score_history or []),
                {"action": action, "side": side, "details": details, "timestamp": now.isoformat()},
            ]
            match.score = next_score.to_dict() if next_score is not None else None
            match.updated_at = now
            match = await self._store.save(match)

            concluded = False
            outcome = evaluate(match)
            if outcome is not None:
                match.status = "completed"
                match.winner = outcome.winner
                match.winning_reason = outcome.reason
                match.completed_at = now
                match = await self._store.save(match)
                concluded = True
                record_match_completed(match_sport.value, "auto")
                logger.info(f"Match {match.id} completed! Winner: {outcome.winner}, Reason: {outcome.reason}")

            record_score_update(
                match_sport.value,
                "applied" if is_known_action(match_sport, action) else "noop",
                (time.perf_counter() - started) * 1000,
            )

            await self._publish_score(match, action, side, details)
            if concluded:
                await self._publish_ended(match)
            return match

    async def end_match(
        self,
        match_id: int,
        winner: Optional[str] = None,
        winning_reason: Optional[str] = None,
    ) -> Match:
        """Terminate a match explicitly, e.g. by forfeit or an official's decision."""
        async with self._lock_for(match_id):
            match = await self._load(match_id)
            if match.status in CLOSED_STATUSES:
                raise MatchStateConflict(f"Match {match_id} is already {match.status}")

            allowed = (*side_labels(match.sport), DRAW)
            if winner is not None and winner not in allowed:
                raise ValidationFailure(f"Winner must be one of {allowed}, got {winner!r}")

            now = utcnow()
            match.status = "completed"
            match.winner = winner
            match.winning_reason = winning_reason
            match.end_time = now
            match.completed_at = now
            match.updated_at = now
            match = await self._store.save(match)
            record_match_completed(match.sport, "manual")
            logger.info(f"Match {match.id} ended manually. Winner: {winner}")

            await self._publish_ended(match)
            return match

    async def cancel_match(self, match_id: int) -> Match:
        async with self._lock_for(match_id):
            match = await self._load(match_id)
            if match.status in CLOSED_STATUSES:
                raise MatchStateConflict(f"Match {match_id} is already {match.status}")

            now = utcnow()
            match.status = "cancelled"
            match.end_time = now
            match.updated_at = now
            match = await self._store.save(match)
            logger.info(f"Match {match.id} cancelled")

            await self._publish_score(match, "cancel", None, None)
            return match

    async def undo_last_cricket_ball(self, match_id: int) -> Match:
        """
        Reset a cricket score to its zero-state and clear the history.

        This is a full reset, not a replay of the history minus its last
        entry.
        """
        async with self._lock_for(match_id):
            match = await self._load(match_id)
            if match.sport != Sport.CRICKET.value:
                raise ValidationFailure("Undo is only available for cricket matches")
            if match.status in CLOSED_STATUSES:
                raise MatchStateConflict(f"Match {match_id} is {match.status}")

            match.score = materialize_default(Sport.CRICKET).to_dict()
            match.score_history = []
            match.updated_at = utcnow()
            match = await self._store.save(match)
            logger.info(f"Match {match.id} cricket score reset")

            await self._publish_score(match, "undo", None, None)
            return match

    async def delete_match(self, match_id: int) -> None:
        async with self._lock_for(match_id):
            if not await self._store.delete(match_id):
                raise NotFound("Match not found")
        logger.info(f"Match {match_id} deleted")

    async def clear_matches(self) -> int:
        deleted = await self._store.clear()
        logger.warning(f"Cleared {deleted} matches")
        return deleted

    # ── Fan-out ──────────────────────────────────────────────────────────────

    async def _publish(self, topic: str, kind: str, payload: dict) -> None:
        try:
            await self._publisher.publish(topic, kind, payload)
        except Exception as e:
            record_publish_failure(kind)
            logger.error(f"[EVENTS] Failed to publish {kind} to {topic}: {e}", exc_info=True)

    async def _publish_score(self, match: Match, action: str, side: Optional[str], details: Any) -> None:
        await self._publish(match_topic(match.id), SCORE_UPDATE, score_update_payload(match, action, side, details))
        await self._publish(LIVE_SCOREBOARD, LIVE_SCORE_UPDATE, live_score_update_payload(match))

    async def _publish_ended(self, match: Match) -> None:
        await self._publish(match_topic(match.id), MATCH_ENDED, match_ended_payload(match))
        await self._publish(LIVE_SCOREBOARD, MATCH_ENDED, match_ended_payload(match, scoreboard=True))
