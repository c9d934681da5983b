"""Fixture generation and TournamentService."""

from datetime import datetime

import pytest

from arena.errors import MatchStateConflict, NotFound, ValidationFailure
from arena.tournaments import knockout_first_round, round_robin
from arena.tournaments.scheduling import knockout_rounds


class TestScheduling:
    def test_round_robin_pairs_everyone_once(self):
        fixtures = round_robin([1, 2, 3, 4])
        assert fixtures.pairs == [(1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4)]
        assert fixtures.byes == []

    def test_knockout_even(self):
        fixtures = knockout_first_round([10, 20, 30, 40])
        assert fixtures.pairs == [(10, 20), (30, 40)]
        assert fixtures.byes == []

    def test_knockout_odd_gets_bye(self):
        fixtures = knockout_first_round([1, 2, 3, 4, 5])
        assert fixtures.pairs == [(1, 2), (3, 4)]
        assert fixtures.byes == [5]

    @pytest.mark.parametrize("teams,rounds", [(1, 0), (2, 1), (4, 2), (5, 3), (8, 3)])
    def test_knockout_rounds(self, teams, rounds):
        assert knockout_rounds(teams) == rounds


@pytest.mark.anyio
class TestTournamentService:
    async def _teams(self, team_service, count):
        return [(await team_service.create_team(f"Team {i}")).id for i in range(count)]

    async def _create(self, tournament_service, format="round-robin", team_ids=None):
        return await tournament_service.create_tournament(
            name="Spring Cup",
            sport="football",
            format=format,
            start_date=datetime(2026, 3, 1),
            end_date=datetime(2026, 3, 30),
            created_by="alice",
            team_ids=team_ids,
        )

    async def test_create(self, tournament_service):
        tournament = await self._create(tournament_service)
        assert tournament.status == "upcoming"
        assert tournament.created_by == "alice"
        assert tournament.team_ids == []

    async def test_create_rejects_unknown_format(self, tournament_service):
        with pytest.raises(ValidationFailure):
            await self._create(tournament_service, format="swiss")

    async def test_create_rejects_unknown_sport(self, tournament_service):
        with pytest.raises(ValidationFailure):
            await tournament_service.create_tournament(
                "Cup", "curling", "league", datetime(2026, 1, 1), datetime(2026, 1, 2), "alice"
            )

    async def test_add_team(self, tournament_service, team_service):
        [team_id] = await self._teams(team_service, 1)
        tournament = await self._create(tournament_service)
        tournament = await tournament_service.add_team(tournament.id, team_id)
        assert tournament.team_ids == [team_id]
        with pytest.raises(ValidationFailure):
            await tournament_service.add_team(tournament.id, team_id)

    async def test_add_missing_team(self, tournament_service):
        tournament = await self._create(tournament_service)
        with pytest.raises(NotFound):
            await tournament_service.add_team(tournament.id, 999)

    async def test_generate_round_robin(self, tournament_service, team_service, match_store):
        team_ids = await self._teams(team_service, 4)
        tournament = await self._create(tournament_service, team_ids=team_ids)

        tournament, matches = await tournament_service.generate_matches(tournament.id, created_by="bob")
        assert len(matches) == 6
        assert tournament.status == "ongoing"
        assert sorted(tournament.match_ids) == sorted(m.id for m in matches)
        assert all(m.status == "scheduled" and m.created_by == "bob" for m in matches)
        assert all(m.sport == "football" and m.tournament_id == tournament.id for m in matches)
        stored = await match_store.find(tournament_id=tournament.id)
        assert len(stored) == 6

    async def test_generate_twice_refused(self, tournament_service, team_service, match_store):
        team_ids = await self._teams(team_service, 3)
        tournament = await self._create(tournament_service, team_ids=team_ids)
        _, first = await tournament_service.generate_matches(tournament.id, created_by="bob")

        with pytest.raises(MatchStateConflict):
            await tournament_service.generate_matches(tournament.id, created_by="bob")

        tournament = await tournament_service.get_tournament(tournament.id)
        assert sorted(tournament.match_ids) == sorted(m.id for m in first)
        assert len(await match_store.find()) == 3

    async def test_generate_knockout_first_round(self, tournament_service, team_service):
        team_ids = await self._teams(team_service, 5)
        tournament = await self._create(tournament_service, format="knockout", team_ids=team_ids)
        _, matches = await tournament_service.generate_matches(tournament.id, created_by="bob")
        assert [(m.team_a, m.team_b) for m in matches] == [
            (team_ids[0], team_ids[1]),
            (team_ids[2], team_ids[3]),
        ]

    async def test_generate_needs_two_teams(self, tournament_service):
        tournament = await self._create(tournament_service, team_ids=[1])
        with pytest.raises(ValidationFailure):
            await tournament_service.generate_matches(tournament.id, created_by="bob")

    async def test_update_status(self, tournament_service):
        tournament = await self._create(tournament_service)
        tournament = await tournament_service.update_status(tournament.id, "completed", winner=3, runner_up=4)
        assert tournament.status == "completed"
        assert tournament.winner == 3
        assert tournament.runner_up == 4
        with pytest.raises(ValidationFailure):
            await tournament_service.update_status(tournament.id, "paused")

    async def test_get_missing(self, tournament_service):
        with pytest.raises(NotFound):
            await tournament_service.get_tournament(42)
