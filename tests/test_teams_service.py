"""TeamService: CRUD and roster validation."""

import pytest

from arena.errors import NotFound, ValidationFailure
from arena.teams import team_to_dict

pytestmark = pytest.mark.anyio


class TestTeams:
    async def test_create_with_roster(self, team_service):
        team = await team_service.create_team(
            " Lions ",
            players=[{"name": "Ravi", "position": "Batsman", "jerseyNumber": 7}],
            captain="Ravi",
        )
        assert team.name == "Lions"
        assert team.color == "#000000"
        assert team.captain == "Ravi"
        [player] = team.players
        assert player["name"] == "Ravi"
        assert player["jerseyNumber"] == 7
        assert player["id"]

    @pytest.mark.parametrize("jersey", [0, 100, "10"])
    async def test_jersey_number_range(self, team_service, jersey):
        with pytest.raises(ValidationFailure):
            await team_service.create_team("Lions", players=[{"name": "Ravi", "jerseyNumber": jersey}])

    async def test_blank_name_rejected(self, team_service):
        with pytest.raises(ValidationFailure):
            await team_service.create_team("   ")

    async def test_update_ignores_unknown_fields(self, team_service):
        team = await team_service.create_team("Lions")
        updated = await team_service.update_team(team.id, {"coach": "Mira", "id": 999})
        assert updated.id == team.id
        assert updated.coach == "Mira"

    async def test_add_and_remove_player(self, team_service):
        team = await team_service.create_team("Lions")
        team = await team_service.add_player(team.id, {"name": "Asha", "jerseyNumber": 10})
        player_id = team.players[0]["id"]
        team = await team_service.remove_player(team.id, player_id)
        assert team.players == []

    async def test_delete(self, team_service):
        team = await team_service.create_team("Lions")
        await team_service.delete_team(team.id)
        with pytest.raises(NotFound):
            await team_service.get_team(team.id)

    async def test_delete_missing(self, team_service):
        with pytest.raises(NotFound):
            await team_service.delete_team(5)

    async def test_list_and_dict_shape(self, team_service):
        await team_service.create_team("Lions")
        await team_service.create_team("Tigers")
        teams = await team_service.list_teams()
        assert [t.name for t in teams] == ["Tigers", "Lions"]
        data = team_to_dict(teams[0])
        assert set(data) == {"id", "name", "players", "captain", "coach", "color", "logo", "createdAt", "updatedAt"}
