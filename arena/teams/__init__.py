"""Teams and their rosters."""

from arena.teams.service import TeamService, team_to_dict

__all__ = ["TeamService", "team_to_dict"]
