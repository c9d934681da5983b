"""Fixture generation for tournaments.

Round-robin (and league) plays every pair once, in team order:
    [1, 2, 3, 4] -> (1,2) (1,3) (1,4) (2,3) (2,4) (3,4)

Knockout pairs neighbours for the opening round; an odd team out gets a bye
and waits for the next round, which is drawn once winners are known:
    [1, 2, 3, 4, 5] -> (1,2) (3,4), bye: 5
"""

import math
from dataclasses import dataclass, field
from typing import Sequence


@dataclass
class Fixtures:
    pairs: list[tuple[int, int]] = field(default_factory=list)
    byes: list[int] = field(default_factory=list)


def round_robin(team_ids: Sequence[int]) -> Fixtures:
    pairs = [
        (team_ids[i], team_ids[j])
        for i in range(len(team_ids))
        for j in range(i + 1, len(team_ids))
    ]
    return Fixtures(pairs=pairs)


def knockout_first_round(team_ids: Sequence[int]) -> Fixtures:
    fixtures = Fixtures()
    for i in range(0, len(team_ids), 2):
        if i + 1 < len(team_ids):
            fixtures.pairs.append((team_ids[i], team_ids[i + 1]))
        else:
            fixtures.byes.append(team_ids[i])
    return fixtures


def knockout_rounds(team_count: int) -> int:
    """Number of rounds needed to reduce team_count entrants to one winner."""
    if team_count < 2:
        return 0
    return math.ceil(math.log2(team_count))


def generate_fixtures(format: str, team_ids: Sequence[int]) -> Fixtures:
    if format == "knockout":
        return knockout_first_round(team_ids)
    return round_robin(team_ids)
