"""Database models using SQLModel."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Naive UTC timestamp (columns are stored without timezone)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


MATCH_STATUSES = ("scheduled", "live", "completed", "cancelled")
TOURNAMENT_STATUSES = ("upcoming", "ongoing", "completed", "cancelled")
TOURNAMENT_FORMATS = ("knockout", "round-robin", "league")


class Team(SQLModel, table=True):
    """Team with an embedded roster."""

    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    players: list = Field(
        default_factory=list, sa_column=Column(JSON), description="[{id, name, position, jerseyNumber}]"
    )
    captain: Optional[str] = Field(default=None, max_length=255)
    coach: Optional[str] = Field(default=None, max_length=255)
    color: str = Field(default="#000000", max_length=20)
    logo: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Tournament(SQLModel, table=True):
    """Tournament grouping teams and the matches generated for them."""

    __tablename__ = "tournaments"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    sport: str = Field(max_length=20, index=True)
    format: str = Field(max_length=20, description="knockout, round-robin or league")
    team_ids: list = Field(default_factory=list, sa_column=Column(JSON))
    status: str = Field(default="upcoming", max_length=20)
    start_date: datetime
    end_date: datetime
    venue: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None)
    created_by: str = Field(max_length=255)
    match_ids: list = Field(default_factory=list, sa_column=Column(JSON))
    winner: Optional[int] = Field(default=None, description="Team id")
    runner_up: Optional[int] = Field(default=None, description="Team id")

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Match(SQLModel, table=True):
    """
    A single fixture in one sport.

    `score` holds the one active score record for `sport` (camelCase JSON),
    absent until the first scoring action. `score_history` is append-only
    apart from the cricket undo reset.
    """

    __tablename__ = "matches"

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: Optional[int] = Field(default=None, foreign_key="tournaments.id", index=True)
    sport: str = Field(max_length=20, index=True)

    # Team id or display name (free-form, as sent by the client)
    team_a: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    team_b: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    # {name, team} for individual sports
    player_a: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    player_b: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    status: str = Field(default="scheduled", max_length=20, index=True)
    start_time: Optional[datetime] = Field(default=None)
    end_time: Optional[datetime] = Field(default=None)
    venue: Optional[str] = Field(default=None, max_length=255)

    score: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    match_settings: dict = Field(
        default_factory=dict, sa_column=Column(JSON), description="e.g. totalSets, totalGames"
    )

    winner: Optional[str] = Field(default=None, max_length=20, description="Side label or 'draw'")
    winning_reason: Optional[str] = Field(default=None, max_length=255)
    completed_at: Optional[datetime] = Field(default=None)

    created_by: str = Field(max_length=255)
    score_history: list = Field(
        default_factory=list, sa_column=Column(JSON), description="[{action, side, details, timestamp}]"
    )

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)
