"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite:///./arena.db"

    # API Security
    # "key:identity" pairs, comma separated. Empty = no caller can mutate teams/tournaments.
    API_KEYS: str = ""
    API_KEY_HEADER: str = "X-API-Key"

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: str = "60/minute"
    SCORE_UPDATE_RATE_LIMIT: str = "300/minute"  # Scorers tap fast during rallies

    # CORS origin of the scoreboard client
    CLIENT_URL: str = "http://localhost:3000"

    # Prometheus /metrics bearer token (empty = open)
    METRICS_BEARER_TOKEN: str = ""

    # Real-time fan-out
    EVENT_BUS_MAX_QUEUE: int = 1000

    # Matches created without an explicit owner
    DEFAULT_CREATED_BY: str = "admin"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def parse_api_keys(raw: str) -> dict[str, str]:
    """
    Parse API_KEYS into {api_key: identity}.

    Format: "key1:alice,key2:bob". Entries without an identity map the key
    to itself. Blank entries are skipped.
    """
    keys: dict[str, str] = {}
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, _, identity = entry.partition(":")
        key = key.strip()
        if key:
            keys[key] = identity.strip() or key
    return keys
