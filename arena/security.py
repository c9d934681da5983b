"""Security: rate limiting and API-key caller identity."""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader
from slowapi import Limiter
from slowapi.util import get_remote_address

from arena.config import get_settings, parse_api_keys

logger = logging.getLogger(__name__)
settings = get_settings()

# Rate limiter using client IP
limiter = Limiter(key_func=get_remote_address)

# API key header identifying the caller on mutating endpoints
api_key_header = APIKeyHeader(name=settings.API_KEY_HEADER, auto_error=False)


@dataclass(frozen=True)
class CallerIdentity:
    """Who is making a request; stamped into createdBy on the records it creates."""

    name: str


async def require_identity(
    api_key: Optional[str] = Security(api_key_header),
) -> CallerIdentity:
    """
    Resolve the caller from the API key header.

    With no API_KEYS configured every mutating request is refused
    (fail-closed).
    """
    if not api_key:
        raise HTTPException(
            status_code=401,
            detail=f"Missing API key. Provide it via {settings.API_KEY_HEADER} header.",
        )

    identity = parse_api_keys(get_settings().API_KEYS).get(api_key)
    if identity is None:
        logger.warning("Invalid API key attempt from request")
        raise HTTPException(status_code=403, detail="Invalid API key")

    return CallerIdentity(name=identity)


def verify_bearer_token(authorization: Optional[str], expected_token: str) -> Optional[str]:
    """
    Check an "Authorization: Bearer <token>" header.

    Returns None when access is granted, otherwise the reason it was refused.
    An empty expected token leaves the endpoint open.
    """
    if not expected_token:
        return None
    if not authorization:
        return "Missing Authorization header"
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return "Invalid Authorization format"
    if parts[1] != expected_token:
        return "Invalid token"
    return None
