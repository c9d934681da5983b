"""API-key identity and bearer token checks."""

import pytest
from fastapi import HTTPException

from arena.config import get_settings, parse_api_keys
from arena.security import CallerIdentity, require_identity, verify_bearer_token


class TestParseApiKeys:
    def test_pairs(self):
        assert parse_api_keys("k1:alice, k2:bob") == {"k1": "alice", "k2": "bob"}

    def test_key_without_identity_maps_to_itself(self):
        assert parse_api_keys("scorer-key") == {"scorer-key": "scorer-key"}

    def test_blank(self):
        assert parse_api_keys("") == {}
        assert parse_api_keys(" , ,") == {}


@pytest.mark.anyio
class TestRequireIdentity:
    async def test_known_key(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "API_KEYS", "k1:alice")
        assert await require_identity("k1") == CallerIdentity(name="alice")

    async def test_missing_key_is_401(self):
        with pytest.raises(HTTPException) as exc:
            await require_identity(None)
        assert exc.value.status_code == 401

    async def test_unknown_key_is_403(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "API_KEYS", "k1:alice")
        with pytest.raises(HTTPException) as exc:
            await require_identity("k2")
        assert exc.value.status_code == 403

    async def test_no_keys_configured_refuses(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "API_KEYS", "")
        with pytest.raises(HTTPException) as exc:
            await require_identity("anything")
        assert exc.value.status_code == 403


class TestBearerToken:
    def test_open_when_unset(self):
        assert verify_bearer_token(None, "") is None

    @pytest.mark.parametrize("header,reason", [
        (None, "Missing Authorization header"),
        ("Token abc", "Invalid Authorization format"),
        ("Bearer nope", "Invalid token"),
    ])
    def test_refusals(self, header, reason):
        assert verify_bearer_token(header, "abc") == reason

    def test_valid(self):
        assert verify_bearer_token("Bearer abc", "abc") is None
