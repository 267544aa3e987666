import asyncio

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from core.config import settings
from core.security import get_current_session, require_api_key

from conftest import API_KEY, make_token


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture(autouse=True)
def reset_settings():
    original = {
        "DEBUG": settings.DEBUG,
        "SESSION_JWT_SECRET": settings.SESSION_JWT_SECRET,
    }
    try:
        yield
    finally:
        for key, value in original.items():
            setattr(settings, key, value)


def test_session_accepts_signed_token():
    settings.DEBUG = False

    payload = asyncio.run(get_current_session(_bearer(make_token(sub="editor-1"))))

    assert payload["sub"] == "editor-1"


@pytest.mark.parametrize("token", [
    make_token(secret="someone-elses-secret"),
    make_token(aud="anon"),
    make_token(sub=None),
    "not-a-jwt",
])
def test_session_rejects_bad_tokens(token):
    settings.DEBUG = False

    with pytest.raises(HTTPException) as exc:
        asyncio.run(get_current_session(_bearer(token)))

    assert exc.value.status_code == 401


def test_session_rejects_missing_credentials():
    settings.DEBUG = False

    with pytest.raises(HTTPException) as exc:
        asyncio.run(get_current_session(None))

    assert exc.value.status_code == 401


def test_session_check_skipped_in_debug():
    settings.DEBUG = True

    payload = asyncio.run(get_current_session(None))

    assert payload["sub"] == "debug"


def test_api_key_accepted():
    assert asyncio.run(require_api_key(API_KEY)) is None


@pytest.mark.parametrize("key", [None, "", "wrong-key"])
def test_api_key_rejected(key):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(require_api_key(key))

    assert exc.value.status_code == 401


def test_routes_without_api_key_are_rejected(client):
    resp = client.get("/api/profiles", headers={"apikey": "wrong"})
    assert resp.status_code == 401


def test_health_needs_no_api_key(client):
    resp = client.get("/health", headers={"apikey": ""})
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_storage_endpoint_derived_from_backend_url():
    assert settings.STORAGE_ENDPOINT_URL is None
    assert settings.storage_endpoint == "https://talent.example.co/storage/v1/s3"
