"""JWTBearer dependency outside of the HTTP stack."""

import uuid

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from src.notevault.core.access import Principal
from src.notevault.middleware import auth as auth_module
from src.notevault.middleware.auth import JWTBearer


def make_request(authorization=None):
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


async def test_valid_token_returns_principal_and_keeps_raw_token(monkeypatch):
    principal = Principal(user_id=uuid.uuid4(), email="ana@example.com")

    async def fake_principal(token):
        return principal if token == "good" else None

    monkeypatch.setattr(auth_module, "get_principal_from_token", fake_principal)
    request = make_request("Bearer good")

    assert await JWTBearer()(request) == principal
    assert request.state.access_token == "good"


async def test_invalid_token_is_401(monkeypatch):
    async def fake_principal(token):
        return None

    monkeypatch.setattr(auth_module, "get_principal_from_token", fake_principal)

    with pytest.raises(HTTPException) as exc:
        await JWTBearer()(make_request("Bearer bad"))
    assert exc.value.status_code == 401


async def test_missing_header_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await JWTBearer()(make_request())
    assert exc.value.status_code in (401, 403)


async def test_other_scheme_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await JWTBearer()(make_request("Basic dXNlcjpwYXNz"))
    assert exc.value.status_code in (401, 403)
