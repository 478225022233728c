"""Tests for sign-up, sign-in and the auth state stream"""

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from digital_menu.main import create_app
from digital_menu.runtime import start_runtime, stop_runtime
from digital_menu.services import auth_service


@pytest.mark.asyncio
async def test_signup_then_me(client: AsyncClient):
    response = await client.post(
        "/auth/signup", json={"email": "Owner@Example.com", "password": "secret123"}
    )
    assert response.status_code == 201
    token = response.json()["access_token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "owner@example.com"


@pytest.mark.asyncio
async def test_duplicate_signup_is_rejected(client: AsyncClient, test_user):
    response = await client.post(
        "/auth/signup", json={"email": "admin@example.com", "password": "another123"}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_with_wrong_password(client: AsyncClient, test_user):
    response = await client.post(
        "/auth/login", data={"username": "admin@example.com", "password": "nope"}
    )

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_login_and_refresh(client: AsyncClient, test_user):
    login = await client.post(
        "/auth/login", data={"username": "admin@example.com", "password": "adminpass123"}
    )
    assert login.status_code == 200
    tokens = login.json()
    assert tokens["token_type"] == "bearer"

    refreshed = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200

    access = await client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert access.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: AsyncClient):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_auth_state_stream(client: AsyncClient, runtime, test_user):
    seen = []
    unsubscribe = runtime.auth_events.on_auth_state_change(seen.append)

    login = await client.post(
        "/auth/login", data={"username": "admin@example.com", "password": "adminpass123"}
    )
    token = login.json()["access_token"]
    logout = await client.post("/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert logout.status_code == 200

    unsubscribe()
    assert [user.email if user else None for user in seen] == ["admin@example.com", None]

    # Sign-out invalidates the refresh token
    refreshed = await client.post(
        "/auth/refresh", json={"refresh_token": login.json()["refresh_token"]}
    )
    assert refreshed.status_code == 401


@pytest.mark.asyncio
async def test_tokens_use_the_application_secret(test_settings):
    settings = test_settings.model_copy(update={"jwt_secret_key": "injected-secret"})
    runtime = await start_runtime(settings)
    try:
        async with runtime.session_factory() as db:
            user = await auth_service.sign_up(db, "chef@example.com", "secret123")

        app = create_app(settings)
        app.state.runtime = runtime
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            payload = {
                "sub": str(user.id),
                "exp": datetime.utcnow() + timedelta(minutes=5),
                "type": "access",
            }
            own = jwt.encode(payload, "injected-secret", algorithm=settings.jwt_algorithm)
            other = jwt.encode(payload, "some-other-secret", algorithm=settings.jwt_algorithm)

            accepted = await client.get("/auth/me", headers={"Authorization": f"Bearer {own}"})
            rejected = await client.get("/auth/me", headers={"Authorization": f"Bearer {other}"})

            login = await client.post(
                "/auth/login", data={"username": "chef@example.com", "password": "secret123"}
            )
            issued = jwt.decode(
                login.json()["access_token"], "injected-secret", algorithms=[settings.jwt_algorithm]
            )
    finally:
        await stop_runtime(runtime)

    assert accepted.status_code == 200
    assert accepted.json()["email"] == "chef@example.com"
    assert rejected.status_code == 401
    assert issued["sub"] == str(user.id)
