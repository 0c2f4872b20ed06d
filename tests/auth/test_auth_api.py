"""
Tests d'intégration des endpoints d'authentification.
"""
import pytest
from httpx import AsyncClient
from fastapi import status

from designshop.auth.security import decode_access_token
from designshop.users.models import User

AUTH_URL = "/api/auth"

pytestmark = pytest.mark.asyncio


async def test_login_returns_bearer_token(test_client: AsyncClient, test_user: User):
    response = await test_client.post(
        f"{AUTH_URL}/token",
        data={"username": test_user.email, "password": "testpassword"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token_type"] == "bearer"
    assert decode_access_token(data["access_token"]) == test_user.id


async def test_login_wrong_password(test_client: AsyncClient, test_user: User):
    response = await test_client.post(
        f"{AUTH_URL}/token",
        data={"username": test_user.email, "password": "wrong"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "message": "Invalid email or password"}
    assert response.headers["www-authenticate"] == "Bearer"


async def test_read_me(test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str]):
    response = await test_client.get(f"{AUTH_URL}/me", headers=auth_headers_user)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_user.id
    assert data["role"] == "user"
    assert "password_hash" not in data


async def test_token_of_deleted_user_rejected(test_client: AsyncClient, db_session, test_user: User, auth_headers_user: dict[str, str]):
    await db_session.delete(test_user)
    await db_session.commit()

    response = await test_client.get(f"{AUTH_URL}/me", headers=auth_headers_user)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Not authorized, token failed"
