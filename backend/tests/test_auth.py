"""
Authentication endpoint tests
"""
import pytest
from httpx import AsyncClient

from bachub.core.config import settings
from bachub.models import User

REGISTER_PAYLOAD = {
    "username": "nouvel_eleve",
    "password": "secret123",
    "confirmPassword": "secret123",
    "email": "nouvel@example.com",
    "fullName": "Nouvel Élève",
}


class TestRegister:
    """Test user registration"""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient):
        response = await client.post("/api/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "nouvel_eleve"
        assert data["fullName"] == "Nouvel Élève"
        assert data["role"] == "user"
        assert "password" not in data
        assert settings.SESSION_COOKIE_NAME in response.cookies

    @pytest.mark.asyncio
    async def test_register_cannot_choose_admin_role(self, client: AsyncClient):
        response = await client.post("/api/register", json={**REGISTER_PAYLOAD, "role": "admin"})

        assert response.status_code == 201
        assert response.json()["role"] == "user"

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/register",
            json={**REGISTER_PAYLOAD, "username": test_user.username.upper()}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Username already exists"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, test_user: User):
        response = await client.post("/api/register", json={**REGISTER_PAYLOAD, "email": test_user.email})

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    @pytest.mark.asyncio
    async def test_register_validation_error(self, client: AsyncClient):
        response = await client.post(
            "/api/register",
            json={"username": "ab", "password": "123", "email": "bad", "fullName": "X"}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["detail"] == "Validation failed"
        fields = {e["field"] for e in data["errors"]}
        assert {"username", "password", "email"} <= fields


class TestLogin:
    """Test login, session cookie and logout"""

    @pytest.mark.asyncio
    async def test_login_success_sets_cookie(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/login",
            json={"username": test_user.username, "password": "testpassword123"}
        )

        assert response.status_code == 200
        assert response.json()["id"] == test_user.id
        assert settings.SESSION_COOKIE_NAME in response.cookies
        assert "httponly" in response.headers["set-cookie"].lower()

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/login",
            json={"username": test_user.username, "password": "wrongpassword"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client: AsyncClient):
        response = await client.post("/api/login", json={"username": "personne", "password": "whatever"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_cookie_session_round_trip(self, client: AsyncClient, test_user: User):
        await client.post(
            "/api/login",
            json={"username": test_user.username, "password": "testpassword123"}
        )

        me = await client.get("/api/user")
        assert me.status_code == 200
        assert me.json()["username"] == test_user.username

        logout = await client.post("/api/logout")
        assert logout.status_code == 200

        after = await client.get("/api/user")
        assert after.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_revokes_server_session(self, client: AsyncClient, test_user: User):
        login = await client.post(
            "/api/login",
            json={"username": test_user.username, "password": "testpassword123"}
        )
        cookie = login.cookies[settings.SESSION_COOKIE_NAME]

        await client.post("/api/logout")
        client.cookies.clear()

        # The signed cookie is still valid JWT, but its session is gone
        replay = await client.get("/api/user", headers={"Authorization": f"Bearer {cookie}"})
        assert replay.status_code == 401
        assert replay.json()["detail"] == "Session expired"

    @pytest.mark.asyncio
    async def test_logout_without_session(self, client: AsyncClient):
        response = await client.post("/api/logout")

        assert response.status_code == 200


class TestCurrentUser:
    """Test current user retrieval"""

    @pytest.mark.asyncio
    async def test_get_current_user(self, client: AsyncClient, auth_headers: dict, test_user: User):
        response = await client.get("/api/user", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == test_user.email
        assert "createdAt" in data

    @pytest.mark.asyncio
    async def test_get_current_user_unauthorized(self, client: AsyncClient):
        response = await client.get("/api/user")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_get_current_user_invalid_token(self, client: AsyncClient):
        response = await client.get("/api/user", headers={"Authorization": "Bearer invalid_token"})

        assert response.status_code == 401
