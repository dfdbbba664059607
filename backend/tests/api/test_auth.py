"""Tests for login, reissue, logout and bearer authentication."""
from uuid import uuid4

from httpx import AsyncClient

from core.auth import create_access_token, create_refresh_token
from core.config import get_settings
from models.user import User
from tests.api.conftest import assert_error
from tests.conftest import TEST_PASSWORD


async def _login(anon_client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> dict:
    response = await anon_client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


class TestLogin:
    """Tests for POST /auth/login."""

    async def test__login__returns_tokens_and_user(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """Correct credentials return both tokens and the user view."""
        data = await _login(anon_client, test_user.email)

        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"] == {
            "id": str(test_user.id),
            "email": test_user.email,
            "nickname": test_user.nickname,
        }

    async def test__login__wrong_password_is_401(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """A wrong password is rejected with the error envelope."""
        response = await anon_client.post(
            "/auth/login", json={"email": test_user.email, "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert_error(response.json(), 401, "Invalid email or password")
        assert response.json()["error"] == "Unauthorized"

    async def test__login__unknown_email_is_404(self, anon_client: AsyncClient) -> None:
        """An unknown email is reported as not found."""
        response = await anon_client.post(
            "/auth/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 404
        assert_error(response.json(), 404, "User not found")

    async def test__login__access_token_authenticates(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """The issued access token works as a bearer token."""
        data = await _login(anon_client, test_user.email)

        response = await anon_client.get(
            "/api/users/me", headers={"Authorization": f"Bearer {data['access_token']}"},
        )

        assert response.status_code == 200
        assert response.json()["id"] == str(test_user.id)


class TestReissue:
    """Tests for POST /auth/reissue."""

    async def test__reissue__rotates_tokens(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """Reissue returns a fresh pair; the old refresh token is then rejected."""
        original = await _login(anon_client, test_user.email)

        response = await anon_client.post(
            "/auth/reissue", json={"refresh_token": original["refresh_token"]},
        )
        assert response.status_code == 200
        rotated = response.json()
        assert rotated["refresh_token"] != original["refresh_token"]

        reuse = await anon_client.post(
            "/auth/reissue", json={"refresh_token": original["refresh_token"]},
        )
        assert reuse.status_code == 401
        assert_error(reuse.json(), 401, "Invalid refresh token")

    async def test__reissue__mismatched_token_is_401(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """A validly signed refresh token that is not the stored one is rejected."""
        await _login(anon_client, test_user.email)
        stray = create_refresh_token(test_user.id, get_settings())

        response = await anon_client.post("/auth/reissue", json={"refresh_token": stray})

        assert response.status_code == 401

    async def test__reissue__access_token_is_401(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """Access tokens cannot be exchanged."""
        data = await _login(anon_client, test_user.email)

        response = await anon_client.post(
            "/auth/reissue", json={"refresh_token": data["access_token"]},
        )

        assert response.status_code == 401
        assert_error(response.json(), 401, "Invalid token type")


class TestLogout:
    """Tests for POST /auth/logout."""

    async def test__logout__invalidates_refresh_token(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """After logout the refresh token no longer works."""
        data = await _login(anon_client, test_user.email)

        response = await anon_client.post(
            "/auth/logout", headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert response.status_code == 204

        reissue = await anon_client.post(
            "/auth/reissue", json={"refresh_token": data["refresh_token"]},
        )
        assert reissue.status_code == 401

    async def test__logout__requires_authentication(self, anon_client: AsyncClient) -> None:
        """Logout without a bearer token is 401."""
        response = await anon_client.post("/auth/logout")

        assert response.status_code == 401


class TestBearerAuthentication:
    """Tests for the current-user dependency."""

    async def test__missing_token__401_with_envelope(self, anon_client: AsyncClient) -> None:
        """Protected endpoints require a bearer token."""
        response = await anon_client.get("/api/bookmarks")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert_error(response.json(), 401, "Not authenticated")

    async def test__malformed_token__401(self, anon_client: AsyncClient) -> None:
        """Garbage bearer tokens are rejected."""
        response = await anon_client.get(
            "/api/bookmarks", headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert_error(response.json(), 401, "Invalid token")

    async def test__refresh_token_as_bearer__401(
        self,
        anon_client: AsyncClient,
        test_user: User,
    ) -> None:
        """A refresh token cannot be used as an access token."""
        token = create_refresh_token(test_user.id, get_settings())

        response = await anon_client.get(
            "/api/bookmarks", headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401
        assert_error(response.json(), 401, "Invalid token type")

    async def test__token_for_deleted_user__401(self, anon_client: AsyncClient) -> None:
        """A valid token whose subject no longer exists is rejected."""
        token = create_access_token(uuid4(), get_settings())

        response = await anon_client.get(
            "/api/bookmarks", headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401
        assert_error(response.json(), 401, "User not found")
