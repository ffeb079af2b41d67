"""
TripNest Backend - Identity Route Tests
=========================================

What:  /signup, /login, /logout, /profile and the Google sign-in routes.
How:   httpx AsyncClient against create_app(); the client keeps the session
       cookie between requests. The Google client is replaced with a mock.
"""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import pytest
from sqlalchemy import func, select

from tripnest.exceptions import OAuthError
from tripnest.models.user import User
from tripnest.services.oauth_service import GoogleProfile

TEST_PASSWORD = "correct horse battery"


async def _count_users(app) -> int:
    async with app.state.session_factory() as session:
        result = await session.execute(select(func.count()).select_from(User))
        return result.scalar_one()


class TestSignup:
    @pytest.mark.asyncio
    async def test_signup_redirects_home_and_starts_session(self, client):
        response = await client.post(
            "/signup",
            data={"username": "new@example.com", "password": "pw", "firstName": "New"},
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/Home"

        profile = await client.get("/profile")
        assert profile.status_code == 200
        body = profile.json()
        assert body["username"] == "new@example.com"
        assert body["role"] == "user"
        assert body["profile"]["firstName"] == "New"
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_duplicate_signup_redirects_with_error(self, app, client):
        payload = {"username": "twice@example.com", "password": "pw"}
        first = await client.post("/signup", json=payload)
        second = await client.post("/signup", json=payload)

        assert first.status_code == 303
        assert second.status_code == 303
        assert second.headers["location"] == "/signup?error=duplicate_username"
        assert await _count_users(app) == 1

    @pytest.mark.asyncio
    async def test_missing_password_redirects_with_validation_error(self, app, client):
        response = await client.post("/signup", data={"username": "nopw@example.com"})

        assert response.status_code == 303
        assert response.headers["location"] == "/signup?error=validation_error"
        assert await _count_users(app) == 0

    @pytest.mark.asyncio
    async def test_requested_role_is_ignored(self, client):
        response = await client.post(
            "/signup",
            json={"username": "eve@example.com", "password": "pw", "role": "admin"},
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/Home"
        assert (await client.get("/profile")).json()["role"] == "user"

        add_hotel = await client.post(
            "/addHotel",
            json={"name": "Eve's Inn", "address": "1 Side St", "latitude": 1.0, "longitude": 2.0},
        )
        assert add_hotel.status_code == 403


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client, create_user):
        await create_user("lee@example.com")

        response = await client.post(
            "/login", json={"username": "lee@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Logged in successfully"}
        assert (await client.get("/profile")).status_code == 200

    @pytest.mark.asyncio
    async def test_login_accepts_form_body(self, client, create_user):
        await create_user("form@example.com")

        response = await client.post(
            "/login", data={"username": "form@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, client, create_user):
        await create_user("lee@example.com")

        response = await client.post(
            "/login", json={"username": "lee@example.com", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        assert (await client.get("/profile")).status_code == 401

    @pytest.mark.asyncio
    async def test_missing_fields_is_400(self, client):
        response = await client.post("/login", json={"username": "only@example.com"})

        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["details"]["errors"]]
        assert "password" in fields


class TestLogoutAndProfile:
    @pytest.mark.asyncio
    async def test_profile_without_session_is_401(self, client):
        response = await client.get("/profile")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_clears_session(self, client, login_as):
        await login_as()

        response = await client.get("/logout")

        assert response.status_code == 302
        assert response.headers["location"] == "/login"
        assert (await client.get("/profile")).status_code == 401

    @pytest.mark.asyncio
    async def test_session_for_deleted_user_is_anonymous(self, app, client, login_as):
        user = await login_as()
        async with app.state.session_factory() as session:
            await session.delete(await session.get(User, user.id))
            await session.commit()

        response = await client.get("/profile")

        assert response.status_code == 401


class TestGoogleSignIn:
    @pytest.mark.asyncio
    async def test_start_redirects_to_google_with_state(self, client):
        response = await client.get("/auth/google")

        assert response.status_code == 302
        query = parse_qs(urlparse(response.headers["location"]).query)
        assert query["client_id"] == ["test-client-id"]
        assert query["redirect_uri"] == ["http://localhost:4000/auth/google/secrets"]
        assert query["state"][0]

    @pytest.mark.asyncio
    async def test_callback_signs_in_and_reuses_user(self, app, client):
        app.state.oauth_client.fetch_profile = AsyncMock(
            return_value=GoogleProfile(subject="g-42", email="gee@example.com", given_name="Gee")
        )

        for _ in range(2):
            start = await client.get("/auth/google")
            state = parse_qs(urlparse(start.headers["location"]).query)["state"][0]
            callback = await client.get(
                "/auth/google/secrets", params={"code": "abc", "state": state}
            )
            assert callback.status_code == 302
            assert callback.headers["location"] == "/"

        profile = await client.get("/profile")
        assert profile.json()["googleId"] == "g-42"
        assert await _count_users(app) == 1

    @pytest.mark.asyncio
    async def test_state_mismatch_redirects_to_login(self, app, client):
        app.state.oauth_client.fetch_profile = AsyncMock()
        await client.get("/auth/google")

        response = await client.get(
            "/auth/google/secrets", params={"code": "abc", "state": "forged"}
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/login"
        app.state.oauth_client.fetch_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_provider_failure_redirects_to_login(self, app, client):
        app.state.oauth_client.fetch_profile = AsyncMock(side_effect=OAuthError())
        start = await client.get("/auth/google")
        state = parse_qs(urlparse(start.headers["location"]).query)["state"][0]

        response = await client.get(
            "/auth/google/secrets", params={"code": "abc", "state": state}
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/login"
        assert (await client.get("/profile")).status_code == 401
