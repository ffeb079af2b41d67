"""
TripNest Backend - Application Wiring Tests
=============================================

What:  Settings parsing, /health, request ids and the session cookie flags.
"""

import pytest

from tripnest.config import DEFAULT_SESSION_SECRET, Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.backend_port == 4000
        assert settings.max_upload_files == 7
        assert settings.upload_url_prefix == "/uploads"
        assert settings.post_signup_redirect == "/Home"
        assert settings.google_callback_url == "http://localhost:4000/auth/google/secrets"
        assert settings.session_secret == DEFAULT_SESSION_SECRET

    def test_upload_prefix_is_normalized(self):
        assert Settings(_env_file=None, upload_url_prefix="media/").upload_url_prefix == "/media"

    def test_cors_origins_are_split(self):
        settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, log_level="LOUD")

    def test_production_with_default_secret_is_reported(self):
        settings = Settings(
            _env_file=None,
            environment="production",
            google_client_id="id",
            google_client_secret="secret",
        )
        with pytest.raises(ValueError, match="SESSION_SECRET"):
            settings.validate_required_for_production()

    def test_settings_are_immutable(self):
        settings = Settings(_env_file=None)
        with pytest.raises(Exception):
            settings.backend_port = 1


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_reports_database(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated_when_absent(self, client):
        response = await client.get("/items")

        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_client_id_is_echoed(self, client):
        response = await client.get("/hotels/missing", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.json()["request_id"] == "abc123"


class TestSessionCookie:
    @pytest.mark.asyncio
    async def test_cookie_is_http_only(self, client, create_user):
        await create_user("cookie@example.com")

        response = await client.post(
            "/login",
            json={"username": "cookie@example.com", "password": "correct horse battery"},
        )

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("tripnest_session=")
        assert "httponly" in set_cookie.lower()
