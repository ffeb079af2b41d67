"""
TripNest Backend - Google OAuth Client Tests
==============================================

What:  Authorization URL building and the code → token → profile exchange.
How:   httpx.MockTransport stands in for Google's token and userinfo endpoints.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from tripnest.exceptions import OAuthError
from tripnest.services.oauth_service import GoogleOAuthClient, GoogleProfile

TOKEN_URL = "https://oauth.test/token"
USERINFO_URL = "https://oauth.test/userinfo"


def _client(handler=None, client_id="cid", client_secret="csecret") -> GoogleOAuthClient:
    transport = httpx.MockTransport(handler) if handler else None
    return GoogleOAuthClient(
        client_id=client_id,
        client_secret=client_secret,
        callback_url="http://localhost:4000/auth/google/secrets",
        authorize_url="https://oauth.test/authorize",
        token_url=TOKEN_URL,
        userinfo_url=USERINFO_URL,
        transport=transport,
    )


class TestAuthorizationUrl:
    def test_contains_client_callback_scope_and_state(self):
        url = _client().authorization_url("state-abc")

        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        assert parsed.netloc == "oauth.test"
        assert query["client_id"] == ["cid"]
        assert query["redirect_uri"] == ["http://localhost:4000/auth/google/secrets"]
        assert query["response_type"] == ["code"]
        assert query["scope"] == ["openid email profile"]
        assert query["state"] == ["state-abc"]

    def test_unconfigured_client_raises(self):
        with pytest.raises(OAuthError, match="not configured"):
            _client(client_id="", client_secret="").authorization_url("s")

    def test_states_are_random(self):
        assert GoogleOAuthClient.new_state() != GoogleOAuthClient.new_state()


class TestFetchProfile:
    @pytest.mark.asyncio
    async def test_exchanges_code_and_reads_profile(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == TOKEN_URL:
                seen["token_body"] = parse_qs(request.content.decode())
                return httpx.Response(200, json={"access_token": "tok-1"})
            seen["authorization"] = request.headers["Authorization"]
            return httpx.Response(
                200,
                json={"sub": "g-1", "email": "dee@example.com", "given_name": "Dee"},
            )

        profile = await _client(handler).fetch_profile("code-xyz")

        assert profile.subject == "g-1"
        assert profile.email == "dee@example.com"
        assert profile.given_name == "Dee"
        assert profile.raw["sub"] == "g-1"
        assert seen["token_body"]["code"] == ["code-xyz"]
        assert seen["token_body"]["grant_type"] == ["authorization_code"]
        assert seen["authorization"] == "Bearer tok-1"

    @pytest.mark.asyncio
    async def test_token_endpoint_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(OAuthError):
            await _client(handler).fetch_profile("bad-code")

    @pytest.mark.asyncio
    async def test_missing_access_token_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"token_type": "Bearer"})

        with pytest.raises(OAuthError, match="access token"):
            await _client(handler).fetch_profile("code")

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(OAuthError):
            await _client(handler).fetch_profile("code")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(OAuthError):
            await _client(handler).fetch_profile("code")


class TestGoogleProfile:
    def test_profile_without_subject_is_rejected(self):
        with pytest.raises(OAuthError):
            GoogleProfile.from_userinfo({"email": "x@example.com"})
