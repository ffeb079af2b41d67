"""
TripNest Backend - Google OAuth Client
========================================

What:  The HTTP side of "Sign in with Google" (authorization code flow).
How:   1. authorization_url(state): where GET /auth/google redirects the browser
       2. fetch_profile(code): exchanges the callback code for an access token,
          then reads the v3 userinfo profile
       Turning the profile into a User is the user service's job.
Who:   Built once by create_app() from settings; used by the auth routes.

Errors:
    Every failure (provider not configured, HTTP error, malformed payload)
    surfaces as OAuthError, which the auth routes turn into a redirect to
    the login page.
"""

import logging
import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from tripnest.config import Settings
from tripnest.exceptions import OAuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoogleProfile:
    """The parts of a Google userinfo payload we keep, plus the raw payload."""
    subject: str
    email: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_userinfo(cls, data: Dict[str, Any]) -> "GoogleProfile":
        subject = data.get("sub")
        if not subject:
            raise OAuthError(
                message="Google profile did not include an account id",
                context={"keys": sorted(data.keys())},
            )
        return cls(
            subject=str(subject),
            email=data.get("email"),
            given_name=data.get("given_name"),
            family_name=data.get("family_name"),
            picture=data.get("picture"),
            raw=dict(data),
        )


class GoogleOAuthClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        scopes: str = "openid email profile",
        authorize_url: str = "https://accounts.google.com/o/oauth2/v2/auth",
        token_url: str = "https://oauth2.googleapis.com/token",
        userinfo_url: str = "https://www.googleapis.com/oauth2/v3/userinfo",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.scopes = scopes
        self.authorize_url = authorize_url
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.timeout = timeout
        # Injected by tests (httpx.MockTransport)
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleOAuthClient":
        return cls(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            callback_url=settings.google_callback_url,
            scopes=settings.google_scopes,
            authorize_url=settings.google_authorize_url,
            token_url=settings.google_token_url,
            userinfo_url=settings.google_userinfo_url,
            timeout=settings.oauth_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @staticmethod
    def new_state() -> str:
        return secrets.token_urlsafe(24)

    def authorization_url(self, state: str) -> str:
        if not self.configured:
            raise OAuthError(message="Google sign-in is not configured")
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "response_type": "code",
            "scope": self.scopes,
            "state": state,
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> GoogleProfile:
        """
        Exchange an authorization code for the signed-in user's profile.

        Raises:
            OAuthError on any transport, HTTP status or payload problem.
        """
        if not self.configured:
            raise OAuthError(message="Google sign-in is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                token_response = await client.post(
                    self.token_url,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.callback_url,
                        "grant_type": "authorization_code",
                    },
                    headers={"Accept": "application/json"},
                )
                token_response.raise_for_status()
                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise OAuthError(message="Google did not return an access token")

                profile_response = await client.get(
                    self.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                profile_response.raise_for_status()
                payload = profile_response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google OAuth request failed: %s %s -> %d",
                e.request.method,
                e.request.url,
                e.response.status_code,
            )
            raise OAuthError(context={"status_code": e.response.status_code})
        except httpx.HTTPError as e:
            logger.warning("Google OAuth transport error: %s", str(e))
            raise OAuthError(context={"error_type": type(e).__name__})
        except ValueError as e:
            # Body was not JSON
            logger.warning("Google OAuth returned a malformed payload: %s", str(e))
            raise OAuthError(context={"error_type": type(e).__name__})

        if not isinstance(payload, dict):
            raise OAuthError(message="Google profile payload was not an object")
        return GoogleProfile.from_userinfo(payload)
