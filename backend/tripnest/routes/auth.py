"""
TripNest Backend - Identity Route Handlers
============================================

What:  Signup, login, logout, Google sign-in and the caller's profile.
How:   Bodies may be JSON or a form. On success the user id goes into the
       signed session cookie (tripnest.auth.session.login_user).
Who:   Called by the web client's login and signup pages.

Responses:
    POST /signup               303 → /Home, or 303 → /signup?error=<code>
    POST /login                200 {"message": "Logged in successfully"} or 401
    GET  /logout               302 → /login
    GET  /auth/google          302 → Google consent page
    GET  /auth/google/secrets  302 → /, or 302 → /login on any failure
    GET  /profile              200 caller's record, or 401
"""

import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.auth.session import (
    OAUTH_STATE_KEY,
    SessionContext,
    get_session_context,
    login_user,
    logout_user,
)
from tripnest.config import Settings
from tripnest.database import get_db_session
from tripnest.dependencies import get_oauth_client, get_settings
from tripnest.exceptions import DuplicateKeyError, OAuthError, UnauthorizedError, ValidationError
from tripnest.routes.payload import read_payload, validate_payload
from tripnest.schemas.common import ErrorResponse, MessageResponse
from tripnest.schemas.user import LoginRequest, SignupRequest, UserProfile, UserResponse
from tripnest.services.oauth_service import GoogleOAuthClient
from tripnest.services.user_service import user_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(tags=["Auth"])


def _signup_failure(settings: Settings, code: str) -> RedirectResponse:
    url = f"{settings.signup_url}?{urlencode({'error': code})}"
    return RedirectResponse(url=url, status_code=303)


@router.post(
    "/signup",
    status_code=303,
    summary="Create a local account and sign in",
    responses={303: {"description": "Redirect to the home page, or back to signup on failure"}},
)
async def signup(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """
    Failures never create a record; the client is sent back to the signup
    page with an `error` code (validation_error, duplicate_username).
    """
    payload = await read_payload(request)
    try:
        data = validate_payload(SignupRequest, payload)
        user = await user_service.signup(db, data)
    except ValidationError as e:
        logger.info("Signup rejected: %s", e.context or e.message)
        return _signup_failure(settings, "validation_error")
    except DuplicateKeyError:
        logger.info("Signup rejected: username already registered")
        return _signup_failure(settings, "duplicate_username")

    login_user(request, user)
    return RedirectResponse(url=settings.post_signup_redirect, status_code=303)


@router.post(
    "/login",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing username or password", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Sign in with username and password",
)
async def login(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    payload = await read_payload(request)
    data = validate_payload(LoginRequest, payload)
    user = await user_service.authenticate(db, data.username, data.password)
    login_user(request, user)
    logger.info("User logged in: %s", user.id)
    return MessageResponse(message="Logged in successfully")


@router.get("/logout", status_code=302, summary="End the session")
async def logout(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    logout_user(request)
    return RedirectResponse(url=settings.login_url, status_code=302)


@router.get("/auth/google", status_code=302, summary="Start Google sign-in")
async def google_login(
    request: Request,
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
) -> RedirectResponse:
    state = oauth.new_state()
    url = oauth.authorization_url(state)
    request.session[OAUTH_STATE_KEY] = state
    return RedirectResponse(url=url, status_code=302)


@router.get("/auth/google/secrets", status_code=302, summary="Google sign-in callback")
async def google_callback(
    request: Request,
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """Every failure raises OAuthError, which the app turns into a redirect to /login."""
    expected_state = request.session.pop(OAUTH_STATE_KEY, None)
    if error:
        raise OAuthError(message="Google sign-in was cancelled", context={"error": error})
    if not code:
        raise OAuthError(message="Google callback carried no authorization code")
    if not expected_state or not state or not secrets.compare_digest(expected_state, state):
        raise OAuthError(message="OAuth state mismatch")

    profile = await oauth.fetch_profile(code)
    try:
        user = await user_service.find_or_create_google_user(db, profile)
    except DuplicateKeyError as e:
        raise OAuthError(
            message="This Google account's email is already registered",
            context=e.context,
        )

    login_user(request, user)
    logger.info("User signed in with Google: %s", user.id)
    return RedirectResponse(url=settings.post_oauth_redirect, status_code=302)


@router.get(
    "/profile",
    response_model=UserResponse,
    responses={401: {"description": "No session", "model": ErrorResponse}},
    summary="The signed-in user's record",
)
async def profile(
    context: SessionContext = Depends(get_session_context),
) -> UserResponse:
    user = context.user
    if user is None:
        raise UnauthorizedError(message="Not logged in")
    return UserResponse(
        id=user.id,
        username=user.username,
        role=user.role,
        google_id=user.google_id,
        profile=UserProfile(
            first_name=user.first_name,
            last_name=user.last_name,
            age=user.age,
            address=user.address,
            phone=user.phone,
            avatar=user.avatar,
        ),
        created_at=user.created_at,
    )
