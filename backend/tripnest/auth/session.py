"""
TripNest Backend - Session Identity
=====================================

What:  Serialize a user into the signed session cookie and resolve it back.
How:   Only the user id is stored (Starlette SessionMiddleware signs the
       cookie with itsdangerous). Every request re-fetches the User row, so
       role changes take effect on the next request.
Who:   get_session_context is a FastAPI dependency used by the guards and by
       any handler that needs to know who is calling.

Deserialization outcomes:
    - no id in the session       → anonymous
    - malformed or vanished id   → session cleared, anonymous
    - database failure           → DatabaseError (the request fails with 500)
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.database import get_db_session
from tripnest.models.user import User
from tripnest.services.user_service import user_service

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"
OAUTH_STATE_KEY = "oauth_state"


@dataclass
class SessionContext:
    """Who is calling. `user` is None for anonymous requests."""
    user: Optional[User] = None

    @property
    def authenticated(self) -> bool:
        return self.user is not None


async def get_session_context(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> SessionContext:
    raw_id = request.session.get(SESSION_USER_KEY)
    if not raw_id:
        return SessionContext()

    try:
        user_id = uuid.UUID(str(raw_id))
    except ValueError:
        logger.warning("Discarding session with malformed user id: %r", raw_id)
        request.session.pop(SESSION_USER_KEY, None)
        return SessionContext()

    user = await user_service.get_user(db, user_id)
    if user is None:
        logger.info("Session user %s no longer exists; clearing session", user_id)
        request.session.pop(SESSION_USER_KEY, None)
        return SessionContext()
    return SessionContext(user=user)


def login_user(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)


def logout_user(request: Request) -> None:
    request.session.clear()
