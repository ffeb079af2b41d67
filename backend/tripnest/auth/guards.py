"""
TripNest Backend - Authorization Guards
=========================================

What:  FastAPI dependencies that gate routes on the session identity.
How:   require_authenticated admits any signed-in user. require_role(minimum)
       admits users whose role ranks at or above `minimum` in the ordered set
       user < officer < admin.

Usage:
    @router.post("/addHotel")
    async def add_hotel(user: User = Depends(require_role(Role.OFFICER))): ...

Failures:
    - anonymous caller     → LoginRequiredError (302 to the login page)
    - role below minimum   → ForbiddenError (403)
"""

import logging

from fastapi import Depends, Request

from tripnest.auth.session import SessionContext, get_session_context
from tripnest.exceptions import ForbiddenError, LoginRequiredError
from tripnest.models.user import Role, User

logger = logging.getLogger(__name__)


async def require_authenticated(
    request: Request,
    context: SessionContext = Depends(get_session_context),
) -> User:
    if context.user is None:
        raise LoginRequiredError(context={"path": request.url.path})
    return context.user


def require_role(minimum: Role):
    async def role_guard(user: User = Depends(require_authenticated)) -> User:
        role = user.role_enum
        if role is None or not role.at_least(minimum):
            logger.info(
                "Role check failed: user=%s role=%s required=%s",
                user.id,
                user.role,
                minimum.value,
            )
            raise ForbiddenError(context={"required_role": minimum.value, "role": user.role})
        return user

    return role_guard
