# Auth package init
"""
TripNest Backend - Session Identity and Guards
================================================

    - session.py: SessionContext dependency, login_user / logout_user
    - guards.py:  require_authenticated, require_role(minimum)
"""

from tripnest.auth.guards import require_authenticated, require_role
from tripnest.auth.session import SessionContext, get_session_context, login_user, logout_user

__all__ = [
    "SessionContext",
    "get_session_context",
    "login_user",
    "logout_user",
    "require_authenticated",
    "require_role",
]
