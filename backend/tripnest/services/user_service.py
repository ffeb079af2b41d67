"""
TripNest Backend - User Service (Identity Strategies)
=======================================================

What:  Account creation and the two sign-in strategies.
How:   - Local strategy: bcrypt-hashed password, checked on login.
       - Google strategy: find the user by provider id, create it if absent.
       Both return the User row; putting its id in the session is the
       caller's job (see tripnest.auth.session).
Who:   Called by the auth routes and by session deserialization.

First profile wins:
    The first Google profile seen for a provider id becomes the permanent
    record. Later sign-ins with the same id return that row unchanged.
"""

import logging
import uuid
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.exceptions import (
    DatabaseError,
    DuplicateKeyError,
    UnauthorizedError,
    ValidationError,
)
from tripnest.models.user import Role, User
from tripnest.schemas.user import SignupRequest
from tripnest.services.oauth_service import GoogleProfile

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.",
            field="password",
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))


class UserService:
    """
    Responsibilities:
        - signup(): create a local account
        - authenticate(): local strategy
        - find_or_create_google_user(): Google strategy
        - get_user(): session deserialization
    """

    async def signup(
        self,
        db: AsyncSession,
        data: SignupRequest,
        role: Role = Role.USER,
    ) -> User:
        """
        Create a local account with a hashed password.

        Args:
            role: The /signup route never passes this, so public accounts are
                  always plain users. Officers and admins are created by
                  calling the service directly.

        Raises:
            DuplicateKeyError: username already registered (no row is written)
            ValidationError: password longer than bcrypt accepts
            DatabaseError: insert failed for another reason
        """
        existing = await self._find_one(db, User.username == data.username)
        if existing is not None:
            raise DuplicateKeyError(
                message="A user with the given username is already registered",
                field="username",
            )

        user = User(
            username=data.username,
            password_hash=hash_password(data.password),
            role=role.value,
            first_name=data.first_name,
            last_name=data.last_name,
            age=data.age,
            address=data.address,
            phone=data.phone,
            avatar=data.avatar,
        )
        await self._insert(db, user, unique_field="username")
        logger.info("User registered: %s (role=%s)", user.id, user.role)
        return user

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Local strategy.

        Raises:
            UnauthorizedError: unknown username, Google-only account, or wrong password.
                               The message does not say which.
        """
        user = await self._find_one(db, User.username == username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for username=%s", username)
            raise UnauthorizedError(message="Invalid username or password")
        return user

    async def find_or_create_google_user(self, db: AsyncSession, profile: GoogleProfile) -> User:
        """
        Google strategy: look up by provider id, create the user when absent.

        Raises:
            DuplicateKeyError: the profile email already belongs to another account
            DatabaseError: query or insert failed
        """
        user = await self._find_one(db, User.google_id == profile.subject)
        if user is not None:
            return user

        user = User(
            google_id=profile.subject,
            username=profile.email,
            google_profile=profile.raw,
            first_name=profile.given_name,
            last_name=profile.family_name,
            avatar=profile.picture,
        )
        await self._insert(db, user, unique_field="google_id")
        logger.info("User created from Google profile: %s", user.id)
        return user

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        """Fetch by primary key; None when the row does not exist."""
        try:
            return await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not load the signed-in user.",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            )

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find_one(self, db: AsyncSession, condition) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(condition))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error querying users: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def _insert(self, db: AsyncSession, user: User, unique_field: str) -> None:
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            # Concurrent signup with the same key, or an OAuth email that
            # collides with an existing local account
            await db.rollback()
            logger.warning("Unique constraint violated inserting user: %s", str(e.orig))
            raise DuplicateKeyError(
                message="A user with the same username or provider account already exists",
                field=unique_field,
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error inserting user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
