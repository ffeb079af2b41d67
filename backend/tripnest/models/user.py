"""
TripNest Backend - User Model
===============================

What:  ORM model for the `users` table plus the closed `Role` set.
How:   One row per account. Local accounts carry a bcrypt `password_hash`;
       Google accounts carry `google_id` and the raw provider profile.
       The profile (name, age, address, phone, avatar) is stored inline.

Lifecycle:
    1. Created on signup, or on the first Google sign-in for a provider id
    2. Later Google sign-ins reuse the row (first profile wins)
    3. Never deleted
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from tripnest.database import Base


class Role(str, enum.Enum):
    """
    Closed, ordered set of account roles.

    Ordering: user < officer < admin. Guards compare ranks, so a route that
    requires OFFICER also admits ADMIN.
    """

    USER = "user"
    OFFICER = "officer"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]

    def at_least(self, minimum: "Role") -> bool:
        return self.rank >= minimum.rank

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Exact lookup; unknown or padded values (e.g. ' admin') return None."""
        try:
            return cls(value)
        except ValueError:
            return None


_ROLE_RANKS = {Role.USER: 0, Role.OFFICER: 1, Role.ADMIN: 2}


class User(Base):
    """Represents an account in the database."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # The email address; NULL only for provider profiles without an email
    username: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, index=True, nullable=True
    )

    # bcrypt hash; NULL for accounts that only sign in through Google
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=Role.USER.value,
        server_default=text("'user'"),
    )

    # ── Google OAuth ──────────────────────────────────────────────────────
    google_id: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, index=True, nullable=True
    )
    google_profile: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # ── Profile ───────────────────────────────────────────────────────────
    first_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    @property
    def role_enum(self) -> Optional[Role]:
        return Role.parse(self.role)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
