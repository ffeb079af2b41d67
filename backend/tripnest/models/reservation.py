"""Reservation model definitions."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from tripnest.database import Base


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PartyType(str, enum.Enum):
    PERSONAL = "personal"
    FAMILY = "family"


class Reservation(Base):
    """
    A request by a user to visit an item.

    The party size is stored as flat columns (party_type, family, adults,
    kids, husband, wife) and exposed as a nested `numberOfPersons` object
    by the API schemas.
    """

    __tablename__ = "reservations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("items.id"), nullable=False, index=True
    )

    reservation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReservationStatus.PENDING.value,
        server_default=text("'pending'"),
    )
    total_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    special_requests: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # ── Party Size ────────────────────────────────────────────────────────
    party_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PartyType.PERSONAL.value
    )
    family: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    kids: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    husband: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wife: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, user_id={self.user_id}, "
            f"item_id={self.item_id}, status='{self.status}')>"
        )
