"""
TripNest Backend - Item Model
===============================

What:  ORM model for `items` (attractions) and the `item_hotels` association.
How:   An item references any number of hotels through `item_hotels`
       (many-to-many by id). Uploaded image paths are stored as a JSON list
       of web-relative paths (e.g. "/uploads/1700000000000-ab12cd34.jpg").

Query Patterns:
    - List all items: hotels are loaded with lazy="selectin" (one extra
      SELECT ... IN per query) since implicit lazy loads are not available
      on an AsyncSession.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tripnest.database import Base
from tripnest.models.hotel import Hotel

item_hotels = Table(
    "item_hotels",
    Base.metadata,
    Column("item_id", Uuid, ForeignKey("items.id", ondelete="CASCADE"), primary_key=True),
    Column("hotel_id", Uuid, ForeignKey("hotels.id", ondelete="CASCADE"), primary_key=True),
)


class Item(Base):
    """An attraction that can be reserved."""

    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    short_detail: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    detail: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # External place reference (e.g. a maps place id)
    place_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)

    # "Special date": a recurring day of the year
    special_day: Mapped[int] = mapped_column(Integer, nullable=False)
    special_month: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    hotels: Mapped[List[Hotel]] = relationship(secondary=item_hotels, lazy="selectin")

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name='{self.name}')>"
