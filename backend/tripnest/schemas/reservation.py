"""Reservation request/response schemas."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tripnest.models.reservation import PartyType

_PARTY_KEYS = ("personalOrFamily", "family", "adults", "kids", "husband", "wife")


def _as_aware(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PartySize(BaseModel):
    """Structured party description (`numberOfPersons` on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    party_type: PartyType = Field(default=PartyType.PERSONAL, alias="personalOrFamily")
    family: int = Field(default=0, ge=0)
    adults: int = Field(ge=0)
    kids: int = Field(default=0, ge=0)
    husband: int = Field(default=0, ge=0)
    wife: int = Field(default=0, ge=0)


class ReservationCreate(BaseModel):
    """
    Body of POST /addRequest.

    The reserving user is always the session user; a `user` key in the body
    is ignored. Status always starts as pending.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    item_id: uuid.UUID = Field(alias="item")
    reservation_date: Optional[datetime] = Field(default=None, alias="reservationDate")
    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")
    total_price: float = Field(default=0.0, ge=0, alias="totalPrice")
    special_requests: str = Field(default="", alias="specialRequests", max_length=5000)
    number_of_persons: PartySize = Field(alias="numberOfPersons")

    @field_validator("special_requests", mode="before")
    @classmethod
    def empty_special_requests(cls, v):
        if v is None:
            return ""
        return v

    @model_validator(mode="before")
    @classmethod
    def collect_flat_party_fields(cls, data):
        """Form posts cannot nest; gather flat party keys into numberOfPersons."""
        if isinstance(data, dict) and "numberOfPersons" not in data:
            party = {key: data[key] for key in _PARTY_KEYS if key in data}
            if party:
                data = {**data, "numberOfPersons": party}
        return data

    @model_validator(mode="after")
    def check_date_order(self) -> "ReservationCreate":
        if _as_aware(self.end_date) < _as_aware(self.start_date):
            raise ValueError("endDate must not be before startDate")
        return self


class ReservationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    user: uuid.UUID
    item: uuid.UUID
    reservation_date: datetime = Field(alias="reservationDate")
    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")
    status: str
    total_price: float = Field(alias="totalPrice")
    special_requests: str = Field(alias="specialRequests")
    number_of_persons: PartySize = Field(alias="numberOfPersons")
