"""Hotel request/response schemas."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HotelContact(BaseModel):
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    website: Optional[str] = Field(default=None, max_length=1024)


class HotelCreate(BaseModel):
    """
    Body of POST /addHotel.

    Contact details may arrive flat (phone, email, website) or nested under
    `contact`; flat values take precedence.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=500)
    latitude: float
    longitude: float
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    amenities: List[str] = Field(default_factory=list)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    website: Optional[str] = Field(default=None, max_length=1024)
    contact: Optional[HotelContact] = None

    @field_validator("amenities", mode="before")
    @classmethod
    def split_amenities(cls, v):
        """Accepts a list, a single value, or a comma-separated string."""
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    def resolved_contact(self) -> HotelContact:
        nested = self.contact or HotelContact()
        return HotelContact(
            phone=self.phone or nested.phone,
            email=self.email or nested.email,
            website=self.website or nested.website,
        )


class HotelResponse(BaseModel):
    id: uuid.UUID
    name: str
    address: str
    latitude: float
    longitude: float
    rating: Optional[float] = None
    amenities: List[str]
    contact: HotelContact
    created_at: datetime
