"""
TripNest Backend - Item Schemas
=================================

What:  Validation for the multipart fields of POST /add and the item
       representation returned by /items and /viewDetail.
How:   Form fields arrive as strings; pydantic parses latitude/longitude
       as floats and specialDay/specialMonth as ints. A value that does not
       parse is a validation error (400) rather than a stored NaN.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, max_length=255)
    short_detail: Optional[str] = Field(default=None, alias="shortDetail", max_length=500)
    detail: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = Field(default=None, max_length=500)
    place_id: Optional[str] = Field(default=None, alias="placeId", max_length=255)
    hotels: List[uuid.UUID] = Field(default_factory=list)
    category: Optional[str] = Field(default=None, max_length=120)
    special_day: int = Field(alias="specialDay", ge=1, le=31)
    special_month: int = Field(alias="specialMonth", ge=1, le=12)

    @field_validator("hotels", mode="before")
    @classmethod
    def accept_single_hotel(cls, v):
        """A form with one hotel field sends a string, not a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class SpecialDate(BaseModel):
    day: int
    month: int


class ItemResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    name: Optional[str] = None
    short_detail: Optional[str] = Field(default=None, alias="shortDetail")
    detail: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    place_id: Optional[str] = None
    hotels: List[uuid.UUID] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    special_date: SpecialDate = Field(alias="specialDate")
    created_at: datetime
