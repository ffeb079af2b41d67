"""
TripNest Backend - User Schemas
=================================

What:  Request bodies for /signup and /login, and the /profile response.
How:   Field aliases follow the web client's keys (firstName, lastName, ...).
       populate_by_name lets server code build models with Python names.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """
    Body of POST /signup. Username is the user's email address.

    There is no role field: a `role` key in the body is ignored and every
    public signup is a plain user.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=72)
    first_name: Optional[str] = Field(default=None, alias="firstName", max_length=120)
    last_name: Optional[str] = Field(default=None, alias="lastName", max_length=120)
    age: Optional[int] = Field(default=None, ge=0, le=150)
    address: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    avatar: Optional[str] = Field(default=None, max_length=1024)


class LoginRequest(BaseModel):
    """Body of POST /login."""
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    age: Optional[int] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None


class UserResponse(BaseModel):
    """
    What:  The caller's own record, returned by GET /profile.
    Note:  The password hash and the raw provider payload are never exposed.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    username: Optional[str] = None
    role: str
    google_id: Optional[str] = Field(default=None, alias="googleId")
    profile: UserProfile
    created_at: datetime
