"""
TripNest Backend - Shared Response Schemas
============================================

What:  Response shapes shared by every router: plain messages, creation
       acknowledgements, the error envelope and the health payload.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """A human-readable acknowledgement, e.g. after login."""
    message: str = Field(description="Human-readable status message")


class CreatedResponse(BaseModel):
    """
    What:  Returned with HTTP 201 by the create routes (/add, /addHotel, /addRequest).
    Why:   Clients historically received only "Data inserted successfully";
           the new record id is included alongside that message.
    """
    message: str = Field(default="Data inserted successfully")
    id: uuid.UUID = Field(description="Identifier of the created record")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "item with ID '...' was not found",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and container health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
