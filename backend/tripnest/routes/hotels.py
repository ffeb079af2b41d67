"""
TripNest Backend - Hotel Route Handlers
=========================================

    POST /addHotel         officer+, JSON or form → 201 {"message", "id"}
    GET  /hotels           public list
    GET  /hotels/{id}      public, 404 for unknown or malformed ids
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.auth.guards import require_role
from tripnest.database import get_db_session
from tripnest.models.user import Role, User
from tripnest.routes.payload import read_payload, validate_payload
from tripnest.schemas.common import CreatedResponse, ErrorResponse
from tripnest.schemas.hotel import HotelCreate, HotelResponse
from tripnest.services.hotel_service import hotel_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Hotels"])


@router.post(
    "/addHotel",
    status_code=201,
    response_model=CreatedResponse,
    responses={
        400: {"description": "Invalid hotel fields", "model": ErrorResponse},
        403: {"description": "Role below officer", "model": ErrorResponse},
    },
    summary="Create a hotel",
)
async def add_hotel(
    request: Request,
    user: User = Depends(require_role(Role.OFFICER)),
    db: AsyncSession = Depends(get_db_session),
) -> CreatedResponse:
    payload = await read_payload(request)
    data = validate_payload(HotelCreate, payload)
    hotel = await hotel_service.create_hotel(db, data)
    logger.info("Hotel %s added by user %s", hotel.id, user.id)
    return CreatedResponse(id=hotel.id)


@router.get("/hotels", response_model=List[HotelResponse], summary="List all hotels")
async def list_hotels(db: AsyncSession = Depends(get_db_session)) -> List[HotelResponse]:
    return await hotel_service.list_hotels(db)


@router.get(
    "/hotels/{hotel_id}",
    response_model=HotelResponse,
    responses={404: {"description": "Hotel not found", "model": ErrorResponse}},
    summary="Fetch one hotel",
)
async def get_hotel(
    hotel_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> HotelResponse:
    return await hotel_service.get_hotel(db, hotel_id)
