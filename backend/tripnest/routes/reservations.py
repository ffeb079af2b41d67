"""
TripNest Backend - Reservation Route Handlers
===============================================

What:  POST /addRequest (create), GET /reservations (own), GET /reservations/{id}.
How:   The reserving user comes from the session, never from the body.
       Party size may be sent nested (`numberOfPersons`) or as flat form
       fields (personalOrFamily, adults, kids, ...).
Who:   Any signed-in user.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.auth.guards import require_authenticated
from tripnest.database import get_db_session
from tripnest.models.user import User
from tripnest.routes.payload import read_payload, validate_payload
from tripnest.schemas.common import CreatedResponse, ErrorResponse
from tripnest.schemas.reservation import ReservationCreate, ReservationResponse
from tripnest.services.reservation_service import reservation_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reservations"])


@router.post(
    "/addRequest",
    status_code=201,
    response_model=CreatedResponse,
    responses={
        400: {"description": "Invalid fields or unknown item", "model": ErrorResponse},
        302: {"description": "Not signed in; redirect to login"},
    },
    summary="Request a reservation",
)
async def add_request(
    request: Request,
    user: User = Depends(require_authenticated),
    db: AsyncSession = Depends(get_db_session),
) -> CreatedResponse:
    payload = await read_payload(request)
    data = validate_payload(ReservationCreate, payload)
    reservation = await reservation_service.create_reservation(db, user, data)
    return CreatedResponse(id=reservation.id)


@router.get(
    "/reservations",
    response_model=List[ReservationResponse],
    summary="The caller's reservations, newest first",
)
async def list_reservations(
    user: User = Depends(require_authenticated),
    db: AsyncSession = Depends(get_db_session),
) -> List[ReservationResponse]:
    return await reservation_service.list_for_user(db, user)


@router.get(
    "/reservations/{reservation_id}",
    response_model=ReservationResponse,
    responses={
        403: {"description": "Another user's reservation", "model": ErrorResponse},
        404: {"description": "Reservation not found", "model": ErrorResponse},
    },
    summary="Fetch one reservation",
)
async def get_reservation(
    reservation_id: str,
    user: User = Depends(require_authenticated),
    db: AsyncSession = Depends(get_db_session),
) -> ReservationResponse:
    return await reservation_service.get_reservation(db, reservation_id, user)
