"""
TripNest Backend - Reservation Service
========================================

What:  Create reservation requests and read them back.
How:   The reserving user is always the session user. The item reference is
       checked before the insert. New reservations start as pending.
Who:   Called by the reservation routes (POST /addRequest, GET /reservations).

Visibility:
    A user sees their own reservations. Officers and admins may open any
    reservation by id.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.exceptions import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from tripnest.models.reservation import Reservation, ReservationStatus
from tripnest.models.user import Role, User
from tripnest.schemas.reservation import PartySize, ReservationCreate, ReservationResponse
from tripnest.services.item_service import item_service
from tripnest.services.lookup import flush_or_raise, parse_identifier

logger = logging.getLogger(__name__)


def reservation_to_response(reservation: Reservation) -> ReservationResponse:
    return ReservationResponse(
        id=reservation.id,
        user=reservation.user_id,
        item=reservation.item_id,
        reservation_date=reservation.reservation_date,
        start_date=reservation.start_date,
        end_date=reservation.end_date,
        status=reservation.status,
        total_price=reservation.total_price,
        special_requests=reservation.special_requests,
        number_of_persons=PartySize(
            party_type=reservation.party_type,
            family=reservation.family,
            adults=reservation.adults,
            kids=reservation.kids,
            husband=reservation.husband,
            wife=reservation.wife,
        ),
    )


class ReservationService:
    async def create_reservation(
        self,
        db: AsyncSession,
        user: User,
        data: ReservationCreate,
    ) -> ReservationResponse:
        """
        Raises:
            ValidationError: the referenced item does not exist
            DatabaseError: the insert failed
        """
        if not await item_service.item_exists(db, data.item_id):
            raise ValidationError(
                message="The referenced item does not exist.",
                field="item",
                context={"item": str(data.item_id)},
            )

        party = data.number_of_persons
        reservation = Reservation(
            user_id=user.id,
            item_id=data.item_id,
            reservation_date=data.reservation_date or datetime.now(timezone.utc),
            start_date=data.start_date,
            end_date=data.end_date,
            status=ReservationStatus.PENDING.value,
            total_price=data.total_price,
            special_requests=data.special_requests,
            party_type=party.party_type.value,
            family=party.family,
            adults=party.adults,
            kids=party.kids,
            husband=party.husband,
            wife=party.wife,
        )
        db.add(reservation)
        await flush_or_raise(db, "the reservation insert")
        logger.info(
            "Reservation created: %s (user=%s, item=%s)", reservation.id, user.id, data.item_id
        )
        return reservation_to_response(reservation)

    async def list_for_user(self, db: AsyncSession, user: User) -> List[ReservationResponse]:
        try:
            result = await db.execute(
                select(Reservation)
                .where(Reservation.user_id == user.id)
                .order_by(Reservation.reservation_date.desc())
            )
            return [reservation_to_response(r) for r in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing reservations: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve reservations. Please try again.",
                context={"user_id": str(user.id)},
            )

    async def get_reservation(
        self,
        db: AsyncSession,
        reservation_id: Union[str, uuid.UUID],
        viewer: User,
    ) -> ReservationResponse:
        """
        Raises:
            NotFoundError: unknown or malformed id (→ 404)
            ForbiddenError: someone else's reservation and viewer is below officer (→ 403)
        """
        key = parse_identifier(reservation_id, "reservation")
        try:
            reservation = await db.get(Reservation, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching reservation %s: %s", key, str(e))
            raise DatabaseError(context={"reservation_id": str(key)})
        if reservation is None:
            raise NotFoundError(resource="reservation", resource_id=str(key))

        role = viewer.role_enum
        if reservation.user_id != viewer.id and not (role and role.at_least(Role.OFFICER)):
            raise ForbiddenError(context={"reservation_id": str(key)})
        return reservation_to_response(reservation)


# ── Singleton Instance ────────────────────────────────────────────────────
reservation_service = ReservationService()
