"""
TripNest Backend - Hotel Service
==================================

What:  Create, list and fetch hotels.
Who:   Called by the hotel routes and by ItemService (to resolve references).
"""

import logging
import uuid
from typing import List, Sequence, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.exceptions import DatabaseError, NotFoundError
from tripnest.models.hotel import Hotel
from tripnest.schemas.hotel import HotelContact, HotelCreate, HotelResponse
from tripnest.services.lookup import flush_or_raise, parse_identifier

logger = logging.getLogger(__name__)


def hotel_to_response(hotel: Hotel) -> HotelResponse:
    return HotelResponse(
        id=hotel.id,
        name=hotel.name,
        address=hotel.address,
        latitude=hotel.latitude,
        longitude=hotel.longitude,
        rating=hotel.rating,
        amenities=list(hotel.amenities or []),
        contact=HotelContact(
            phone=hotel.contact_phone,
            email=hotel.contact_email,
            website=hotel.contact_website,
        ),
        created_at=hotel.created_at,
    )


class HotelService:
    async def create_hotel(self, db: AsyncSession, data: HotelCreate) -> HotelResponse:
        contact = data.resolved_contact()
        hotel = Hotel(
            name=data.name,
            address=data.address,
            latitude=data.latitude,
            longitude=data.longitude,
            rating=data.rating,
            amenities=list(data.amenities),
            contact_phone=contact.phone,
            contact_email=contact.email,
            contact_website=contact.website,
        )
        db.add(hotel)
        await flush_or_raise(db, "the hotel insert")
        logger.info("Hotel created: %s (%s)", hotel.id, hotel.name)
        return hotel_to_response(hotel)

    async def list_hotels(self, db: AsyncSession) -> List[HotelResponse]:
        try:
            result = await db.execute(select(Hotel).order_by(Hotel.created_at))
            return [hotel_to_response(h) for h in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing hotels: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve hotels. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_hotel(self, db: AsyncSession, hotel_id: Union[str, uuid.UUID]) -> HotelResponse:
        """
        Raises:
            NotFoundError: unknown or malformed id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        key = parse_identifier(hotel_id, "hotel")
        try:
            hotel = await db.get(Hotel, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching hotel %s: %s", key, str(e))
            raise DatabaseError(
                message="Could not retrieve the hotel. Please try again.",
                context={"hotel_id": str(key)},
            )
        if hotel is None:
            raise NotFoundError(resource="hotel", resource_id=str(key))
        return hotel_to_response(hotel)

    async def find_hotels(self, db: AsyncSession, hotel_ids: Sequence[uuid.UUID]) -> List[Hotel]:
        """Rows for the given ids; ids with no row are simply absent from the result."""
        if not hotel_ids:
            return []
        try:
            result = await db.execute(select(Hotel).where(Hotel.id.in_(list(hotel_ids))))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error resolving hotels: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})


# ── Singleton Instance ────────────────────────────────────────────────────
hotel_service = HotelService()
