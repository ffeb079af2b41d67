"""
TripNest Backend - Item Service
=================================

What:  Create, list and fetch items (attractions).
How:   Hotel references are resolved before the insert; an id with no hotel
       row rejects the whole item with ValidationError, so an item never
       points at a missing hotel.
Who:   Called by the item routes (POST /add, GET /items, GET /viewDetail).
"""

import logging
import uuid
from typing import List, Sequence, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.exceptions import DatabaseError, NotFoundError, ValidationError
from tripnest.models.item import Item
from tripnest.schemas.item import ItemCreate, ItemResponse, SpecialDate
from tripnest.services.hotel_service import hotel_service
from tripnest.services.lookup import flush_or_raise, parse_identifier

logger = logging.getLogger(__name__)


def item_to_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        name=item.name,
        short_detail=item.short_detail,
        detail=item.detail,
        latitude=item.latitude,
        longitude=item.longitude,
        address=item.address,
        place_id=item.place_id,
        hotels=[hotel.id for hotel in item.hotels],
        images=list(item.images or []),
        category=item.category,
        special_date=SpecialDate(day=item.special_day, month=item.special_month),
        created_at=item.created_at,
    )


class ItemService:
    """
    Responsibilities:
        - create_item(): insert with resolved hotel references and image paths
        - list_items(): every item, oldest first
        - get_item(): one item or NotFoundError
    """

    async def create_item(
        self,
        db: AsyncSession,
        data: ItemCreate,
        image_urls: Sequence[str],
    ) -> ItemResponse:
        """
        Args:
            data: Validated form fields
            image_urls: Web paths of images already written by FileService

        Raises:
            ValidationError: a referenced hotel does not exist
            DatabaseError: the insert failed
        """
        # Keep order, drop repeats
        hotel_ids = list(dict.fromkeys(data.hotels))
        hotels = await hotel_service.find_hotels(db, hotel_ids)
        found = {hotel.id for hotel in hotels}
        missing = [str(hid) for hid in hotel_ids if hid not in found]
        if missing:
            raise ValidationError(
                message="One or more referenced hotels do not exist.",
                field="hotels",
                context={"missing": missing},
            )
        by_id = {hotel.id: hotel for hotel in hotels}

        item = Item(
            name=data.name,
            short_detail=data.short_detail,
            detail=data.detail,
            latitude=data.latitude,
            longitude=data.longitude,
            address=data.address,
            place_id=data.place_id,
            category=data.category,
            special_day=data.special_day,
            special_month=data.special_month,
            images=list(image_urls),
            hotels=[by_id[hid] for hid in hotel_ids],
        )
        db.add(item)
        await flush_or_raise(db, "the item insert")
        logger.info(
            "Item created: %s (%d images, %d hotels)", item.id, len(item.images), len(hotel_ids)
        )
        return item_to_response(item)

    async def list_items(self, db: AsyncSession) -> List[ItemResponse]:
        try:
            result = await db.execute(select(Item).order_by(Item.created_at))
            return [item_to_response(item) for item in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing items: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve items. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_item(self, db: AsyncSession, item_id: Union[str, uuid.UUID]) -> ItemResponse:
        """
        Raises:
            NotFoundError: unknown or malformed id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        key = parse_identifier(item_id, "item")
        try:
            item = await db.get(Item, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching item %s: %s", key, str(e))
            raise DatabaseError(
                message="Could not retrieve the item. Please try again.",
                context={"item_id": str(key)},
            )
        if item is None:
            raise NotFoundError(resource="item", resource_id=str(key))
        return item_to_response(item)

    async def item_exists(self, db: AsyncSession, item_id: uuid.UUID) -> bool:
        try:
            result = await db.execute(select(Item.id).where(Item.id == item_id))
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error("Database error checking item %s: %s", item_id, str(e))
            raise DatabaseError(context={"item_id": str(item_id)})


# ── Singleton Instance ────────────────────────────────────────────────────
item_service = ItemService()
