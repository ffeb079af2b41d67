"""
TripNest Backend - Item Route Handlers
========================================

What:  POST /add (create an item with images), GET /items, GET /viewDetail.
How:   The create route validates the text fields first, then hands the
       `images` file parts to FileService, then inserts the item. If the
       insert fails, the images written for this request are removed.
Who:   /add is for officers and admins; the read routes are public.

Request Flow (POST /add, multipart/form-data):
    1. Guard: session user with role officer or above
    2. Read form; collect up to 7 `images` parts
    3. Validate fields (ItemCreate) → 400 on bad numbers or missing date parts
    4. Store images → /uploads/<name> paths
    5. Insert item (hotel references checked) → 201 {"message", "id"}
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from tripnest.auth.guards import require_role
from tripnest.database import get_db_session
from tripnest.dependencies import get_file_service
from tripnest.exceptions import ValidationError
from tripnest.models.user import Role, User
from tripnest.routes.payload import read_payload, validate_payload
from tripnest.schemas.common import CreatedResponse, ErrorResponse
from tripnest.schemas.item import ItemCreate, ItemResponse
from tripnest.services.file_service import FileService, IncomingFile
from tripnest.services.item_service import item_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(tags=["Items"])

IMAGE_FIELD = "images"


async def _collect_images(request: Request, file_service: FileService) -> List[IncomingFile]:
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/form-data"):
        return []

    form = await request.form()
    # Browsers send an empty part with no filename when nothing was chosen
    uploads = [
        part
        for part in form.getlist(IMAGE_FIELD)
        if isinstance(part, UploadFile) and part.filename
    ]
    file_service.validate_count(len(uploads))

    files: List[IncomingFile] = []
    for upload in uploads:
        try:
            content = await upload.read()
        finally:
            await upload.close()
        files.append(
            IncomingFile(filename=upload.filename, content=content, content_length=upload.size)
        )
    return files


@router.post(
    "/add",
    status_code=201,
    response_model=CreatedResponse,
    responses={
        400: {"description": "Invalid fields, too many or unsupported images", "model": ErrorResponse},
        403: {"description": "Role below officer", "model": ErrorResponse},
        500: {"description": "Storage or database failure", "model": ErrorResponse},
    },
    summary="Create an item with up to 7 images",
)
async def add_item(
    request: Request,
    user: User = Depends(require_role(Role.OFFICER)),
    db: AsyncSession = Depends(get_db_session),
    file_service: FileService = Depends(get_file_service),
) -> CreatedResponse:
    payload = await read_payload(request)
    data = validate_payload(ItemCreate, payload)
    files = await _collect_images(request, file_service)

    stored = await file_service.store_images(files)
    try:
        item = await item_service.create_item(db, data, [s.url for s in stored])
    except Exception:
        logger.warning(
            "Item insert failed; removing %d stored image(s)", len(stored)
        )
        await file_service.cleanup_files(stored)
        raise

    logger.info("Item %s added by user %s", item.id, user.id)
    return CreatedResponse(id=item.id)


@router.get(
    "/items",
    response_model=List[ItemResponse],
    summary="List all items",
)
async def list_items(db: AsyncSession = Depends(get_db_session)) -> List[ItemResponse]:
    return await item_service.list_items(db)


@router.get(
    "/viewDetail",
    response_model=ItemResponse,
    responses={
        400: {"description": "item_id missing", "model": ErrorResponse},
        404: {"description": "Item not found", "model": ErrorResponse},
    },
    summary="Fetch one item (query parameter form)",
)
async def view_detail(
    item_id: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ItemResponse:
    if not item_id:
        raise ValidationError(message="item_id query parameter is required", field="item_id")
    return await item_service.get_item(db, item_id)


@router.get(
    "/viewDetail/{item_id}",
    response_model=ItemResponse,
    responses={404: {"description": "Item not found", "model": ErrorResponse}},
    summary="Fetch one item",
)
async def view_detail_by_path(
    item_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ItemResponse:
    # str, not UUID: a malformed id is a 404 like any unknown id
    return await item_service.get_item(db, item_id)
