"""
TripNest Backend - Request Payload Helpers
============================================

What:  Read a request body that may be JSON or a form, and validate it
       against a pydantic schema.
How:   - JSON bodies must be objects.
       - Form bodies (urlencoded or multipart) become a plain dict. A key sent
         more than once becomes a list, empty strings are dropped, and file
         parts are skipped (the item route reads those separately).
       - pydantic errors become a ValidationError whose context lists
         {"field", "message"} per problem, so the 400 body says what was wrong.
"""

import json
import logging
from typing import Any, Dict, List, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from tripnest.exceptions import ValidationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


async def read_payload(request: Request) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError(message="Request body is not valid JSON.")
        if not isinstance(data, dict):
            raise ValidationError(message="Request body must be a JSON object.")
        return data

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        payload: Dict[str, Any] = {}
        for key in form.keys():
            values: List[str] = [
                value
                for value in form.getlist(key)
                if not isinstance(value, UploadFile) and value != ""
            ]
            if not values:
                continue
            payload[key] = values[0] if len(values) == 1 else values
        return payload

    return {}


def validate_payload(schema: Type[SchemaT], payload: Dict[str, Any]) -> SchemaT:
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "body",
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        logger.info("Rejected %s payload: %s", schema.__name__, errors)
        raise ValidationError(
            message="Request validation failed.",
            context={"errors": errors},
        )
