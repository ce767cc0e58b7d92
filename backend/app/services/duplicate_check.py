from __future__ import annotations

import logging
from typing import Any

from app.services.employee_service import employee_service

logger = logging.getLogger(__name__)

SUPPORTED_FIELDS = ("employee_number", "email")

MISSING_FIELD_MESSAGE = "Field and value are required"
UNSUPPORTED_FIELD_MESSAGE = "Unsupported field"


class DuplicateCheckValidationError(Exception):
    pass


class DuplicateCheckError(Exception):
    pass


async def check_duplicate(
    field: Any,
    value: str | int | None,
    exclude_id: str | None = None,
) -> bool:
    """Return whether another employee already uses ``value`` for ``field``."""
    if not field or not value:
        raise DuplicateCheckValidationError(MISSING_FIELD_MESSAGE)

    if not isinstance(field, str) or field not in SUPPORTED_FIELDS:
        raise DuplicateCheckValidationError(UNSUPPORTED_FIELD_MESSAGE)

    value = str(value)

    try:
        if field == "employee_number":
            exists = await employee_service.employee_number_exists(value, exclude_id)
        else:
            exists = await employee_service.email_exists(value, exclude_id)
    except Exception as e:
        logger.error("Duplicate check failed for field=%s: %s", field, e)
        raise DuplicateCheckError(str(e)) from e

    logger.debug("Duplicate check field=%s exclude_id=%s exists=%s", field, exclude_id, exists)
    return exists
