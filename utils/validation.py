"""Identifier and payload validation for the user endpoints."""

import re
from typing import Any
from uuid import UUID
from pydantic import ValidationError
from storage.errors import InvalidPayloadError, InvalidUserIdError
from storage.models import PlatformsUpdate, ProfileUpdate

# Canonical 8-4-4-4-12 UUID or the same 32 hex digits without dashes
_USER_ID_PATTERN = re.compile(
    r"^(?:[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}|[0-9a-fA-F]{32})\Z"
)


def parse_user_id(raw_id: str) -> UUID:
    """Parse a store id (canonical UUID or 32 hex digits). Raises InvalidUserIdError."""
    if not _USER_ID_PATTERN.match(raw_id):
        raise InvalidUserIdError(raw_id)
    return UUID(raw_id)


def parse_profile_update(payload: Any) -> dict[str, str]:
    """Validate a profile PUT body and return only the fields it sets."""
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Profile update must be a JSON object")
    try:
        return ProfileUpdate.model_validate(payload).changes()
    except ValidationError as e:
        raise InvalidPayloadError(f"Invalid profile field: {e.errors()[0]['loc']}") from e


def parse_platforms(payload: Any) -> list[dict[str, str]]:
    """Validate a platforms PUT body ({"platforms": [{name, value}, ...]})."""
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Platforms update must be a JSON object")
    try:
        update = PlatformsUpdate.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayloadError(f"Invalid platform entry: {e.errors()[0]['loc']}") from e
    return [entry.model_dump() for entry in update.platforms]
