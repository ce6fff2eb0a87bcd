"""Request payload models for the user endpoints."""

from pydantic import BaseModel, StrictStr


class ProfileUpdate(BaseModel):
    """Any subset of the profile fields; every provided value must be a string."""

    model_config = {"extra": "ignore"}

    # Defaults are not validated, so an omitted key stays None while an
    # explicit null is rejected by StrictStr.
    email: StrictStr = None  # type: ignore[assignment]
    first_name: StrictStr = None  # type: ignore[assignment]
    last_name: StrictStr = None  # type: ignore[assignment]
    profile_picture: StrictStr = None  # type: ignore[assignment]

    def changes(self) -> dict[str, str]:
        return self.model_dump(exclude_unset=True)


class PlatformEntry(BaseModel):
    model_config = {"extra": "ignore"}

    name: StrictStr
    value: StrictStr


class PlatformsUpdate(BaseModel):
    platforms: list[PlatformEntry]
