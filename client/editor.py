"""Client-side state for the profile editing form."""

import asyncio
import aiohttp
import structlog
from dataclasses import asdict, dataclass
from typing import Any
from client.api import UserServiceClient, UserServiceClientError
from client.session import Identity
from config.constants import EDITABLE_PROFILE_FIELDS, MSG_DUPLICATE_PLATFORM, PLATFORM_OPTIONS

log = structlog.get_logger(__name__)

# Failures of a request to the service, as seen by the editor
_REQUEST_ERRORS = (UserServiceClientError, aiohttp.ClientError, asyncio.TimeoutError)


@dataclass
class PlatformRow:
    """One editable platform line: dropdown choice plus free-text value."""
    name: str = ""
    value: str = ""

    @property
    def is_complete(self) -> bool:
        return self.name != "" and self.value != ""


def find_duplicate_platform(rows: list[PlatformRow]) -> str | None:
    """Return the first platform name used by more than one complete row."""
    seen: set[str] = set()
    for row in rows:
        if not row.is_complete:
            continue
        if row.name in seen:
            return row.name
        seen.add(row.name)
    return None


class ProfileEditor:
    """Holds profile fields, platform rows and one user-visible error message.

    Every failed request, whether a fetch, a save or an upload, is logged and
    reported through ``error_message``.
    """

    platform_options = PLATFORM_OPTIONS

    def __init__(self, client: UserServiceClient, identity: Identity) -> None:
        self.client = client
        self.identity = identity
        self.profile: dict[str, Any] = {}
        self.platforms: list[PlatformRow] = []
        self.error_message = ""
        self.picture_preview: bytes | None = None
        # Last profile known to be stored server-side, used to undo a half-done save
        self._saved_profile: dict[str, Any] | None = None

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    # ── Loading ──

    async def load(self) -> None:
        """Fetch profile and platforms independently of each other."""
        await asyncio.gather(self._load_profile(), self._load_platforms())

    async def _load_profile(self) -> None:
        try:
            data = await self.client.get_profile(self.user_id)
        except _REQUEST_ERRORS as e:
            self._fail("profile_fetch_failed", "Could not load profile.", e)
            return
        self.profile = dict(data)
        self._saved_profile = dict(data)

    async def _load_platforms(self) -> None:
        try:
            data = await self.client.get_platforms(self.user_id)
        except _REQUEST_ERRORS as e:
            self._fail("platforms_fetch_failed", "Could not load platforms.", e)
            return
        self.platforms = [PlatformRow(entry["name"], entry["value"]) for entry in data]

    # ── Local edits ──

    def set_field(self, field: str, value: str) -> None:
        if field not in EDITABLE_PROFILE_FIELDS:
            raise KeyError(field)
        self.profile[field] = value

    def add_platform(self) -> None:
        self.platforms.append(PlatformRow())

    def delete_platform(self, index: int) -> None:
        del self.platforms[index]

    def change_platform_name(self, index: int, name: str) -> None:
        if name not in self.platform_options:
            raise ValueError(f"Unknown platform: {name!r}")
        self.platforms[index].name = name

    def change_platform_value(self, index: int, value: str) -> None:
        self.platforms[index].value = value

    # ── Saving ──

    @staticmethod
    def _editable_fields(profile: dict[str, Any]) -> dict[str, str]:
        # The service only accepts string values; unset fields are left out.
        # profile_picture is never sent so a save cannot undo an upload.
        return {
            field: profile[field]
            for field in EDITABLE_PROFILE_FIELDS
            if isinstance(profile.get(field), str)
        }

    async def save(self) -> bool:
        """Validate, then PUT profile and platforms. Returns True if both were stored."""
        duplicate = find_duplicate_platform(self.platforms)
        if duplicate is not None:
            log.info("save_rejected_duplicate_platform", platform=duplicate)
            self.error_message = MSG_DUPLICATE_PLATFORM
            return False

        self.error_message = ""
        filtered = [row for row in self.platforms if row.is_complete]
        profile = self._editable_fields(self.profile)

        try:
            await self.client.update_profile(self.user_id, profile)
        except _REQUEST_ERRORS as e:
            self._fail("profile_save_failed", "Could not save profile.", e)
            return False

        try:
            await self.client.update_platforms(self.user_id, [asdict(row) for row in filtered])
        except _REQUEST_ERRORS as e:
            self._fail("platforms_save_failed", "Could not save platforms; profile changes were reverted.", e)
            await self._revert_profile()
            return False

        self.platforms = filtered
        self._saved_profile = dict(self.profile)
        log.info("profile_saved", user_id=self.user_id, platforms=len(filtered))
        return True

    async def _revert_profile(self) -> None:
        if self._saved_profile is None:
            return
        try:
            await self.client.update_profile(self.user_id, self._editable_fields(self._saved_profile))
        except _REQUEST_ERRORS as e:
            log.error("profile_revert_failed", user_id=self.user_id, error=str(e))

    # ── Picture upload ──

    async def upload_picture(
        self,
        filename: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> bool:
        """Upload a new picture and show it locally without re-fetching."""
        try:
            await self.client.upload_picture(self.user_id, filename, data, content_type)
        except _REQUEST_ERRORS as e:
            self._fail("picture_upload_failed", "Could not upload profile picture.", e)
            return False
        self.picture_preview = data
        return True

    def _fail(self, event: str, message: str, error: Exception) -> None:
        log.error(event, user_id=self.user_id, error=str(error))
        self.error_message = message
