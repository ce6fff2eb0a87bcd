"""aiohttp client for the user profile service."""

import aiohttp
import structlog
from typing import Any
from config.settings import settings
from config.constants import UPLOAD_FIELD

log = structlog.get_logger(__name__)


class UserServiceClientError(Exception):
    """Raised when the service answers with anything but 200."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        super().__init__(message)


class UserServiceClient:
    """Thin wrapper over the /users endpoints. No retries."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self._timeout = timeout or settings.http_timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "UserServiceClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    def _url(self, user_id: str, suffix: str = "") -> str:
        return f"{self.base_url}/users/{user_id}{suffix}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        session = await self.get_session()
        async with session.request(method, url, **kwargs) as resp:
            try:
                body = await resp.json(content_type=None)
            except ValueError:
                body = None
            if resp.status != 200:
                message = body.get("error") if isinstance(body, dict) else None
                log.warning("user_service_error", method=method, url=url, status=resp.status)
                raise UserServiceClientError(resp.status, message or f"HTTP {resp.status} for {url}")
            return body

    async def get_profile(self, user_id: str) -> dict[str, Any]:
        return await self._request("GET", self._url(user_id))

    async def update_profile(self, user_id: str, profile: dict[str, Any]) -> str:
        body = await self._request("PUT", self._url(user_id), json=profile)
        return body["message"]

    async def get_platforms(self, user_id: str) -> list[dict[str, str]]:
        return await self._request("GET", self._url(user_id, "/platforms"))

    async def update_platforms(self, user_id: str, platforms: list[dict[str, str]]) -> str:
        body = await self._request(
            "PUT", self._url(user_id, "/platforms"), json={"platforms": platforms}
        )
        return body["message"]

    async def get_profile_picture(self, user_id: str) -> str | None:
        body = await self._request("GET", self._url(user_id, "/profilePicture"))
        return body["profile_picture"]

    async def upload_picture(
        self,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        form = aiohttp.FormData()
        form.add_field(UPLOAD_FIELD, data, filename=filename, content_type=content_type)
        body = await self._request("PUT", self._url(user_id, "/uploadPicture"), data=form)
        return body["message"]
