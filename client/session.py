"""Identity of the user whose profile the editor works on."""

from dataclasses import dataclass
from typing import Protocol
from config.settings import settings


class Identity(Protocol):
    @property
    def user_id(self) -> str: ...


@dataclass(frozen=True)
class StaticIdentity:
    """A fixed user id, e.g. from configuration or an upstream login flow."""
    user_id: str

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("user_id must not be empty")

    @classmethod
    def from_settings(cls) -> "StaticIdentity":
        return cls(settings.editor_user_id)
