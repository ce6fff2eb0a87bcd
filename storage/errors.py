"""Errors raised by the user store and request validation."""


class UserStoreError(Exception):
    """Base class for failures the routes answer with a generic 500."""

    kind: str = "store"


class InvalidUserIdError(UserStoreError):
    """The identifier does not have the store's id shape."""

    kind = "invalid_argument"

    def __init__(self, raw_id: str) -> None:
        self.raw_id = raw_id
        super().__init__(f"Malformed user id: {raw_id!r}")


class UserNotFoundError(UserStoreError):
    """The identifier is well formed but matches no user."""

    kind = "not_found"

    def __init__(self, user_id: object) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class InvalidPayloadError(UserStoreError):
    """The request body does not have the expected shape."""

    kind = "invalid_payload"
