"""Filesystem storage for uploaded profile pictures."""

import re
import secrets
import structlog
from pathlib import Path
from uuid import UUID

log = structlog.get_logger(__name__)

_EXTENSION_PATTERN = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
_REFERENCE_PATTERN = re.compile(r"^[0-9a-f-]{36}-[0-9a-f]{32}(\.[A-Za-z0-9]{1,10})?$")


class PictureStore:
    """Writes uploaded bytes under one directory and hands back a reference.

    A reference is the bare file name, e.g.
    ``6f1c...-9a0b...e3.png``; it never contains a path separator.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def save(self, user_id: UUID, filename: str, data: bytes) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        suffix = Path(filename).suffix
        if not _EXTENSION_PATTERN.match(suffix):
            suffix = ""
        reference = f"{user_id}-{secrets.token_hex(16)}{suffix.lower()}"
        (self.directory / reference).write_bytes(data)
        log.info("picture_stored", reference=reference, size=len(data))
        return reference

    def path_for(self, reference: str) -> Path | None:
        """Resolve a reference to an existing file, or None for unknown names."""
        if not _REFERENCE_PATTERN.match(reference):
            return None
        path = self.directory / reference
        return path if path.is_file() else None

    def remove(self, reference: str | None, owner: UUID | None = None) -> bool:
        """Delete a stored picture.

        References not owned by this store are left alone, and so are those of
        another user when ``owner`` is given.
        """
        if not reference:
            return False
        if owner is not None and not reference.startswith(f"{owner}-"):
            log.warning("picture_remove_refused", reference=reference, owner=str(owner))
            return False
        path = self.path_for(reference)
        if path is None:
            return False
        path.unlink(missing_ok=True)
        log.info("picture_removed", reference=reference)
        return True
