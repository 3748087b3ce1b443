"""
Directory use cases.

Every operation on an existing directory first loads it and checks that it
belongs to the authenticated user.  A missing directory and one owned by
someone else both raise `UnauthorizedError`.
"""

import logging
import uuid

from studytrack.dao.base import DirectoryRepository
from studytrack.errors import NotFoundError
from studytrack.services.auth import Clock, utc_now
from studytrack.services.ownership import ensure_owner

logger = logging.getLogger(__name__)

ACTIVE = "active"
INACTIVE = "inactive"


class _DirectoryUseCase:
    def __init__(self, repo: DirectoryRepository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def _load_owned(self, directory_id: str, requested_by: str) -> dict:
        directory = self._repo.get(directory_id)
        owner_id = directory["user_id"] if directory is not None else None
        ensure_owner(owner_id, requested_by)
        return directory

    def _apply(self, directory_id: str, changes: dict) -> dict:
        updated = self._repo.update(directory_id, changes)
        if updated is None:
            raise NotFoundError(f"Directory '{directory_id}' not found.")
        return updated


class CreateDirectoryUseCase(_DirectoryUseCase):
    def execute(self, user_id: str, name: str, requested_by: str) -> dict:
        ensure_owner(user_id, requested_by)
        now = self._clock().isoformat()
        record = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "name": name.strip(),
            "status": ACTIVE,
            "created_at": now,
            "last_accessed_at": now,
        }
        self._repo.save(record)
        logger.info("User '%s' created directory '%s'.", user_id, record["id"])
        return record


class RenameDirectoryUseCase(_DirectoryUseCase):
    def execute(self, directory_id: str, new_name: str, requested_by: str) -> dict:
        self._load_owned(directory_id, requested_by)
        return self._apply(directory_id, {"name": new_name.strip()})


class DeactivateDirectoryUseCase(_DirectoryUseCase):
    def execute(self, directory_id: str, requested_by: str) -> dict:
        self._load_owned(directory_id, requested_by)
        logger.info("Deactivating directory '%s'.", directory_id)
        return self._apply(directory_id, {"status": INACTIVE})


class UpdateLastAccessUseCase(_DirectoryUseCase):
    def execute(self, directory_id: str, requested_by: str) -> dict:
        self._load_owned(directory_id, requested_by)
        return self._apply(directory_id, {"last_accessed_at": self._clock().isoformat()})


class ListRecentDirectoriesUseCase(_DirectoryUseCase):
    """Most recently accessed active directories of a user, newest first."""

    def __init__(self, repo: DirectoryRepository, limit: int = 5, clock: Clock = utc_now) -> None:
        super().__init__(repo, clock)
        self._limit = limit

    def execute(self, user_id: str, requested_by: str) -> list[dict]:
        ensure_owner(user_id, requested_by)
        active = [d for d in self._repo.list_by_user(user_id) if d.get("status") == ACTIVE]
        # ISO-8601 UTC timestamps sort chronologically as strings
        active.sort(key=lambda d: d.get("last_accessed_at") or "", reverse=True)
        return active[: self._limit]
