"""
Progress use cases: a per-user "completed" counter plus a statistics summary
that combines it with the user's directories.
"""

import logging
import uuid

from studytrack.dao.base import DirectoryRepository, ProgressRepository
from studytrack.errors import NotFoundError, ValidationError
from studytrack.services.auth import Clock, utc_now
from studytrack.services.directories import ACTIVE, INACTIVE
from studytrack.services.ownership import ensure_owner

logger = logging.getLogger(__name__)


class CreateProgressUseCase:
    def __init__(self, repo: ProgressRepository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def execute(self, user_id: str, requested_by: str) -> dict:
        ensure_owner(user_id, requested_by)
        now = self._clock().isoformat()
        record = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "completed": 0,
            "created_at": now,
            "updated_at": now,
        }
        if not self._repo.create(record):
            raise ValidationError("Progress already exists for this user.")
        return record


class IncreaseProgressUseCase:
    def __init__(self, repo: ProgressRepository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def execute(self, user_id: str, requested_by: str) -> dict:
        """Add one to the user's completed counter."""
        ensure_owner(user_id, requested_by)
        record = self._repo.increment(user_id, "completed", 1, self._clock().isoformat())
        if record is None:
            raise NotFoundError(f"No progress found for user '{user_id}'.")
        logger.info("User '%s' completed count is now %s.", user_id, record["completed"])
        return record


class ResumeStatisticsUseCase:
    def __init__(self, progress: ProgressRepository, directories: DirectoryRepository) -> None:
        self._progress = progress
        self._directories = directories

    def execute(self, user_id: str, requested_by: str) -> dict:
        ensure_owner(user_id, requested_by)
        record = self._progress.get_by_user(user_id)
        if record is None:
            raise NotFoundError(f"No progress found for user '{user_id}'.")
        statuses = [d.get("status") for d in self._directories.list_by_user(user_id)]
        return {
            "user_id": user_id,
            "completed": record["completed"],
            "active_directories": statuses.count(ACTIVE),
            "inactive_directories": statuses.count(INACTIVE),
            "last_updated_at": record.get("updated_at"),
        }
