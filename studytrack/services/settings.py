"""Per-user settings use cases.  Each user has at most one settings record."""

import logging
import uuid
from typing import Optional

from studytrack.dao.base import SettingsRepository
from studytrack.errors import NotFoundError, ValidationError
from studytrack.services.auth import Clock, utc_now
from studytrack.services.ownership import ensure_owner

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {"theme": "light", "notifications": True, "language": "en"}


class CreateSettingsUseCase:
    def __init__(self, repo: SettingsRepository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def execute(self, user_id: str, requested_by: str) -> dict:
        """Create the default settings of *user_id*."""
        ensure_owner(user_id, requested_by)
        now = self._clock().isoformat()
        record = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            **DEFAULT_SETTINGS,
            "created_at": now,
            "updated_at": now,
        }
        if not self._repo.create(record):
            raise ValidationError("Settings already exist for this user.")
        logger.info("Default settings created for user '%s'.", user_id)
        return record


class FindSettingsByUserUseCase:
    def __init__(self, repo: SettingsRepository) -> None:
        self._repo = repo

    def execute(self, user_id: str, requested_by: str) -> dict:
        ensure_owner(user_id, requested_by)
        record = self._repo.get_by_user(user_id)
        if record is None:
            raise NotFoundError(f"No settings found for user '{user_id}'.")
        return record


class UpdateSettingsUseCase:
    def __init__(self, repo: SettingsRepository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def execute(
        self,
        user_id: str,
        requested_by: str,
        theme: Optional[str] = None,
        notifications: Optional[bool] = None,
        language: Optional[str] = None,
    ) -> dict:
        """Update the given fields; fields left as ``None`` keep their value."""
        ensure_owner(user_id, requested_by)
        changes = {
            name: value
            for name, value in (("theme", theme), ("notifications", notifications), ("language", language))
            if value is not None
        }
        changes["updated_at"] = self._clock().isoformat()
        record = self._repo.update(user_id, changes)
        if record is None:
            raise NotFoundError(f"No settings found for user '{user_id}'.")
        return record
