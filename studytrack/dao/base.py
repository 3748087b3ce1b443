"""
Abstract DAOs (Data Access Objects) for the study tracker's records.

Each repository defines the persistence contract one service depends on.
Concrete implementations (DynamoDB, in-memory for tests, …) must fulfil
these interfaces without the service or controller knowing which backend
is in use.

Records are plain dicts keyed by an ``id`` string; records that belong to a
user also carry ``user_id``.
"""

from abc import ABC, abstractmethod
from typing import Optional


class UserRepository(ABC):
    """Persistence interface for user accounts."""

    @abstractmethod
    def save(self, record: dict) -> None:
        """Persist (insert or replace) a user record."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[dict]:
        """Return the user with *user_id*, or ``None``."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[dict]:
        """Return the user registered with *email*, or ``None``."""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[dict]:
        """Return the user registered with *username*, or ``None``."""


class DirectoryRepository(ABC):
    """Persistence interface for study directories."""

    @abstractmethod
    def save(self, record: dict) -> None:
        """Persist (insert or replace) a directory record."""

    @abstractmethod
    def get(self, directory_id: str) -> Optional[dict]:
        """Return the directory with *directory_id*, or ``None``."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[dict]:
        """Return every directory owned by *user_id*, in no particular order."""

    @abstractmethod
    def update(self, directory_id: str, changes: dict) -> Optional[dict]:
        """
        Apply *changes* to the directory and return the updated record.

        Returns ``None`` when no matching record exists.
        """


class SettingsRepository(ABC):
    """Persistence interface for per-user settings (one record per user)."""

    @abstractmethod
    def create(self, record: dict) -> bool:
        """
        Insert a settings record unless the user already has one.

        Returns ``False``, leaving the stored record untouched, when one exists.
        """

    @abstractmethod
    def get_by_user(self, user_id: str) -> Optional[dict]:
        """Return the settings of *user_id*, or ``None``."""

    @abstractmethod
    def update(self, user_id: str, changes: dict) -> Optional[dict]:
        """Apply *changes* to the user's settings; ``None`` if there are none."""


class ProgressRepository(ABC):
    """Persistence interface for per-user progress counters."""

    @abstractmethod
    def create(self, record: dict) -> bool:
        """
        Insert a progress record unless the user already has one.

        Returns ``False``, leaving the stored record untouched, when one exists.
        """

    @abstractmethod
    def get_by_user(self, user_id: str) -> Optional[dict]:
        """Return the progress record of *user_id*, or ``None``."""

    @abstractmethod
    def increment(self, user_id: str, field: str, amount: int, updated_at: str) -> Optional[dict]:
        """
        Atomically add *amount* to the numeric *field* of the user's progress.

        Returns the updated record, or ``None`` when the user has none.
        """
