"""
Repository wiring.

`build_repositories` returns the DynamoDB-backed implementations used in
production.  Swapping the backend (e.g. for tests) only requires passing a
different `Repositories` bundle to `studytrack.main.create_app`; no service
or controller code changes are needed:

    create_app(settings, repositories=Repositories(users=InMemoryUserRepository(), ...))
"""

from dataclasses import dataclass

from studytrack.config import Settings
from studytrack.dao.base import (
    DirectoryRepository,
    ProgressRepository,
    SettingsRepository,
    UserRepository,
)
from studytrack.dao.dynamodb import (
    DynamoDBDirectoryRepository,
    DynamoDBProgressRepository,
    DynamoDBSettingsRepository,
    DynamoDBUserRepository,
)


@dataclass(frozen=True)
class Repositories:
    users: UserRepository
    directories: DirectoryRepository
    settings: SettingsRepository
    progress: ProgressRepository


def build_repositories(settings: Settings) -> Repositories:
    """Return the DynamoDB repositories configured by *settings*."""
    return Repositories(
        users=DynamoDBUserRepository(settings),
        directories=DynamoDBDirectoryRepository(settings),
        settings=DynamoDBSettingsRepository(settings),
        progress=DynamoDBProgressRepository(settings),
    )
