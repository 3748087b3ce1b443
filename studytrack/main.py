"""
Entry point for the Study Tracker API.

Run locally:
    JWT_SECRET_KEY=... uvicorn studytrack.main:create_app --factory --reload
or
    JWT_SECRET_KEY=... studytrack-api

Interactive docs available at:
    http://localhost:3333/docs  (Swagger UI)
    http://localhost:3333/redoc (ReDoc)
"""

import logging
from typing import Optional

from fastapi import FastAPI

from studytrack.apis.directories import directory_routes
from studytrack.apis.progress import progress_routes
from studytrack.apis.routes import Route
from studytrack.apis.server import ApiServer
from studytrack.apis.settings import settings_routes
from studytrack.apis.users import user_routes
from studytrack.config import Settings
from studytrack.dependencies.api import ensure_authenticated
from studytrack.dependencies.dao import Repositories, build_repositories
from studytrack.services.auth import PasswordHasher, TokenProvider

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


def build_routes(
    settings: Settings,
    repositories: Repositories,
    tokens: TokenProvider,
    hasher: Optional[PasswordHasher] = None,
) -> list[Route]:
    """Wire every controller to its use case and the shared token provider."""
    authenticate = ensure_authenticated(tokens)
    return [
        *user_routes(repositories.users, hasher or PasswordHasher(), tokens, authenticate),
        *directory_routes(
            repositories.directories, authenticate, settings.recent_directories_limit
        ),
        *settings_routes(repositories.settings, authenticate),
        *progress_routes(repositories.progress, repositories.directories, authenticate),
    ]


def create_server(
    settings: Optional[Settings] = None,
    repositories: Optional[Repositories] = None,
    tokens: Optional[TokenProvider] = None,
    hasher: Optional[PasswordHasher] = None,
) -> ApiServer:
    """
    Assemble the API server.

    Anything not supplied is built from *settings* (which in turn defaults
    to the environment).  Configuration problems (a missing JWT secret,
    duplicate routes) raise here, before anything listens.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)
    repositories = repositories or build_repositories(settings)
    tokens = tokens or TokenProvider.from_settings(settings)
    return ApiServer(build_routes(settings, repositories, tokens, hasher), settings)


def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[Repositories] = None,
    tokens: Optional[TokenProvider] = None,
    hasher: Optional[PasswordHasher] = None,
) -> FastAPI:
    """Application factory for ``uvicorn --factory`` and for tests."""
    return create_server(settings, repositories, tokens, hasher).app


def run() -> None:
    settings = Settings()
    create_server(settings).start(settings.port)


if __name__ == "__main__":
    run()
