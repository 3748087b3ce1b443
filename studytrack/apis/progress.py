"""
Progress routes.  Every endpoint requires a valid bearer token and only
accepts the caller's own user id.

Endpoints
─────────
  POST   /{id}/progress               Start tracking progress
  PATCH  /{id}/progress/increase      Count one more completed item
  GET    /{id}/progress/statistics    Progress summary with directory counts
"""

from fastapi import status
from starlette.requests import Request
from starlette.responses import Response

from studytrack.apis.responses import run_use_case
from studytrack.apis.routes import HttpMethod, Middleware, Route
from studytrack.dao.base import DirectoryRepository, ProgressRepository
from studytrack.dependencies.api import current_user_id
from studytrack.schemas.progress import ProgressResponse, StatisticsResponse
from studytrack.services.progress import (
    CreateProgressUseCase,
    IncreaseProgressUseCase,
    ResumeStatisticsUseCase,
)

TAGS = ("Progress",)


def _user_route(path: str, method: HttpMethod, use_case, presenter, authenticate, name, status_code):
    async def handler(request: Request) -> Response:
        return await run_use_case(
            use_case,
            presenter,
            status_code=status_code,
            user_id=request.path_params["id"],
            requested_by=current_user_id(request),
        )

    handler.__name__ = name
    return Route(path, method, handler, middlewares=(authenticate,), name=name, tags=TAGS)


def create_progress_route(use_case, authenticate: Middleware) -> Route:
    return _user_route(
        "/{id}/progress",
        HttpMethod.POST,
        use_case,
        ProgressResponse.model_validate,
        authenticate,
        "create_progress",
        status.HTTP_201_CREATED,
    )


def increase_progress_route(use_case, authenticate: Middleware) -> Route:
    return _user_route(
        "/{id}/progress/increase",
        HttpMethod.PATCH,
        use_case,
        ProgressResponse.model_validate,
        authenticate,
        "increase_progress",
        status.HTTP_200_OK,
    )


def statistics_route(use_case, authenticate: Middleware) -> Route:
    return _user_route(
        "/{id}/progress/statistics",
        HttpMethod.GET,
        use_case,
        StatisticsResponse.model_validate,
        authenticate,
        "resume_progress_statistics",
        status.HTTP_200_OK,
    )


def progress_routes(
    repo: ProgressRepository,
    directories: DirectoryRepository,
    authenticate: Middleware,
) -> list[Route]:
    return [
        create_progress_route(CreateProgressUseCase(repo), authenticate),
        increase_progress_route(IncreaseProgressUseCase(repo), authenticate),
        statistics_route(ResumeStatisticsUseCase(repo, directories), authenticate),
    ]
