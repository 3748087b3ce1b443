"""
Settings routes.  Every endpoint requires a valid bearer token and only
accepts the caller's own user id.

Endpoints
─────────
  POST   /{id}/settings    Create default settings
  GET    /{id}/settings    Read settings
  PUT    /{id}/settings    Update theme / notifications / language
"""

from fastapi import status
from starlette.requests import Request
from starlette.responses import Response

from studytrack.apis.responses import error_response, read_body, run_use_case
from studytrack.apis.routes import HttpMethod, Middleware, Route
from studytrack.dao.base import SettingsRepository
from studytrack.dependencies.api import current_user_id
from studytrack.errors import ValidationError
from studytrack.schemas.settings import SettingsResponse, UpdateSettingsRequest
from studytrack.services.settings import (
    CreateSettingsUseCase,
    FindSettingsByUserUseCase,
    UpdateSettingsUseCase,
)

TAGS = ("Settings",)
PATH = "/{id}/settings"


def create_settings_route(use_case, authenticate: Middleware) -> Route:
    async def create_settings(request: Request) -> Response:
        return await run_use_case(
            use_case,
            SettingsResponse.model_validate,
            status_code=status.HTTP_201_CREATED,
            user_id=request.path_params["id"],
            requested_by=current_user_id(request),
        )

    return Route(
        PATH, HttpMethod.POST, create_settings, middlewares=(authenticate,), name="create_settings", tags=TAGS
    )


def find_settings_route(use_case, authenticate: Middleware) -> Route:
    async def find_settings(request: Request) -> Response:
        return await run_use_case(
            use_case,
            SettingsResponse.model_validate,
            user_id=request.path_params["id"],
            requested_by=current_user_id(request),
        )

    return Route(
        PATH, HttpMethod.GET, find_settings, middlewares=(authenticate,), name="find_settings", tags=TAGS
    )


def update_settings_route(use_case, authenticate: Middleware) -> Route:
    async def update_settings(request: Request) -> Response:
        try:
            body = await read_body(request, UpdateSettingsRequest)
        except ValidationError as exc:
            return error_response(status.HTTP_400_BAD_REQUEST, str(exc))

        return await run_use_case(
            use_case,
            SettingsResponse.model_validate,
            user_id=request.path_params["id"],
            requested_by=current_user_id(request),
            **body.model_dump(exclude_none=True),
        )

    return Route(
        PATH, HttpMethod.PUT, update_settings, middlewares=(authenticate,), name="update_settings", tags=TAGS
    )


def settings_routes(repo: SettingsRepository, authenticate: Middleware) -> list[Route]:
    return [
        create_settings_route(CreateSettingsUseCase(repo), authenticate),
        find_settings_route(FindSettingsByUserUseCase(repo), authenticate),
        update_settings_route(UpdateSettingsUseCase(repo), authenticate),
    ]
