"""
Directory routes.  Every endpoint requires a valid bearer token.

Endpoints
─────────
  POST   /{id}/directory                  Create a directory for user {id}
  PATCH  /directory/{id}/rename           Rename a directory
  PATCH  /directory/{id}/deactivate       Mark a directory inactive
  PATCH  /directory/{id}/updateLastAccess Touch a directory's last access time
  GET    /{id}/directory/recents          Recently accessed directories of user {id}
"""

from fastapi import status
from starlette.requests import Request
from starlette.responses import Response

from studytrack.apis.responses import error_response, read_body, run_use_case
from studytrack.apis.routes import HttpMethod, Middleware, Route
from studytrack.dao.base import DirectoryRepository
from studytrack.dependencies.api import current_user_id
from studytrack.errors import ValidationError
from studytrack.schemas.directories import (
    CreateDirectoryRequest,
    DirectoryAccessResponse,
    DirectoryResponse,
    DirectoryStatusResponse,
    RecentDirectoriesResponse,
    RenameDirectoryRequest,
    RenamedDirectoryResponse,
)
from studytrack.services.directories import (
    CreateDirectoryUseCase,
    DeactivateDirectoryUseCase,
    ListRecentDirectoriesUseCase,
    RenameDirectoryUseCase,
    UpdateLastAccessUseCase,
)
from studytrack.validators import is_safe

TAGS = ("Directories",)


def create_directory_route(use_case, authenticate: Middleware) -> Route:
    async def create_directory(request: Request) -> Response:
        try:
            body = await read_body(request, CreateDirectoryRequest)
        except ValidationError as exc:
            return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
        if not is_safe(body.name):
            return error_response(status.HTTP_400_BAD_REQUEST, "The directory name is invalid or unsafe.")

        return await run_use_case(
            use_case,
            DirectoryResponse.model_validate,
            status_code=status.HTTP_201_CREATED,
            user_id=request.path_params["id"],
            name=body.name,
            requested_by=current_user_id(request),
        )

    return Route(
        "/{id}/directory",
        HttpMethod.POST,
        create_directory,
        middlewares=(authenticate,),
        name="create_directory",
        tags=TAGS,
    )


def rename_directory_route(use_case, authenticate: Middleware) -> Route:
    async def rename_directory(request: Request) -> Response:
        try:
            body = await read_body(request, RenameDirectoryRequest)
        except ValidationError as exc:
            return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
        if not is_safe(body.new_directory_name):
            return error_response(
                status.HTTP_400_BAD_REQUEST, "The new directory name is invalid or unsafe."
            )

        return await run_use_case(
            use_case,
            RenamedDirectoryResponse.model_validate,
            directory_id=request.path_params["id"],
            new_name=body.new_directory_name,
            requested_by=current_user_id(request),
        )

    return Route(
        "/directory/{id}/rename",
        HttpMethod.PATCH,
        rename_directory,
        middlewares=(authenticate,),
        name="rename_directory",
        tags=TAGS,
    )


def deactivate_directory_route(use_case, authenticate: Middleware) -> Route:
    async def deactivate_directory(request: Request) -> Response:
        return await run_use_case(
            use_case,
            DirectoryStatusResponse.model_validate,
            directory_id=request.path_params["id"],
            requested_by=current_user_id(request),
        )

    return Route(
        "/directory/{id}/deactivate",
        HttpMethod.PATCH,
        deactivate_directory,
        middlewares=(authenticate,),
        name="deactivate_directory",
        tags=TAGS,
    )


def update_last_access_route(use_case, authenticate: Middleware) -> Route:
    async def update_last_access(request: Request) -> Response:
        return await run_use_case(
            use_case,
            DirectoryAccessResponse.model_validate,
            directory_id=request.path_params["id"],
            requested_by=current_user_id(request),
        )

    return Route(
        "/directory/{id}/updateLastAccess",
        HttpMethod.PATCH,
        update_last_access,
        middlewares=(authenticate,),
        name="update_directory_last_access",
        tags=TAGS,
    )


def _present_recents(directories: list[dict]) -> RecentDirectoriesResponse:
    return RecentDirectoriesResponse.model_validate({"directories": directories})


def list_recent_directories_route(use_case, authenticate: Middleware) -> Route:
    async def list_recent_directories(request: Request) -> Response:
        return await run_use_case(
            use_case,
            _present_recents,
            user_id=request.path_params["id"],
            requested_by=current_user_id(request),
        )

    return Route(
        "/{id}/directory/recents",
        HttpMethod.GET,
        list_recent_directories,
        middlewares=(authenticate,),
        name="list_recent_directories",
        tags=TAGS,
    )


def directory_routes(
    repo: DirectoryRepository,
    authenticate: Middleware,
    recents_limit: int = 5,
) -> list[Route]:
    return [
        create_directory_route(CreateDirectoryUseCase(repo), authenticate),
        rename_directory_route(RenameDirectoryUseCase(repo), authenticate),
        deactivate_directory_route(DeactivateDirectoryUseCase(repo), authenticate),
        update_last_access_route(UpdateLastAccessUseCase(repo), authenticate),
        list_recent_directories_route(
            ListRecentDirectoriesUseCase(repo, limit=recents_limit), authenticate
        ),
    ]
