"""
User routes.

Endpoints
─────────
  POST   /user          Register an account (public)
  POST   /user/login    Exchange credentials for a bearer token (public)
  GET    /user/{id}     Read your own profile
"""

from fastapi import status
from starlette.requests import Request
from starlette.responses import Response

from studytrack.apis.responses import error_response, read_body, run_use_case
from studytrack.apis.routes import HttpMethod, Middleware, Route
from studytrack.dao.base import UserRepository
from studytrack.dependencies.api import current_user_id
from studytrack.errors import ValidationError
from studytrack.schemas.users import (
    CreateUserRequest,
    CreateUserResponse,
    LoginRequest,
    LoginResponse,
    UserResponse,
)
from studytrack.services.auth import PasswordHasher, TokenProvider
from studytrack.services.users import CreateUserUseCase, GetUserUseCase, LoginUseCase
from studytrack.validators import is_safe

TAGS = ("Users",)


def create_user_route(use_case) -> Route:
    async def create_user(request: Request) -> Response:
        try:
            body = await read_body(request, CreateUserRequest)
        except ValidationError as exc:
            return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
        if not is_safe(body.username):
            return error_response(status.HTTP_400_BAD_REQUEST, "The username is invalid or unsafe.")

        return await run_use_case(
            use_case,
            CreateUserResponse.model_validate,
            status_code=status.HTTP_201_CREATED,
            username=body.username,
            email=body.email,
            password=body.password,
        )

    return Route("/user", HttpMethod.POST, create_user, name="create_user", tags=TAGS)


def login_route(use_case) -> Route:
    async def login(request: Request) -> Response:
        try:
            body = await read_body(request, LoginRequest)
        except ValidationError as exc:
            return error_response(status.HTTP_400_BAD_REQUEST, str(exc))

        return await run_use_case(
            use_case,
            LoginResponse.model_validate,
            email=body.email,
            password=body.password,
        )

    return Route("/user/login", HttpMethod.POST, login, name="login", tags=TAGS)


def get_user_route(use_case, authenticate: Middleware) -> Route:
    async def get_user(request: Request) -> Response:
        return await run_use_case(
            use_case,
            UserResponse.model_validate,
            user_id=request.path_params["id"],
            requested_by=current_user_id(request),
        )

    return Route(
        "/user/{id}",
        HttpMethod.GET,
        get_user,
        middlewares=(authenticate,),
        name="get_user",
        tags=TAGS,
    )


def user_routes(
    repo: UserRepository,
    hasher: PasswordHasher,
    tokens: TokenProvider,
    authenticate: Middleware,
) -> list[Route]:
    return [
        create_user_route(CreateUserUseCase(repo, hasher, tokens)),
        login_route(LoginUseCase(repo, hasher, tokens)),
        get_user_route(GetUserUseCase(repo), authenticate),
    ]
