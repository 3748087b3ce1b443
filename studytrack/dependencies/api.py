"""
Middleware that protects routes behind bearer-token authentication.

Usage when building a route:
    authenticate = ensure_authenticated(token_provider)
    Route("/directory/{id}/rename", HttpMethod.PATCH, handler, middlewares=(authenticate,))

Handlers behind it read the caller with `current_user_id(request)`.
"""

import logging

from fastapi import status
from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from studytrack.apis.routes import CallNext, Middleware
from studytrack.errors import TokenError
from studytrack.services.auth import TokenProvider

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized access"


def _unauthorized() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": UNAUTHORIZED_MESSAGE},
        headers={"WWW-Authenticate": "Bearer"},
    )


def ensure_authenticated(token_provider: TokenProvider) -> Middleware:
    """
    Build the authentication middleware bound to *token_provider*.

    The middleware answers 401 ``{"error": "Unauthorized access"}`` when the
    ``Authorization`` header is missing, is not of the form
    ``Bearer <token>``, or carries a token that fails verification.  The
    failure kind is logged but never sent to the client, and the rest of the
    chain is not run.  On success the token subject is stored on
    ``request.state.user_id``.
    """

    async def authenticate(request: Request, call_next: CallNext) -> Response:
        scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
        if scheme.lower() != "bearer" or not token or " " in token:
            logger.info("Rejected %s %s: missing bearer token", request.method, request.url.path)
            return _unauthorized()

        try:
            user_id = token_provider.verify(token)
        except TokenError as exc:
            logger.info(
                "Rejected %s %s: %s (%s)",
                request.method,
                request.url.path,
                type(exc).__name__,
                exc,
            )
            return _unauthorized()

        request.state.user_id = user_id
        return await call_next(request)

    return authenticate


def current_user_id(request: Request) -> str:
    """Return the user id the authentication middleware attached to *request*."""
    return request.state.user_id
