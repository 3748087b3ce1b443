"""
Request parsing and error mapping shared by every controller.

A handler reads its input with `read_body`, rejects bad input with
`error_response(400, ...)`, then hands the use case to `run_use_case`, which
runs it in the threadpool and turns both its result and its failures into a
JSON response:

  result                 -> presenter(result) with the success status
  ValidationError        -> 400 {"error": message}
  UnauthorizedError      -> 401 {"error": message}
  NotFoundError          -> 404 {"error": message}
  anything else          -> 500 {"error": "Internal server error"}
"""

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import status
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse

from studytrack.errors import NotFoundError, UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

ModelT = TypeVar("ModelT", bound=BaseModel)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe(exc: SchemaValidationError) -> str:
    """Collapse pydantic's error list into one human-readable line."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()))
        message = err.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request body."


async def read_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Parse the JSON body of *request* into *model*.

    An empty body is treated as ``{}``.  Raises `ValidationError` when the
    body is not JSON or does not satisfy the schema.
    """
    raw = await request.body()
    try:
        data = json.loads(raw) if raw.strip() else {}
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON.") from exc
    try:
        return model.model_validate(data)
    except SchemaValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


async def run_use_case(
    use_case: Any,
    presenter: Callable[[Any], Any],
    *,
    status_code: int = status.HTTP_200_OK,
    **inputs: Any,
) -> JSONResponse:
    """Execute ``use_case.execute(**inputs)`` and map the outcome to a response."""
    try:
        result = await run_in_threadpool(use_case.execute, **inputs)
        content = jsonable_encoder(presenter(result))
    except ValidationError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except UnauthorizedError as exc:
        return error_response(status.HTTP_401_UNAUTHORIZED, str(exc))
    except NotFoundError as exc:
        return error_response(status.HTTP_404_NOT_FOUND, str(exc))
    except Exception:
        logger.exception("%s failed", type(use_case).__name__)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    return JSONResponse(status_code=status_code, content=content)
