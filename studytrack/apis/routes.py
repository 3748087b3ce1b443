"""
Route descriptors: the unit of registration handed to `ApiServer`.

A route binds a path and an HTTP verb to an async handler plus an ordered
middleware chain.  Controllers build them through small factory functions
(see `studytrack.apis.directories` for an example); the server only reads
the four attributes below, so any object exposing them can be registered.

Handlers and middlewares share Starlette's request/response types:

    async def handler(request: Request) -> Response
    async def middleware(request: Request, call_next) -> Response

A middleware continues the chain by awaiting ``call_next(request)``; returning
a response without doing so short-circuits everything behind it.
"""

import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from starlette.requests import Request
from starlette.responses import Response

Handler = Callable[[Request], Awaitable[Response]]
CallNext = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, CallNext], Awaitable[Response]]

_PATH_PARAM_RE = re.compile(r"\{[^}]*\}")


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


@dataclass(frozen=True)
class Route:
    """
    Immutable route descriptor.

    Attributes
    ----------
    path : str
        URL path in FastAPI syntax, e.g. ``/directory/{id}/rename``.
    method : HttpMethod
        HTTP verb the route answers to.
    handler : Handler
        Coroutine producing the response.
    middlewares : tuple
        Ordered chain run before the handler; the first entry runs first.
    name, tags :
        Metadata forwarded to the generated OpenAPI document.
    """

    path: str
    method: HttpMethod
    handler: Handler
    middlewares: Sequence[Middleware] = field(default_factory=tuple)
    name: str = ""
    tags: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "method", HttpMethod(self.method))
        object.__setattr__(self, "middlewares", tuple(self.middlewares))
        object.__setattr__(self, "tags", tuple(self.tags))


def route_key(route) -> tuple[str, str]:
    """
    Key used to detect duplicate registrations.

    Path parameter names are ignored, so ``/{id}/settings`` and
    ``/{user_id}/settings`` collide: the router could never tell them apart.
    """
    return HttpMethod(route.method).value, _PATH_PARAM_RE.sub("{}", route.path.rstrip("/") or "/")
