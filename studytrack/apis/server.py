"""
API host: mounts route descriptors onto a FastAPI application.

`ApiServer` is built once at startup from an ordered list of routes.  Each
route's middlewares are composed in front of its handler and the result is
mounted with ``add_api_route`` under the verb looked up in `_VERBS`.  The
route table is validated before anything is mounted: two routes sharing a
method and path abort construction with `DuplicateRouteError`, so a
misconfigured server never starts listening.

Run locally:
    uvicorn studytrack.main:create_app --factory --reload

Interactive docs available at:
    http://localhost:3333/docs  (Swagger UI)
"""

import logging
from collections.abc import Iterable, Sequence

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import Response

from studytrack.apis.routes import Handler, HttpMethod, Middleware, route_key
from studytrack.config import Settings
from studytrack.errors import DuplicateRouteError

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"

_VERBS: dict[HttpMethod, str] = {
    HttpMethod.GET: "GET",
    HttpMethod.POST: "POST",
    HttpMethod.PUT: "PUT",
    HttpMethod.PATCH: "PATCH",
    HttpMethod.DELETE: "DELETE",
}


def build_middleware_chain(handler: Handler, middlewares: Sequence[Middleware]) -> Handler:
    """
    Wrap *handler* with *middlewares*, first entry outermost.

    Each middleware receives ``(request, call_next)``; ``call_next`` invokes
    the next middleware or, at the end of the chain, the handler.
    """
    chain = handler
    for middleware in reversed(middlewares):
        chain = _link(middleware, chain)
    return chain


def _link(middleware: Middleware, call_next: Handler) -> Handler:
    async def linked(request: Request) -> Response:
        return await middleware(request, call_next)

    return linked


def _endpoint(chain: Handler, name: str) -> Handler:
    # FastAPI inspects the signature: a single Request parameter means the
    # raw request is injected and nothing is parsed on our behalf.
    async def endpoint(request: Request) -> Response:
        return await chain(request)

    endpoint.__name__ = name or "endpoint"
    return endpoint


class ApiServer:
    """
    HTTP host for the study tracker.

    Parameters
    ----------
    routes : iterable
        Route descriptors to mount, in registration order.
    settings : Settings
        Application settings (CORS origins, host).
    """

    def __init__(self, routes: Iterable, settings: Settings) -> None:
        self._settings = settings
        self._app = FastAPI(
            title="Study Tracker API",
            description=(
                "Directories, settings and progress for a study-tracking app. "
                "All endpoints except registration, login and `/health` require "
                "`Authorization: Bearer <token>`."
            ),
            version="1.0.0",
        )
        self._app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.get_allow_origins(),
            allow_credentials=False,
            allow_methods=list(_VERBS.values()),
            allow_headers=["*"],
        )
        self._app.add_api_route(HEALTH_PATH, _health, methods=["GET"], tags=["Health"])
        self._routes: list = []
        self.register(routes)

    @property
    def app(self) -> FastAPI:
        return self._app

    @property
    def routes(self) -> tuple:
        return tuple(self._routes)

    def register(self, routes: Iterable) -> None:
        """
        Mount *routes* in order.

        The whole batch is checked for duplicates (among itself and against
        routes already mounted, including the built-in health probe) before
        the first one is attached.
        """
        routes = list(routes)
        seen = {("get", HEALTH_PATH): HEALTH_PATH}
        seen.update((route_key(r), r.path) for r in self._routes)
        for route in routes:
            key = route_key(route)
            if key in seen:
                raise DuplicateRouteError(
                    f"Duplicate route {key[0].upper()} {route.path}: "
                    f"conflicts with {seen[key]}"
                )
            seen[key] = route.path

        for route in routes:
            method = HttpMethod(route.method)
            middlewares = tuple(getattr(route, "middlewares", None) or ())
            chain = build_middleware_chain(route.handler, middlewares)
            name = getattr(route, "name", "") or route.handler.__name__
            self._app.add_api_route(
                route.path,
                _endpoint(chain, name),
                methods=[_VERBS[method]],
                name=name,
                tags=list(getattr(route, "tags", ()) or ()),
            )
            self._routes.append(route)
            logger.debug(
                "Mounted %s %s (%d middleware(s))", _VERBS[method], route.path, len(middlewares)
            )

        logger.info("Registered %d route(s).", len(routes))

    def start(self, port: int) -> None:
        """Serve the application; blocks for the lifetime of the process."""
        logger.info("Server is running at http://%s:%d", self._settings.host, port)
        logger.info("Swagger UI available at http://%s:%d/docs", self._settings.host, port)
        uvicorn.run(self._app, host=self._settings.host, port=port)


def _health() -> dict:
    """Returns 200 OK when the service is running."""
    return {"status": "ok"}
