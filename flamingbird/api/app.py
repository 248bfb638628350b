"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single outbound ``httpx.AsyncClient`` (shared
across all requests via ``request.app.state.http``).  On shutdown it closes
the client and its connection pool.  No other state outlives a request.

Routes
------
    /fetch: fetch a page and rewrite it to load through the proxy
    /res: stream a sub-resource (image, script, stylesheet, media)
    /: bundled landing page (static files)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from flamingbird import __version__
from flamingbird.config import Settings, settings
from flamingbird.errors import ProxyError
from flamingbird.upstream import build_client

from flamingbird.api.routers import pages as pages_router
from flamingbird.api.routers import resources as resources_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the outbound client on startup and close it on shutdown."""
    async with build_client(app.state.settings) as client:
        app.state.http = client
        yield


async def _proxy_error_handler(request: Request, exc: ProxyError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    *app_settings* defaults to the module-level settings loaded from the
    environment.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="FlamingBird",
        description=(
            "Transparent rewriting web proxy. Pages fetched through /fetch have "
            "their resource references rewritten to load via /res."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_exception_handler(ProxyError, _proxy_error_handler)

    app.include_router(pages_router.router, tags=["pages"])
    app.include_router(resources_router.router, tags=["resources"])

    # Mounted last so /fetch and /res take precedence.
    app.mount(
        "/",
        StaticFiles(directory=app_settings.static_dir, html=True),
        name="static",
    )

    return app


# Module-level instance used by uvicorn:
#   uvicorn flamingbird.api.app:app --reload
app = create_app()
