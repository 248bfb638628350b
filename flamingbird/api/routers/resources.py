"""Resource proxy endpoint.

Routes
------
GET /res?url=https://...    → stream the resource back unchanged

Only the upstream ``Content-Type`` is copied.  The body is relayed chunk
by chunk so large media never has to fit in memory.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from flamingbird.errors import InvalidTargetError, ProxyError
from flamingbird.rewrite import is_valid_target
from flamingbird.upstream import open_resource

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


async def relay(upstream: httpx.Response) -> AsyncIterator[bytes]:
    """Yield the body of *upstream*, closing it however iteration ends.

    A client disconnect cancels the consumer, which closes this generator
    and with it the upstream connection.
    """
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    finally:
        await upstream.aclose()


@router.get("/res")
async def resource_endpoint(request: Request, url: Optional[str] = None) -> StreamingResponse:
    """Stream the resource at *url* back to the browser."""
    if not is_valid_target(url):
        raise InvalidTargetError("Please provide a valid resource URL.")

    try:
        upstream = await open_resource(request.app.state.http, url)
    except ProxyError:
        raise
    except Exception as exc:
        logger.exception("Error fetching resource %s", url)
        raise ProxyError("Error fetching resource.") from exc

    # Passed as a raw header (not media_type) so it is copied verbatim.
    headers = {}
    content_type = upstream.headers.get("content-type")
    if content_type:
        headers["content-type"] = content_type

    logger.debug("Streaming resource %s", url)
    return StreamingResponse(
        relay(upstream),
        headers=headers,
        background=BackgroundTask(upstream.aclose),
    )
