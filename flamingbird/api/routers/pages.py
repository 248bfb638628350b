"""Page proxy endpoint.

Routes
------
GET /fetch?target=https://...    → fetch the page, rewrite it, return HTML

The whole page is buffered and rewritten before anything is written to the
client, so an error at any step still produces a clean error response.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from flamingbird.errors import InvalidTargetError, ProxyError
from flamingbird.rewrite import is_valid_target, rewrite_document
from flamingbird.upstream import fetch_page

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("/fetch", response_class=HTMLResponse)
async def fetch_endpoint(request: Request, target: Optional[str] = None) -> HTMLResponse:
    """Fetch *target* and return it with every resource routed through the proxy."""
    if not is_valid_target(target):
        raise InvalidTargetError(
            'Please provide a valid target URL that starts with "http://" or "https://".'
        )

    settings = request.app.state.settings
    try:
        page = await fetch_page(request.app.state.http, target)
        # BeautifulSoup work is CPU-bound; keep it off the event loop.
        html = await run_in_threadpool(
            rewrite_document, page.html, target, settings.banner_html
        )
    except ProxyError:
        raise
    except Exception as exc:
        logger.exception("Error fetching or processing %s", target)
        raise ProxyError("Error fetching or processing the target website.") from exc

    logger.debug("Proxied page %s", target)
    return HTMLResponse(html)
