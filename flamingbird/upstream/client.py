"""Outbound HTTP client used by both proxy handlers.

Every request carries the proxy's fixed User-Agent and nothing from the
inbound request (no cookies, no auth).  A bounded timeout keeps a slow
upstream from holding a connection slot forever.
"""

from __future__ import annotations

import logging

import httpx

from flamingbird.config import Settings
from flamingbird.errors import UpstreamStatusError
from flamingbird.upstream.models import RawPage

logger = logging.getLogger("uvicorn.error")


def build_client(settings: Settings) -> httpx.AsyncClient:
    """Return an ``httpx.AsyncClient`` configured from *settings*."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


async def fetch_page(client: httpx.AsyncClient, url: str) -> RawPage:
    """GET *url* and return the whole body as a :class:`RawPage`.

    Raises:
        UpstreamStatusError: If the server answers with a non-2xx status.
        httpx.HTTPError: On network failures or timeouts.
    """
    response = await client.get(url)
    if not response.is_success:
        logger.error(
            "Fetch error: %s %s (%s)", response.status_code, response.reason_phrase, url
        )
        raise UpstreamStatusError(
            response.status_code, response.reason_phrase, "target website"
        )
    return RawPage(url=url, html=response.text, status_code=response.status_code)


async def open_resource(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """Start streaming *url* and return the open response.

    The ``Referer`` is set to the resource itself so hotlink checks see a
    same-origin load.  The caller owns the returned response and must
    ``aclose()`` it once the body has been relayed.

    Raises:
        UpstreamStatusError: If the server answers with a non-2xx status
            (the response is closed before raising).
    """
    request = client.build_request("GET", url, headers={"Referer": url})
    response = await client.send(request, stream=True)
    if not response.is_success:
        await response.aclose()
        logger.error(
            "Resource fetch error: %s %s (%s)",
            response.status_code,
            response.reason_phrase,
            url,
        )
        raise UpstreamStatusError(
            response.status_code, response.reason_phrase, "resource"
        )
    return response
