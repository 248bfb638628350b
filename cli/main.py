"""FlamingBird CLI entry-point for running and poking at the proxy.

Usage:
    flamingbird --help

Commands:
    serve     → run the proxy server under uvicorn
    rewrite   → fetch a page and print the rewritten HTML
    link      → print the proxy link for a single URL
"""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx
import typer

from flamingbird.config import settings
from flamingbird.errors import ProxyError
from flamingbird.rewrite import (
    absolutize,
    is_valid_target,
    rewrite_document,
    to_navigate_link,
    to_resource_link,
)
from flamingbird.upstream import build_client, fetch_page

app = typer.Typer(
    name="flamingbird",
    help="FlamingBird rewriting proxy CLI.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Interface to bind (default: $HOST)."),
    port: Optional[int] = typer.Option(None, help="Port to listen on (default: $PORT)."),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes."),
) -> None:
    """Run the proxy server."""
    import uvicorn

    bind_host = host or settings.host
    bind_port = port or settings.port
    typer.echo(f"[serve] Server is running on http://{bind_host}:{bind_port}")
    uvicorn.run(
        "flamingbird.api.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level,
    )


# ---------------------------------------------------------------------------
# Debugging helpers
# ---------------------------------------------------------------------------
async def _fetch_and_rewrite(url: str) -> str:
    async with build_client(settings) as client:
        page = await fetch_page(client, url)
    return rewrite_document(page.html, url, settings.banner_html)


@app.command("rewrite")
def rewrite(
    url: str = typer.Option(..., help="Page URL to fetch and rewrite."),
) -> None:
    """Fetch a page and print it exactly as /fetch would serve it."""
    if not is_valid_target(url):
        typer.echo(f"[rewrite] Not an http(s) URL: {url!r}", err=True)
        raise typer.Exit(1)

    try:
        html = asyncio.run(_fetch_and_rewrite(url))
    except ProxyError as exc:
        typer.echo(f"[rewrite] {exc.message}", err=True)
        raise typer.Exit(1)
    except httpx.HTTPError as exc:
        typer.echo(f"[rewrite] Error fetching {url!r}: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(html)


@app.command("link")
def link(
    url: str = typer.Option(..., help="URL to convert (absolute or relative)."),
    base: Optional[str] = typer.Option(None, help="Page URL to resolve against."),
    navigate: bool = typer.Option(
        False, "--navigate", help="Print a /fetch link instead of a /res link."
    ),
) -> None:
    """Print the proxy-relative link for URL."""
    base_url = base or url
    if navigate:
        typer.echo(to_navigate_link(absolutize(url, base_url)))
    else:
        typer.echo(to_resource_link(url, base_url))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
