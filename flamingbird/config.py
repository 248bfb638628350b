"""Centralised settings for the FlamingBird proxy.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The settings object is handed to :func:`flamingbird.api.app.create_app`
and stored on ``app.state.settings``; the request handlers read it from
there rather than from module globals.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; FlamingBird/1.0)"

_DEFAULT_BANNER = (
    '<div style="padding:10px; background:#eee;">'
    '<a href="/" style="font-size:16px; text-decoration:none;">'
    "← Back to Proxy</a></div>"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3000")))
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "info").lower()
    )

    # ------------------------------------------------------------------
    # Outbound requests
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get("PROXY_USER_AGENT", _DEFAULT_USER_AGENT)
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Page rewriting
    # ------------------------------------------------------------------
    banner_html: str = field(
        default_factory=lambda: os.environ.get("PROXY_BANNER_HTML", _DEFAULT_BANNER)
    )

    @property
    def static_dir(self) -> Path:
        """Directory holding the bundled landing page."""
        return Path(__file__).resolve().parent / "static"


# Module-level singleton used by the CLI and the ASGI app:
#   from flamingbird.config import settings
settings = Settings()
