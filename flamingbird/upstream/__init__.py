"""Outbound fetches made on behalf of the browser."""

from flamingbird.upstream.client import build_client, fetch_page, open_resource
from flamingbird.upstream.models import RawPage

__all__ = ["build_client", "fetch_page", "open_resource", "RawPage"]
