"""Data models for outbound fetches."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RawPage:
    """The buffered HTTP response for a single page fetch."""

    url: str
    html: str
    status_code: int
