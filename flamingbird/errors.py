"""Error taxonomy shared by the proxy handlers.

Every failure a handler wants to surface to the browser is raised as a
:class:`ProxyError`.  The app factory installs one exception handler that
renders these as plain-text responses carrying ``status_code``.
"""

from __future__ import annotations


class ProxyError(Exception):
    """A failure reported to the caller with a human-readable message."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidTargetError(ProxyError):
    """The requested target/resource URL is missing or not http(s)."""

    status_code = 400


class UpstreamStatusError(ProxyError):
    """The remote site answered with a non-success HTTP status."""

    def __init__(self, status: int, reason: str, subject: str) -> None:
        super().__init__(f"Error fetching {subject}: {status} {reason}".rstrip())
        self.status = status
        self.reason = reason
