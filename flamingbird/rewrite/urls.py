"""URL Rewrite Engine: resolution, classification and proxy-link building.

Everything in this module is a pure function over strings.  Nothing here
raises for a malformed URL: resolution failures fall back to the original
value (see :class:`Resolution`) so a single bad attribute can never abort
the rendering of a whole page.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from urllib.parse import quote, urljoin, urlsplit

RESOURCE_PREFIX = "/res?url="
NAVIGATE_PREFIX = "/fetch?target="

_VALID_TARGET = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_."
_COMPONENT_SAFE = "!~*'()"


class AnchorAction(enum.Enum):
    """What to do with the ``href`` of an ``<a>`` element."""

    NAVIGATE = "navigate"
    UNMODIFIED = "unmodified"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a URL against a base.

    ``resolved`` is ``False`` when resolution failed and ``url`` is simply
    the input handed back unchanged.
    """

    url: str
    resolved: bool


def is_valid_target(url: str | None) -> bool:
    """Return ``True`` if *url* is a non-empty ``http://``/``https://`` URL."""
    return bool(url) and _VALID_TARGET.match(url) is not None


def encode_component(value: str) -> str:
    """Percent-encode *value* for use as a single query-string value."""
    return quote(value, safe=_COMPONENT_SAFE)


def resolve_url(url: str, base: str) -> Resolution:
    """Resolve *url* against *base* using standard relative-URL rules."""
    try:
        return Resolution(url=urljoin(base, url.strip()), resolved=True)
    except ValueError:
        return Resolution(url=url, resolved=False)


def absolutize(url: str, base: str) -> str:
    """Return *url* made absolute against *base*, or *url* itself on failure."""
    return resolve_url(url, base).url


def to_resource_link(url: str, base: str) -> str:
    """Build a ``/res?url=...`` link for *url* resolved against *base*."""
    return RESOURCE_PREFIX + encode_component(absolutize(url, base))


def to_navigate_link(url: str) -> str:
    """Build a ``/fetch?target=...`` link for an absolute same-host *url*."""
    return NAVIGATE_PREFIX + encode_component(url)


def _host(url: str) -> str:
    parts = urlsplit(url)
    hostname = parts.hostname or ""
    port = parts.port
    if port is None or port == _DEFAULT_PORTS.get(parts.scheme.lower()):
        return hostname
    return f"{hostname}:{port}"


def classify_anchor(absolute_url: str, base_url: str) -> AnchorAction:
    """Decide whether an anchor should keep navigating through the proxy.

    Only links to exactly the same host (and port) as the page being
    rendered are proxied; cross-host anchors, and anything that fails to
    parse, are left alone and escape the proxy when clicked.
    """
    try:
        link_host = _host(absolute_url)
        base_host = _host(base_url)
    except ValueError:
        return AnchorAction.UNMODIFIED
    if link_host and link_host == base_host:
        return AnchorAction.NAVIGATE
    return AnchorAction.UNMODIFIED


def rewrite_descriptor_list(srcset: str, base: str) -> str:
    """Rewrite the URL of every candidate in a ``srcset``-style value.

    Descriptors (``1x``, ``480w``...) are carried over verbatim and candidate
    order is preserved.  Blank candidates stay blank rather than being
    dropped.
    """
    candidates = []
    for candidate in srcset.split(","):
        tokens = candidate.split()
        if tokens:
            tokens[0] = to_resource_link(tokens[0], base)
        candidates.append(" ".join(tokens))
    return ", ".join(candidates)
