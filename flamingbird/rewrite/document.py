"""Rewrite a fetched HTML page so every resource it loads goes through the proxy.

The page is parsed with BeautifulSoup and mutated in place by a series of
passes, each applying one of the pure functions from
:mod:`flamingbird.rewrite.urls` to the matching elements.  The mutated tree
is serialised back to a string at the end; nothing is emitted until every
pass has run.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Doctype, Tag

from flamingbird.rewrite.urls import (
    AnchorAction,
    absolutize,
    classify_anchor,
    rewrite_descriptor_list,
    to_navigate_link,
    to_resource_link,
)

# http-equiv values that would stop the page rendering under the proxy origin
_BLOCKING_META = {"x-frame-options", "content-security-policy"}


# ---------------------------------------------------------------------------
# Document skeleton
# ---------------------------------------------------------------------------

def _ensure_skeleton(soup: BeautifulSoup) -> tuple[Tag, Tag]:
    """Return ``(head, body)``, creating whichever of them is missing.

    ``html.parser`` keeps fragments as-is, so a page without ``<html>``,
    ``<head>`` or ``<body>`` gets them wrapped around its existing content.
    """
    html = soup.find("html")
    if html is None:
        html = soup.new_tag("html")
        for child in list(soup.contents):
            if not isinstance(child, Doctype):
                html.append(child.extract())
        soup.append(html)

    head = soup.find("head")
    if head is None:
        head = soup.new_tag("head")
        html.insert(0, head)

    body = soup.find("body")
    if body is None:
        body = soup.new_tag("body")
        for child in list(html.contents):
            if child is not head:
                body.append(child.extract())
        html.append(body)

    return head, body


def _strip_blocking_meta(soup: BeautifulSoup) -> None:
    for meta in soup.find_all("meta", attrs={"http-equiv": True}):
        if meta["http-equiv"].strip().lower() in _BLOCKING_META:
            meta.decompose()


def _set_base(soup: BeautifulSoup, head: Tag, target_url: str) -> None:
    """Leave exactly one ``<base>``, first in *head*, pointing at *target_url*."""
    bases = soup.find_all("base")
    if not bases:
        head.insert(0, soup.new_tag("base", href=target_url))
        return
    head.insert(0, bases[0].extract())
    bases[0]["href"] = target_url
    for extra in bases[1:]:
        extra.decompose()


def _insert_banner(body: Tag, banner_html: str) -> None:
    fragment = BeautifulSoup(banner_html, "html.parser")
    for node in reversed(list(fragment.contents)):
        body.insert(0, node.extract())


# ---------------------------------------------------------------------------
# Per-element rewrites
# ---------------------------------------------------------------------------

def _rewrite_src(element: Tag, base: str) -> bool:
    src = element.get("src")
    if not src or not src.strip():
        return False
    element["src"] = to_resource_link(src, base)
    return True


def _rewrite_srcset(element: Tag, base: str) -> bool:
    srcset = element.get("srcset")
    if not srcset:
        return False
    element["srcset"] = rewrite_descriptor_list(srcset, base)
    return True


def _rewrite_href(element: Tag, base: str) -> None:
    href = element.get("href")
    if not href or not href.strip():
        return
    if element.name == "a":
        absolute = absolutize(href, base)
        if classify_anchor(absolute, base) is AnchorAction.NAVIGATE:
            element["href"] = to_navigate_link(absolute)
        # Cross-host anchors keep their authored value.
        return
    element["href"] = to_resource_link(href, base)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def rewrite_document(html: str, target_url: str, banner_html: str) -> str:
    """Return *html* rewritten to load its resources through the proxy.

    Args:
        html: Raw page markup as fetched from *target_url*.
        target_url: Absolute URL of the page; every relative reference is
            resolved against it.
        banner_html: Markup prepended to ``<body>`` (link back to the proxy).

    Returns:
        The serialised, rewritten document.
    """
    soup = BeautifulSoup(html, "html.parser")
    head, body = _ensure_skeleton(soup)

    _strip_blocking_meta(soup)
    _set_base(soup, head, target_url)

    # ids of elements whose src / srcset has already been rewritten
    done_src: set[int] = set()
    done_srcset: set[int] = set()

    for element in soup.find_all(src=True):
        if _rewrite_src(element, target_url):
            done_src.add(id(element))
    for element in soup.find_all(srcset=True):
        if _rewrite_srcset(element, target_url):
            done_srcset.add(id(element))
    for element in soup.find_all(href=True):
        _rewrite_href(element, target_url)

    # Second pass over <source> children of <video>/<audio>/<picture>; an
    # attribute rewritten above is never rewritten again.
    for element in soup.find_all("source"):
        if id(element) not in done_src:
            _rewrite_src(element, target_url)
        if id(element) not in done_srcset:
            _rewrite_srcset(element, target_url)

    _insert_banner(body, banner_html)
    return soup.decode(formatter="minimal")
