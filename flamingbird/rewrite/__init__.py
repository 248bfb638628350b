"""Link builders and the HTML document rewriter."""

from flamingbird.rewrite.document import rewrite_document
from flamingbird.rewrite.urls import (
    AnchorAction,
    Resolution,
    absolutize,
    classify_anchor,
    is_valid_target,
    resolve_url,
    rewrite_descriptor_list,
    to_navigate_link,
    to_resource_link,
)

__all__ = [
    "AnchorAction",
    "Resolution",
    "absolutize",
    "classify_anchor",
    "is_valid_target",
    "resolve_url",
    "rewrite_descriptor_list",
    "rewrite_document",
    "to_navigate_link",
    "to_resource_link",
]
