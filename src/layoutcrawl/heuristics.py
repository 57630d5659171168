# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Fixed lookup tables for node type, label, and size estimates.

Every result here is a pure function of the tag name (plus the class
attribute for the label hint). Extend the tables, not the control flow.
"""

from __future__ import annotations

from types import MappingProxyType

from . import Dimensions, ElementType, Height, Width

# Tags that never become nodes and are never walked
SKIP_TAGS = frozenset({"script", "style", "link", "meta", "noscript", "iframe", "svg", "path"})

# Tags whose children are walked; everything else is a leaf
MEANINGFUL_TAGS = frozenset(
    {"header", "nav", "main", "footer", "aside", "section", "article", "div", "ul", "ol", "form"}
)

LAYOUT_TAGS = frozenset({"header", "main", "footer", "nav", "aside", "section"})
CONTAINER_TAGS = frozenset({"div", "article", "form", "ul", "ol", "li"})

FULL_WIDTH_TAGS = frozenset({"header", "footer", "nav", "main", "section"})
TALL_TAGS = frozenset({"main", "article", "section"})

LABELS: MappingProxyType[str, str] = MappingProxyType(
    {
        "header": "Header",
        "nav": "Navigation",
        "main": "Main Content",
        "footer": "Footer",
        "aside": "Sidebar",
        "section": "Section",
        "article": "Article",
        "div": "Container",
        "ul": "List",
        "ol": "Ordered List",
        "li": "List Item",
        "h1": "Heading 1",
        "h2": "Heading 2",
        "h3": "Heading 3",
        "h4": "Heading 4",
        "h5": "Heading 5",
        "h6": "Heading 6",
        "p": "Paragraph",
        "img": "Image",
        "button": "Button",
        "a": "Link",
        "form": "Form",
    }
)

# Utility-CSS prefixes that make a class token useless as a hint
UTILITY_CLASS_PREFIXES = ("flex", "grid", "p-", "m-", "text-", "bg-")
MAX_HINT_LENGTH = 20


def element_type(tag: str) -> ElementType:
    if tag in LAYOUT_TAGS:
        return ElementType.LAYOUT
    if tag in CONTAINER_TAGS:
        return ElementType.CONTAINER
    return ElementType.CONTENT


def base_label(tag: str) -> str:
    """Friendly name for *tag*, falling back to the upper-cased tag."""
    return LABELS.get(tag, tag.upper())


def class_hint(class_name: str) -> str:
    """First class token worth showing in a label, or "".

    A token qualifies when it has no hyphen, is shorter than
    MAX_HINT_LENGTH, and does not start with a utility prefix.
    """
    for token in class_name.split():
        if "-" in token or len(token) >= MAX_HINT_LENGTH:
            continue
        if token.startswith(UTILITY_CLASS_PREFIXES):
            continue
        return token
    return ""


def element_label(tag: str, class_name: str = "") -> str:
    label = base_label(tag)
    hint = class_hint(class_name) if class_name else ""
    if hint:
        label += f" ({hint})"
    return label


def estimate_dimensions(tag: str) -> Dimensions:
    return Dimensions(
        estimated_width=Width.FULL if tag in FULL_WIDTH_TAGS else Width.PARTIAL,
        estimated_height=Height.LARGE if tag in TALL_TAGS else Height.MEDIUM,
    )
