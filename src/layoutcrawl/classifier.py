# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structural classifier/pruner: lxml body subtree -> wireframe tree.

Rules per visited element, in order:
  1. Depth ceiling: deeper than max_depth -> no node
  2. Skip-list tags -> no node, subtree never walked
  3. Only MEANINGFUL_TAGS have their children walked; others are leaves
  4. Classless empty <div> deeper than EMPTY_DIV_MIN_DEPTH -> no node
  5. Type, label, dimensions from the fixed tables in heuristics
  6. Survivors take the next id from the per-crawl IdSequence

Pruned elements are simply absent from their parent's children; no
placeholder is ever emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import lxml.html

from . import CrawledElement
from .heuristics import (
    MEANINGFUL_TAGS,
    SKIP_TAGS,
    element_label,
    element_type,
    estimate_dimensions,
)
from .settings import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

# Empty classless divs at depth <= this are kept
EMPTY_DIV_MIN_DEPTH = 2


class IdSequence:
    """Monotonic ``element-<n>`` generator scoped to one crawl."""

    __slots__ = ("_next",)

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def __call__(self) -> str:
        value = f"element-{self._next}"
        self._next += 1
        return value

    @property
    def issued(self) -> int:
        return self._next


def _tag_name(el) -> str:
    tag = getattr(el, "tag", None)
    # Comments and processing instructions carry a callable, not a str
    if not isinstance(tag, str):
        return ""
    return tag.lower()


def classify_element(
    el: lxml.html.HtmlElement,
    ids: IdSequence,
    *,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> CrawledElement | None:
    """Classify *el* and its walkable descendants. Returns None when pruned."""
    if depth > max_depth:
        return None

    tag = _tag_name(el)
    if not tag or tag in SKIP_TAGS:
        return None

    class_name = el.get("class") or ""

    children: list[CrawledElement] = []
    if tag in MEANINGFUL_TAGS:
        for child in el:
            node = classify_element(child, ids, depth=depth + 1, max_depth=max_depth)
            if node is not None:
                children.append(node)

    if tag == "div" and not children and not class_name and depth > EMPTY_DIV_MIN_DEPTH:
        return None

    return CrawledElement(
        id=ids(),
        tag=tag,
        type=element_type(tag),
        label=element_label(tag, class_name),
        children=tuple(children),
        dimensions=estimate_dimensions(tag),
    )


def build_structure(
    elements: Iterable[lxml.html.HtmlElement],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[CrawledElement, ...]:
    """Classify the body's direct children into the top-level structure list.

    A fresh IdSequence is used per call, so concurrent crawls never share
    or interleave ids.
    """
    ids = IdSequence()
    structure: list[CrawledElement] = []
    for el in elements:
        node = classify_element(el, ids, depth=0, max_depth=max_depth)
        if node is not None:
            structure.append(node)
    logger.debug("Classified %d top-level nodes (%d total)", len(structure), ids.issued)
    return tuple(structure)
