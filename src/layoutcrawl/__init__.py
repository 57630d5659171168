# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Layout Crawl: wireframe extraction for remote web pages.

Fetches a page and reduces its body to a bounded-depth tree of typed,
labeled blocks:
- structure: layout / container / content nodes with size estimates
- html: the raw fetched markup, when requested instead of a wireframe
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ElementType(StrEnum):
    """Coarse role of a wireframe node."""

    LAYOUT = "layout"
    CONTAINER = "container"
    CONTENT = "content"


class Width(StrEnum):
    FULL = "full"
    PARTIAL = "partial"
    NARROW = "narrow"


class Height(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True, slots=True)
class Dimensions:
    """Rough footprint of a block. Meaningful mostly for leaves."""

    estimated_width: Width
    estimated_height: Height

    def to_dict(self) -> dict[str, str]:
        return {
            "estimated_width": str(self.estimated_width),
            "estimated_height": str(self.estimated_height),
        }


@dataclass(frozen=True, slots=True)
class CrawledElement:
    """A single node of the wireframe tree."""

    id: str  # "element-<n>", unique within one crawl
    tag: str  # lower-cased element name
    type: ElementType
    label: str  # e.g. "Container (hero)"
    children: tuple[CrawledElement, ...] = ()
    dimensions: Dimensions | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "tag": self.tag,
            "type": str(self.type),
            "label": self.label,
            "children": [child.to_dict() for child in self.children],
        }
        if self.dimensions is not None:
            d["dimensions"] = self.dimensions.to_dict()
        return d

    def walk(self):
        """Yield this node and all descendants, depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True, slots=True)
class CrawledLayout:
    """Structural-mode crawl result."""

    url: str
    title: str
    structure: tuple[CrawledElement, ...] = field(default_factory=tuple)

    @property
    def total_nodes(self) -> int:
        return sum(1 for top in self.structure for _ in top.walk())

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "structure": [el.to_dict() for el in self.structure],
        }


@dataclass(frozen=True, slots=True)
class RawPage:
    """Raw-mode crawl result: the fetched markup, untouched."""

    url: str
    title: str
    html: str

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "title": self.title, "html": self.html}
