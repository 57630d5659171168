# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Markup parser: fetched text -> lxml DOM + document title."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import lxml.html
from lxml import etree

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Untitled Page"


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Parsed page. ``root`` is None when the input held no markup at all."""

    root: lxml.html.HtmlElement | None
    title: str

    def body(self) -> lxml.html.HtmlElement | None:
        if self.root is None:
            return None
        bodies = self.root.xpath("//body")
        return bodies[0] if bodies else None

    def body_children(self) -> list[lxml.html.HtmlElement]:
        """Direct children of <body>, comments and PIs included (the classifier drops them)."""
        body = self.body()
        if body is None:
            return []
        return list(body)


def extract_title(root: lxml.html.HtmlElement | None) -> str:
    """Text of the document's <title> element(s), or FALLBACK_TITLE."""
    if root is None:
        return FALLBACK_TITLE
    parts = [el.text_content() or "" for el in root.iter("title")]
    title = "".join(parts).strip()
    return title or FALLBACK_TITLE


def parse_document(html: str) -> ParsedDocument:
    """Load *html* into a traversable tree.

    lxml's recovering parser accepts any markup; only truly empty input
    (nothing but whitespace) produces a document without a root.
    """
    if not html or not html.strip():
        logger.debug("Empty document, nothing to parse")
        return ParsedDocument(root=None, title=FALLBACK_TITLE)

    parser = lxml.html.HTMLParser(recover=True, encoding="utf-8")
    try:
        root = lxml.html.document_fromstring(html.encode("utf-8"), parser=parser)
    except etree.ParserError:
        # "Document is empty": e.g. input made only of comments
        logger.debug("lxml found no elements in document")
        return ParsedDocument(root=None, title=FALLBACK_TITLE)

    return ParsedDocument(root=root, title=extract_title(root))
