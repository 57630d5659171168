# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Crawl orchestrator: validate -> fetch -> parse -> {raw | classify} -> assemble.

Strictly linear; the fetch is the only await. Every call builds its own
state, so concurrent crawls are fully isolated.
"""

from __future__ import annotations

import logging

import httpx

from . import CrawledLayout, RawPage
from .classifier import build_structure
from .errors import EmptyStructureError
from .fetcher import fetch_page
from .parser import parse_document
from .pipeline_timer import PipelineTimer
from .settings import CrawlSettings
from .url_validator import validate_url

logger = logging.getLogger(__name__)

EMPTY_STRUCTURE_MESSAGE = (
    "Could not parse a meaningful layout structure from this page. "
    "The page may be too simple or dynamically rendered."
)


async def crawl(
    url: object,
    *,
    return_html: bool = False,
    settings: CrawlSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CrawledLayout | RawPage:
    """Crawl *url* and return its wireframe, or its raw markup if *return_html*.

    Raises:
        LayoutCrawlError subclasses; see errors.py. Callers at a service
        boundary map these with problem_details.from_exception().
    """
    settings = settings or CrawlSettings()
    timer = PipelineTimer()

    try:
        timer.stage("validate")
        valid_url = validate_url(url)

        timer.stage("fetch")
        page = await fetch_page(
            valid_url,
            timeout=settings.timeout,
            user_agent=settings.user_agent,
            transport=transport,
        )

        timer.stage("parse")
        doc = parse_document(page.text)

        if return_html:
            timer.finalize()
            logger.info("crawl raw: url=%s bytes=%d stages=%s", valid_url, len(page.content), timer.elapsed_per_stage())
            return RawPage(url=valid_url, title=doc.title, html=page.text)

        timer.stage("classify")
        structure = build_structure(doc.body_children(), max_depth=settings.max_depth)
        if not structure:
            raise EmptyStructureError(EMPTY_STRUCTURE_MESSAGE)
    except Exception:
        logger.info("crawl failed: url=%r report=%s", url, timer.failure_report())
        raise

    timer.finalize()
    layout = CrawledLayout(url=valid_url, title=doc.title, structure=structure)
    logger.info(
        "crawl ok: url=%s top_level=%d nodes=%d stages=%s",
        valid_url,
        len(structure),
        layout.total_nodes,
        timer.elapsed_per_stage(),
    )
    return layout
