# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Layout Crawl exception hierarchy.

All crawl failures inherit from LayoutCrawlError so the service boundary
can catch the base class, while problem_details maps each subclass to
its own status code.
"""

from __future__ import annotations


class LayoutCrawlError(Exception):
    """Base exception for all Layout Crawl errors."""


class MissingInputError(LayoutCrawlError):
    """No URL was supplied."""


class InvalidURLError(LayoutCrawlError):
    """URL could not be parsed or uses a scheme other than http/https."""


class InvalidRequestError(LayoutCrawlError):
    """Request body is not a JSON object of the expected shape."""


class FetchTimeoutError(LayoutCrawlError, TimeoutError):
    """Target did not respond before the fetch deadline."""


class FetchFailureError(LayoutCrawlError):
    """Transport-level failure: DNS, refused connection, reset, TLS, etc."""


class UpstreamHTTPError(LayoutCrawlError):
    """Target responded with a non-success status code."""

    def __init__(self, message: str, *, status_code: int, reason: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class EmptyStructureError(LayoutCrawlError):
    """Page yielded no top-level wireframe nodes after pruning."""
