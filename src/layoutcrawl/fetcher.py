# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Bounded single-shot HTTP fetcher.

One GET per call, raced against a deadline with ``asyncio.timeout``.
When the deadline fires the request task is cancelled, and httpx closes
the in-flight connection on cancellation, so nothing is left dangling.
No retries at this layer.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from .errors import FetchFailureError, FetchTimeoutError, UpstreamHTTPError
from .settings import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Request timeout. The website took too long to respond."
FETCH_FAILURE_MESSAGE = (
    "Failed to fetch the website. It may be blocking automated access or is currently unavailable."
)


@dataclass(frozen=True, slots=True)
class FetchedPage:
    url: str  # final URL after redirects
    status_code: int
    content: bytes
    text: str


async def fetch_page(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchedPage:
    """GET *url* within *timeout* seconds.

    Args:
        url: Already validated absolute http(s) URL.
        timeout: Deadline for the whole exchange, body download included.
        user_agent: Value of the User-Agent request header.
        transport: Optional httpx transport (tests inject ``httpx.MockTransport``).

    Raises:
        FetchTimeoutError: deadline elapsed before the body was read.
        FetchFailureError: no response (DNS, refused, reset, TLS, ...).
        UpstreamHTTPError: response status outside 2xx.
    """
    headers = {"User-Agent": user_agent}
    try:
        async with httpx.AsyncClient(
            transport=transport,
            headers=headers,
            follow_redirects=True,
            timeout=httpx.Timeout(timeout),
        ) as client:
            async with asyncio.timeout(timeout):
                response = await client.get(url)
    except (TimeoutError, httpx.TimeoutException) as e:
        logger.warning("Fetch timed out after %.1fs: %s", timeout, url)
        raise FetchTimeoutError(TIMEOUT_MESSAGE) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning("Fetch failed for %s: %s", url, e)
        raise FetchFailureError(FETCH_FAILURE_MESSAGE) from e

    if not response.is_success:
        reason = response.reason_phrase
        logger.info("Upstream returned %d %s for %s", response.status_code, reason, url)
        raise UpstreamHTTPError(
            f"Failed to fetch website: {response.status_code} {reason}".rstrip(),
            status_code=response.status_code,
            reason=reason,
        )

    logger.debug("Fetched %s: status=%d bytes=%d", url, response.status_code, len(response.content))
    return FetchedPage(
        url=str(response.url),
        status_code=response.status_code,
        content=response.content,
        text=response.text,
    )
