# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""RequestContext: leaf module with minimal dependencies.

One instance per incoming request; nothing in it is shared between
requests except the immutable settings.
"""

from __future__ import annotations

import dataclasses
import uuid

import httpx

from .settings import CrawlSettings


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Per-request context passed to the crawl _impl functions.

    HTTP: built from the Starlette request.
    MCP tool / CLI: built with an empty client_ip.
    """

    request_id: str = dataclasses.field(default_factory=new_request_id)
    settings: CrawlSettings = dataclasses.field(default_factory=CrawlSettings)
    transport: httpx.AsyncBaseTransport | None = dataclasses.field(default=None, repr=False)
    client_ip: str = ""
