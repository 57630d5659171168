# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Crawl settings with environment overrides.

Leaf module. Defaults match the service contract: 10 s fetch deadline,
depth ceiling of 6, and the LayoutCrawler user agent.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_DEPTH = 6
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; LayoutCrawler/1.0; +http://example.com)"


@dataclass(frozen=True, slots=True)
class CrawlSettings:
    """Per-crawl knobs. Immutable so one instance can be shared by concurrent crawls."""

    timeout: float = DEFAULT_TIMEOUT_SECONDS
    max_depth: int = DEFAULT_MAX_DEPTH
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

    @classmethod
    def from_env(cls) -> CrawlSettings:
        """Build settings from LAYOUTCRAWL_* env vars, ignoring malformed values."""
        timeout = DEFAULT_TIMEOUT_SECONDS
        env_timeout = os.environ.get("LAYOUTCRAWL_TIMEOUT", "").strip()
        if env_timeout:
            try:
                timeout = float(env_timeout)
            except ValueError:
                logger.warning("Ignoring invalid LAYOUTCRAWL_TIMEOUT=%r", env_timeout)
            else:
                if timeout <= 0:
                    logger.warning("Ignoring non-positive LAYOUTCRAWL_TIMEOUT=%r", env_timeout)
                    timeout = DEFAULT_TIMEOUT_SECONDS

        max_depth = DEFAULT_MAX_DEPTH
        env_depth = os.environ.get("LAYOUTCRAWL_MAX_DEPTH", "").strip()
        if env_depth:
            try:
                max_depth = int(env_depth)
            except ValueError:
                logger.warning("Ignoring invalid LAYOUTCRAWL_MAX_DEPTH=%r", env_depth)
            else:
                if max_depth < 0:
                    logger.warning("Ignoring negative LAYOUTCRAWL_MAX_DEPTH=%r", env_depth)
                    max_depth = DEFAULT_MAX_DEPTH

        user_agent = os.environ.get("LAYOUTCRAWL_USER_AGENT", "").strip() or DEFAULT_USER_AGENT

        return cls(timeout=timeout, max_depth=max_depth, user_agent=user_agent)
