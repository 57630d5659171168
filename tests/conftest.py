# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import layoutcrawl  # noqa: F401
except ImportError:
    raise ImportError("layoutcrawl is not installed. Run: pip install -e '.[dev]'") from None

import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_server_state():
    """Reset server module state before and after each test."""
    import layoutcrawl.server as srv

    old_settings = srv._settings
    old_transport = srv._http_transport
    old_mode = srv._transport_mode
    yield
    srv._settings = old_settings
    srv._http_transport = old_transport
    srv._transport_mode = old_mode


@pytest.fixture
def reset_logging():
    """Restore root logging and structlog config after tests that call configure()."""
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
