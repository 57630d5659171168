# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""RFC 9457 Problem Details for the crawl API.

Single place where internal failures become externally visible errors.
Every exception, known or not, maps to a ``ProblemDetail``; unknown ones
get a generic message so internal state never leaks.

Key public API:

- ``ProblemType``: error taxonomy (one member per failure kind).
- ``ProblemDetail``: frozen dataclass (→ JSON dict / Starlette response / CLI text).
- ``sanitize_detail()``: scrub secrets & paths from error messages.
- ``from_exception()``: map any exception to a ``ProblemDetail``.

The JSON body always carries an ``error`` member with the human message,
next to the standard RFC 9457 fields.

Type URI namespace: ``https://www.retio.ai/layoutcrawl/errors/{slug}``
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .errors import (
    EmptyStructureError,
    FetchFailureError,
    FetchTimeoutError,
    InvalidRequestError,
    InvalidURLError,
    LayoutCrawlError,
    MissingInputError,
    UpstreamHTTPError,
)

# ── Constants ────────────────────────────────────────────────────────

_ERROR_BASE = "https://www.retio.ai/layoutcrawl/errors"

MAX_DETAIL_LENGTH = 200

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while crawling the website. Please try again."

# ── ProblemType taxonomy ─────────────────────────────────────────────


class ProblemType(StrEnum):
    """Crawl error taxonomy."""

    # Input
    MISSING_INPUT = "missing-input"
    INVALID_URL = "invalid-url"
    INVALID_REQUEST = "invalid-request"

    # Fetch
    FETCH_TIMEOUT = "fetch-timeout"
    UPSTREAM_HTTP_ERROR = "upstream-http-error"
    FETCH_FAILED = "fetch-failed"

    # Extraction
    EMPTY_STRUCTURE = "empty-structure"

    @property
    def uri(self) -> str:
        """Full type URI for RFC 9457 ``type`` field."""
        return f"{_ERROR_BASE}/{self.value}"


# ── Per-type metadata: (status, title) ───────────────────────────────

_TYPE_METADATA: dict[ProblemType, tuple[int, str]] = {
    ProblemType.MISSING_INPUT: (400, "Missing Input"),
    ProblemType.INVALID_URL: (400, "Invalid URL"),
    ProblemType.INVALID_REQUEST: (400, "Invalid Request"),
    ProblemType.FETCH_TIMEOUT: (408, "Fetch Timed Out"),
    ProblemType.UPSTREAM_HTTP_ERROR: (502, "Upstream HTTP Error"),  # status overridden per response
    ProblemType.FETCH_FAILED: (500, "Fetch Failed"),
    ProblemType.EMPTY_STRUCTURE: (422, "Empty Structure"),
}

_EXCEPTION_TYPES: dict[type[LayoutCrawlError], ProblemType] = {
    MissingInputError: ProblemType.MISSING_INPUT,
    InvalidURLError: ProblemType.INVALID_URL,
    InvalidRequestError: ProblemType.INVALID_REQUEST,
    FetchTimeoutError: ProblemType.FETCH_TIMEOUT,
    UpstreamHTTPError: ProblemType.UPSTREAM_HTTP_ERROR,
    FetchFailureError: ProblemType.FETCH_FAILED,
    EmptyStructureError: ProblemType.EMPTY_STRUCTURE,
}

# ── CLI recovery hints ───────────────────────────────────────────────

_CLI_HINTS: dict[str, str] = {
    ProblemType.MISSING_INPUT.uri: "Pass the page URL as the first argument.",
    ProblemType.INVALID_URL.uri: "Check the URL and try again with a full http:// or https:// URL.",
    ProblemType.FETCH_TIMEOUT.uri: "The site took too long to respond. Try again or raise --timeout.",
    ProblemType.FETCH_FAILED.uri: "Check that the site is reachable from this machine.",
    ProblemType.EMPTY_STRUCTURE.uri: "Try --html to inspect the markup the site actually serves.",
}

# ── Secret sanitization patterns ─────────────────────────────────────

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"Bearer\s+\S+"), "Bearer <redacted>"),
    (re.compile(r"Basic\s+[A-Za-z0-9+/=]{8,}"), "Basic <redacted>"),
    (re.compile(r"://[^@\s/]+@"), "://<redacted>@"),
    (
        re.compile(
            r"(?:API_KEY|SECRET|TOKEN|PASSWORD|CREDENTIAL)\s*[=:]\s*\S+",
            re.IGNORECASE,
        ),
        "<redacted>",
    ),
]

_PATH_PATTERN = re.compile(
    r"(/(?:Users|home|tmp|var|etc|opt|root|srv|proc|sys|usr|Library"
    r"|Applications|private|snap|mnt|media|nix)/[\w./-]+"
    r"|[A-Z]:\\[\w.\\-]+)"
)


def sanitize_detail(text: str) -> str:
    """Scrub secrets and filesystem paths from *text*, then truncate to MAX_DETAIL_LENGTH."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    text = _PATH_PATTERN.sub("<path>", text)
    if len(text) > MAX_DETAIL_LENGTH:
        text = text[:MAX_DETAIL_LENGTH] + "..."
    return text


# ── ProblemDetail dataclass ──────────────────────────────────────────

# Standard fields that extensions must never shadow.
_STANDARD_FIELDS = frozenset({"type", "title", "status", "detail", "instance", "error"})


@dataclass(frozen=True, slots=True)
class ProblemDetail:
    """RFC 9457 Problem Detail object, immutable."""

    type: str = "about:blank"
    title: str = ""
    status: int = 500
    detail: str = ""
    instance: str = ""
    extensions: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON dict: ``error`` first, empty optional fields omitted, extensions merged at top level."""
        d: dict[str, Any] = {"error": self.detail, "type": self.type, "status": self.status}
        if self.title:
            d["title"] = self.title
        if self.detail:
            d["detail"] = self.detail
        if self.instance:
            d["instance"] = self.instance
        for k, v in self.extensions.items():
            if k not in _STANDARD_FIELDS:
                d[k] = v
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_response(self):
        """Starlette ``JSONResponse`` with ``application/problem+json`` media type."""
        from starlette.responses import JSONResponse

        return JSONResponse(
            content=self.to_dict(),
            status_code=self.status,
            media_type="application/problem+json",
            headers={"Cache-Control": "no-store", "Content-Language": "en"},
        )

    def to_cli_text(self) -> str:
        """Human-friendly CLI error message.

        Format::

            Error: <detail>
            Hint: <hint>
        """
        hint = _CLI_HINTS.get(self.type, "")
        lines = [f"Error: {self.detail}"]
        if hint:
            lines.append(f"Hint: {hint}")
        return "\n".join(lines)


# ── Factory functions ────────────────────────────────────────────────


def _status_for(exc: LayoutCrawlError, problem_type: ProblemType) -> int:
    if isinstance(exc, UpstreamHTTPError) and 100 <= exc.status_code <= 599:
        return exc.status_code
    return _TYPE_METADATA[problem_type][0]


def from_exception(
    exc: BaseException,
    *,
    instance: str = "",
    extensions: dict[str, Any] | None = None,
) -> ProblemDetail:
    """Build a ProblemDetail from any exception.

    Known LayoutCrawlError subclasses keep their (sanitized) message and
    get their own status. Everything else becomes a generic 500.
    """
    ext = dict(extensions) if extensions else {}

    problem_type = None
    for exc_type in type(exc).__mro__:
        problem_type = _EXCEPTION_TYPES.get(exc_type)
        if problem_type is not None:
            break

    if problem_type is not None:
        _, title = _TYPE_METADATA[problem_type]
        if isinstance(exc, UpstreamHTTPError):
            ext.setdefault("upstream_status", exc.status_code)
        return ProblemDetail(
            type=problem_type.uri,
            title=title,
            status=_status_for(exc, problem_type),
            detail=sanitize_detail(str(exc)),
            instance=instance,
            extensions=ext,
        )

    # Other LayoutCrawlError subclasses: use sanitized message
    if isinstance(exc, LayoutCrawlError):
        return ProblemDetail(
            type="about:blank",
            status=500,
            detail=sanitize_detail(str(exc)) or UNEXPECTED_ERROR_MESSAGE,
            instance=instance,
            extensions=ext,
        )

    # Anything else: generic detail to prevent internal state leakage
    return ProblemDetail(
        type="about:blank",
        status=500,
        detail=UNEXPECTED_ERROR_MESSAGE,
        instance=instance,
        extensions=ext,
    )
