# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""URL validation. Runs before any network activity."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from .errors import InvalidURLError, MissingInputError

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

INVALID_URL_MESSAGE = "Invalid URL format. Please include http:// or https://"


def validate_url(url: object) -> str:
    """Validate *url* and return its normalized absolute form.

    Raises:
        MissingInputError: *url* is None or empty.
        InvalidURLError: *url* is not an absolute http(s) URL with a host.
    """
    if url is None or url == "":
        raise MissingInputError("URL is required")
    if not isinstance(url, str):
        raise InvalidURLError(INVALID_URL_MESSAGE)

    candidate = url.strip()
    try:
        parts = urlsplit(candidate)
        # .port raises ValueError for non-numeric or out-of-range ports
        port = parts.port
    except ValueError:
        raise InvalidURLError(INVALID_URL_MESSAGE) from None

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_URL_SCHEMES:
        raise InvalidURLError(INVALID_URL_MESSAGE)

    hostname = parts.hostname or ""
    if not hostname or any(ch.isspace() for ch in hostname):
        raise InvalidURLError(INVALID_URL_MESSAGE)

    netloc = parts.netloc
    host_start = netloc.rfind("@") + 1
    # Keep userinfo and port as given, lower-case only the host part
    netloc = netloc[:host_start] + netloc[host_start:].lower()
    if port is not None and port == (80 if scheme == "http" else 443):
        netloc = netloc.rsplit(":", 1)[0]

    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))
