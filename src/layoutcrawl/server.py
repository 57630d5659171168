# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Layout Crawl server.

HTTP routes (active in HTTP mode):
- POST /api/crawl: ``{"url": str, "returnHtml": bool}`` -> wireframe or raw HTML
- GET  /health:    liveness check

MCP tools:
- crawl_layout: same operation, JSON text result

Supports STDIO and HTTP (Streamable HTTP) transports. All logging goes to stderr.
"""

from __future__ import annotations

import argparse
import functools
import json
import logging
import os
import sys
from contextlib import suppress
from typing import Any

import httpx
import structlog
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from .context import RequestContext
from .crawler import crawl
from .errors import InvalidRequestError, LayoutCrawlError
from .problem_details import ProblemDetail, from_exception
from .settings import CrawlSettings

try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("layoutcrawl")
except Exception:
    __version__ = "unknown"

# Logging configured in main() via logging_config.configure()
logger = logging.getLogger("layoutcrawl.server")

mcp = FastMCP(
    name="layoutcrawl",
    instructions=(
        "Layout crawler. Use crawl_layout to get a wireframe of a web page: "
        "a tree of layout, container and content blocks with labels and rough sizes. "
        "Pass return_html=true to get the raw fetched HTML instead. "
        "Only the initial HTML response is analysed; JavaScript is not executed."
    ),
)

# ── Module state (set by main(); tests override) ─────────────────────

_transport_mode: str = "stdio"
_settings: CrawlSettings = CrawlSettings()
# Outbound httpx transport override; None = real network
_http_transport: httpx.AsyncBaseTransport | None = None


class CrawlRequest(BaseModel):
    """Body of POST /api/crawl."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Left untyped so a non-string url is reported as an invalid URL, not a schema error
    url: Any = None
    return_html: bool = Field(default=False, alias="returnHtml")


# ── Helpers ──────────────────────────────────────────────────────────


def _create_context(client_ip: str = "") -> RequestContext:
    return RequestContext(settings=_settings, transport=_http_transport, client_ip=client_ip)


def _to_problem(exc: Exception, ctx: RequestContext) -> ProblemDetail:
    """Map *exc* to a ProblemDetail, logging unexpected failures with traceback."""
    if isinstance(exc, LayoutCrawlError):
        logger.warning("crawl error: request=%s %s: %s", ctx.request_id, type(exc).__name__, exc)
    else:
        logger.error("crawl error: request=%s unexpected %s", ctx.request_id, type(exc).__name__, exc_info=True)
    return from_exception(exc)


async def _crawl_impl(url: object, return_html: bool, *, ctx: RequestContext) -> dict[str, Any]:
    logger.info("crawl: request=%s url=%r return_html=%s", ctx.request_id, url, return_html)
    result = await crawl(url, return_html=return_html, settings=ctx.settings, transport=ctx.transport)
    return result.to_dict()


def _parse_body(payload: object) -> CrawlRequest:
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object.")
    try:
        return CrawlRequest.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][-1]) for err in e.errors() if err.get("loc"))
        raise InvalidRequestError(f"Invalid request field(s): {fields}.") from e


# ── HTTP routes ──────────────────────────────────────────────────────


@mcp.custom_route("/health", methods=["GET"])
async def _health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": __version__, "transport": _transport_mode})


@mcp.custom_route("/api/crawl", methods=["POST"])
async def _crawl_endpoint(request: Request) -> JSONResponse:
    client_ip = request.client.host if request.client else ""
    ctx = _create_context(client_ip)
    structlog.contextvars.bind_contextvars(request_id=ctx.request_id)
    try:
        try:
            payload = await request.json()
        except ValueError:
            raise InvalidRequestError("Request body must be a JSON object.") from None
        body = _parse_body(payload)
        data = await _crawl_impl(body.url, body.return_html, ctx=ctx)
    except Exception as exc:
        return _to_problem(exc, ctx).to_response()
    finally:
        structlog.contextvars.unbind_contextvars("request_id")
    return JSONResponse(data)


# ── MCP Tools ────────────────────────────────────────────────────────


@mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))
async def crawl_layout(url: str, return_html: bool = False) -> str:
    """Crawl a web page and return its layout wireframe as JSON.

    The result has ``url``, ``title`` and ``structure``: a tree of nodes with
    ``id``, ``tag``, ``type`` (layout/container/content), ``label``,
    ``children`` and estimated ``dimensions``. On failure the result is
    ``{"error": ...}``.

    Args:
        url: Page to crawl (http/https only).
        return_html: Return ``{url, title, html}`` with the raw HTML instead.
    """
    ctx = _create_context()
    return await _crawl_layout_impl(url, return_html, ctx=ctx)


async def _crawl_layout_impl(url: object, return_html: bool, *, ctx: RequestContext) -> str:
    try:
        data = await _crawl_impl(url, return_html, ctx=ctx)
    except Exception as exc:
        return _to_problem(exc, ctx).to_json()
    return json.dumps(data, ensure_ascii=False)


# ── Entry point ──────────────────────────────────────────────────────


def _parse_server_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI args and env vars for server configuration.

    Returns:
        argparse.Namespace with attributes: transport, host, port, log_level.
    """
    parser = argparse.ArgumentParser(description="Layout Crawl server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode: stdio (default) or http",
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP server host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="HTTP server port (default: 8000)")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    args, _ = parser.parse_known_args(argv)

    # Env var overrides
    env_transport = os.environ.get("LAYOUTCRAWL_TRANSPORT", "").strip().lower()
    if env_transport in ("stdio", "http"):
        args.transport = env_transport

    env_host = os.environ.get("LAYOUTCRAWL_HOST", "").strip()
    if env_host:
        args.host = env_host

    env_port = os.environ.get("LAYOUTCRAWL_PORT", "").strip()
    if env_port:
        with suppress(ValueError):
            args.port = int(env_port)

    env_level = os.environ.get("LAYOUTCRAWL_LOG_LEVEL", "").strip()
    if env_level:
        args.log_level = env_level

    return args


async def _run_http_server(host: str, port: int, *, log_level: str = "info") -> None:
    import uvicorn

    config = uvicorn.Config(mcp.streamable_http_app(), host=host, port=port, log_level=log_level.lower())
    server = uvicorn.Server(config)
    try:
        await server.serve()
    finally:
        logger.info("HTTP mode: shutdown complete")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the server."""
    global _transport_mode, _settings

    args = _parse_server_args(argv if argv is not None else sys.argv[1:])
    _transport_mode = args.transport

    # Configure structlog BEFORE any log output
    from .logging_config import configure as configure_logging

    configure_logging(json_output=(_transport_mode == "http"), level=args.log_level)

    _settings = CrawlSettings.from_env()
    logger.info(
        "Settings: timeout=%.1fs max_depth=%d user_agent=%r",
        _settings.timeout,
        _settings.max_depth,
        _settings.user_agent,
    )

    if _transport_mode == "stdio":
        logger.info("Starting Layout Crawl server (stdio)")
        mcp.run(transport="stdio")
        return

    logger.info("Starting Layout Crawl server (http, host=%s, port=%d)", args.host, args.port)
    import anyio

    runner = functools.partial(_run_http_server, args.host, args.port, log_level=args.log_level)
    anyio.run(runner)


if __name__ == "__main__":
    main()
