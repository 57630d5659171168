# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Layout Crawl CLI: crawl, serve commands.

Usage:
    layoutcrawl crawl URL [--html] [--max-depth N] [--timeout S] [--indent N] [-o PATH]
    layoutcrawl serve [--transport stdio|http] [--host HOST] [--port PORT]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .settings import CrawlSettings


def _settings_from_args(args: argparse.Namespace) -> CrawlSettings:
    """Env-derived settings, with explicit flags taking priority."""
    base = CrawlSettings.from_env()
    return CrawlSettings(
        timeout=args.timeout if args.timeout is not None else base.timeout,
        max_depth=args.max_depth if args.max_depth is not None else base.max_depth,
        user_agent=base.user_agent,
    )


def cmd_crawl(args: argparse.Namespace) -> None:
    """Crawl one URL and print the wireframe (or raw HTML) as JSON."""
    from .crawler import crawl

    try:
        settings = _settings_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        result = asyncio.run(crawl(args.url, return_html=args.html, settings=settings))
    except KeyboardInterrupt:
        raise
    except Exception as e:
        from .problem_details import from_exception

        problem = from_exception(e)
        print(problem.to_cli_text(), file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(1)

    text = json.dumps(result.to_dict(), ensure_ascii=False, indent=args.indent)
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8")
        print(f"Saved to {out}", file=sys.stderr)
    else:
        print(text)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the server, forwarding any extra args to it."""
    from .server import main

    main(argv=getattr(args, "_server_argv", []))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Layout Crawl CLI", prog="layoutcrawl")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging and tracebacks")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _crawl_epilog = """\
examples:
  %(prog)s https://example.com                   Print wireframe JSON
  %(prog)s https://example.com --html            Print raw HTML wrapped in JSON
  %(prog)s https://example.com --max-depth 3     Shallower tree
  %(prog)s https://example.com -o out/site.json  Save to file
"""
    p_crawl = subparsers.add_parser(
        "crawl",
        help="Crawl a URL into a layout wireframe",
        epilog=_crawl_epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_crawl.add_argument("url", help="Page URL (http:// or https://)")
    p_crawl.add_argument("--html", action="store_true", help="Return raw HTML instead of a wireframe")
    p_crawl.add_argument("--max-depth", type=int, default=None, metavar="N", help="Depth ceiling (default: 6)")
    p_crawl.add_argument("--timeout", type=float, default=None, metavar="S", help="Fetch timeout seconds (default: 10)")
    p_crawl.add_argument("--indent", type=int, default=2, metavar="N", help="JSON indent (default: 2)")
    p_crawl.add_argument("-o", "--output", type=str, metavar="PATH", help="Write JSON to PATH instead of stdout")

    subparsers.add_parser(
        "serve",
        help="Start server (extra args forwarded to server)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s                                Start with stdio transport (default)
  %(prog)s --transport http --port 8000   Start HTTP server on port 8000""",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args, remaining = parser.parse_known_args(argv)

    # Forward remaining args to server when using 'serve' command
    if args.command == "serve":
        args._server_argv = remaining
    elif remaining:
        parser.error(f"unrecognized arguments: {' '.join(remaining)}")

    commands = {"crawl": cmd_crawl, "serve": cmd_serve}

    if args.command != "serve":
        from .logging_config import configure as configure_logging

        configure_logging(json_output=False, level="DEBUG" if args.verbose else "WARNING")

    try:
        commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except SystemExit:
        raise
    except Exception as e:
        from .problem_details import from_exception

        problem = from_exception(e)
        print(problem.to_cli_text(), file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
