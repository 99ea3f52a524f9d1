#!/usr/bin/env python3
"""
Headless page-load verifier (Playwright)

- Opens one local page and echoes every console message to stdout
- Passes when the page loads successfully AND, if given, EXPECTED_MESSAGE
  was written to the console before the load completed
- Only file:// pages and loopback http(s) URLs are opened

Usage:
  page-verdict [--page PATH] [--browser NAME] [--serve] [--] [EXPECTED_MESSAGE]

  EXPECTED_MESSAGE is the first argument that is not one of the options
  below; put it after "--" if it collides with an option name.

Exit codes:
  0  page loaded and expected message seen (or none required)
  1  load failed, expected message missing, or browser unavailable
  2  invalid arguments or refused target
"""

import argparse
import asyncio
import dataclasses
import logging
import sys
from typing import List, Optional, Tuple

from playwright.async_api import Error

from page_verdict.config import BROWSERS, VerifierConfig
from page_verdict.host import launch_page_host
from page_verdict.server import PageServer
from page_verdict.target import UnsafeTargetError, local_path, resolve_target
from page_verdict.tracker import EXIT_FAIL, VerdictTracker

logger = logging.getLogger("page_verdict")

EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    # The expected message is taken from the leftover arguments (see
    # split_argv), so messages starting with "-" are accepted as-is.
    parser = argparse.ArgumentParser(
        prog="page-verdict",
        description="Headless page-load verifier",
        usage="%(prog)s [options] [--] [EXPECTED_MESSAGE]",
        allow_abbrev=False,
    )
    parser.add_argument("--page", help="Page path or loopback URL to open")
    parser.add_argument("--browser", choices=BROWSERS, help="Browser engine")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--serve", action="store_true", help="Serve the page's directory over HTTP")
    parser.add_argument("--port", type=int, help="Port for --serve (0 picks a free port)")
    parser.add_argument("--timeout", type=float, dest="timeout_ms",
                        help="Navigation timeout in ms (0 waits forever)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def split_argv(parser: argparse.ArgumentParser, argv: List[str]) -> Tuple[argparse.Namespace, List[str]]:
    """
    Separate known options from the message arguments.

    Everything after a literal "--" is a message argument, so a message
    that looks like one of our own options can still be passed.

    Returns:
        (parsed options, leftover arguments in order)
    """
    if "--" in argv:
        idx = argv.index("--")
        head, tail = argv[:idx], argv[idx + 1:]
    else:
        head, tail = argv, []
    args, leftover = parser.parse_known_args(head)
    return args, leftover + tail


def config_from_args(args: argparse.Namespace, base: Optional[VerifierConfig] = None) -> VerifierConfig:
    config = base or VerifierConfig.from_env()
    overrides = {
        "page": args.page,
        "browser": args.browser,
        "port": args.port,
        "navigation_timeout_ms": args.timeout_ms,
        "headless": False if args.headed else None,
        "serve": True if args.serve else None,
        "log_level": "DEBUG" if args.verbose else None,
    }
    return dataclasses.replace(config, **{k: v for k, v in overrides.items() if v is not None})


def setup_logging(level: str) -> None:
    # stdout is reserved for forwarded console messages
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def run(config: VerifierConfig, tracker: VerdictTracker) -> int:
    """Open the configured page once and return the tracker's exit code."""
    url = resolve_target(config.page)

    server = None
    if config.serve:
        page_path = local_path(url)
        if page_path is None:
            raise UnsafeTargetError(f"--serve needs a local file, got {url}")
        server = PageServer(page_path.parent, address=config.host, port=config.port)

    try:
        if server:
            await server.start_server()
            url = server.url_for(page_path.name)
        async with launch_page_host(
            browser_name=config.browser,
            headless=config.headless,
            launch_args=config.launch_args,
            navigation_timeout_ms=config.navigation_timeout_ms,
        ) as host:
            code = await host.verify(url, tracker)
    finally:
        if server:
            await server.stop_server()

    return EXIT_FAIL if code is None else code


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    args, message_args = split_argv(parser, argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(config.log_level)

    def terminate(code: int) -> None:
        sys.stdout.flush()
        marker = "✓" if code == 0 else "✗"
        logger.info("%s Verdict: %s (exit %d)", marker, "PASSED" if code == 0 else "FAILED", code)

    tracker = VerdictTracker.from_argv([parser.prog] + message_args, terminate=terminate)
    if tracker.expected_message is not None:
        logger.debug("Waiting for console message %r", tracker.expected_message)
    if len(message_args) > 1:
        logger.warning("Ignoring extra arguments: %s", message_args[1:])

    try:
        return asyncio.run(run(config, tracker))
    except UnsafeTargetError as e:
        logger.error("%s", e)
        return EXIT_USAGE
    except OSError as e:
        # Missing --serve directory, port in use or not permitted
        logger.error("%s", e)
        return EXIT_FAIL
    except Error as e:
        logger.error("Browser unavailable: %s", e)
        return EXIT_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
