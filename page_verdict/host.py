"""
Page Host backed by Playwright.

- PageHost wraps one Playwright page: it forwards console text to a single
  registered handler and reports one terminal load status per open()
- launch_page_host() starts the browser, context and page and tears them
  down again when the run is over
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List, Optional

from playwright.async_api import async_playwright, ConsoleMessage, Error, Page

from page_verdict.tracker import STATUS_FAIL, STATUS_SUCCESS, VerdictTracker

logger = logging.getLogger(__name__)

# Launch flags understood by chromium only
CHROMIUM_ONLY_ARGS = {"--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage", "--disable-gpu"}


def _safe_str(x) -> str:
    try:
        return str(x)
    except Exception:
        return "<unprintable>"


async def load_page(page: Page, url: str, timeout_ms: float = 0) -> str:
    """
    Navigate and wait for the load event.

    Returns "success" when navigation resolved without an HTTP error status,
    "fail" on a navigation error, timeout or 4xx/5xx response.
    """
    try:
        resp = await page.goto(url, wait_until="load", timeout=timeout_ms)
    except Error as e:
        logger.warning("Navigation to %s failed: %s", url, _safe_str(e))
        return STATUS_FAIL

    status = resp.status if resp else None
    logger.debug("Navigation status: %s", status if status is not None else "No response")

    if status is not None and status >= 400:
        logger.warning("Navigation to %s returned HTTP %s", url, status)
        return STATUS_FAIL
    return STATUS_SUCCESS


class PageHost:
    """One page, one console handler, one load-completion callback per open()."""

    def __init__(self, page: Page, navigation_timeout_ms: float = 0):
        self.page = page
        self.navigation_timeout_ms = navigation_timeout_ms
        self._console_handler: Optional[Callable[[str], None]] = None
        self.page_errors: List[str] = []

        page.on("console", self._dispatch_console)
        page.on("pageerror", self._on_page_error)

    def on_console_message(self, handler: Callable[[str], None]) -> None:
        self._console_handler = handler

    def _dispatch_console(self, msg: ConsoleMessage) -> None:
        if self._console_handler is not None:
            self._console_handler(msg.text)

    def _on_page_error(self, error: Error) -> None:
        text = _safe_str(error)
        self.page_errors.append(text)
        logger.warning("Page error: %s", text)

    async def open(self, url: str, callback: Callable[[str], None]) -> str:
        logger.info("Opening %s", url)
        status = await load_page(self.page, url, self.navigation_timeout_ms)
        callback(status)
        return status

    async def verify(self, url: str, tracker: VerdictTracker) -> Optional[int]:
        """Run one page-load attempt against tracker; returns its exit code."""
        self.on_console_message(tracker.on_console_message)
        await self.open(url, tracker.on_load_finished)
        return tracker.exit_code


@asynccontextmanager
async def launch_page_host(
    browser_name: str = "chromium",
    headless: bool = True,
    launch_args: Optional[List[str]] = None,
    navigation_timeout_ms: float = 0,
) -> AsyncIterator[PageHost]:
    args = list(launch_args or [])
    if browser_name != "chromium":
        args = [a for a in args if a not in CHROMIUM_ONLY_ARGS]

    async with async_playwright() as p:
        browser_type = getattr(p, browser_name)
        logger.debug("Launching %s (headless=%s)", browser_name, headless)
        browser = await browser_type.launch(headless=headless, args=args)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            try:
                yield PageHost(page, navigation_timeout_ms=navigation_timeout_ms)
            finally:
                await context.close()
        finally:
            await browser.close()
