"""
Verifier configuration.

Defaults come from PAGE_VERDICT_* environment variables; the command line
overrides them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from page_verdict.target import DEFAULT_PAGE

BROWSERS = ("chromium", "firefox", "webkit")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default) == "1"


@dataclass
class VerifierConfig:
    """Configuration for one verification run."""

    page: str = DEFAULT_PAGE
    browser: str = "chromium"
    headless: bool = True

    # Serve the page's directory over HTTP instead of opening file://
    serve: bool = False
    host: str = "127.0.0.1"
    port: int = 0

    # 0 disables the navigation timeout; the run then waits for the load
    navigation_timeout_ms: float = 0

    launch_args: list[str] = field(
        default_factory=lambda: [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-gpu",
        ]
    )

    log_level: str = "WARNING"

    def __post_init__(self):
        if self.browser not in BROWSERS:
            raise ValueError(f"Unknown browser {self.browser!r}, expected one of {BROWSERS}")
        if self.navigation_timeout_ms < 0:
            raise ValueError("navigation_timeout_ms must be >= 0")

    @classmethod
    def from_env(cls) -> "VerifierConfig":
        """Load config from environment variables."""
        return cls(
            page=os.getenv("PAGE_VERDICT_PAGE", DEFAULT_PAGE),
            browser=os.getenv("PAGE_VERDICT_BROWSER", "chromium").lower(),
            headless=_env_flag("PAGE_VERDICT_HEADLESS", "1"),
            serve=_env_flag("PAGE_VERDICT_SERVE", "0"),
            port=int(os.getenv("PAGE_VERDICT_PORT", "0")),
            navigation_timeout_ms=float(os.getenv("PAGE_VERDICT_NAV_TIMEOUT_MS", "0")),
            log_level=os.getenv("PAGE_VERDICT_LOG_LEVEL", "WARNING").upper(),
        )
