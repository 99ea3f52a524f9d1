"""
Page Verdict - headless page-load verifier.

Opens a local page in a Playwright browser, forwards its console output
to stdout and exits 0 only when the page loaded and the expected console
message (if any) appeared before load completion.
"""

from page_verdict.tracker import VerdictTracker

__all__ = ["VerdictTracker"]
