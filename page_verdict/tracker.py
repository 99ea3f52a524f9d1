"""
Verdict Tracker

Reconciles the console stream of a loading page with its single
load-completion status and turns the pair into one exit decision.

- Expected message absent (None or ""): only the load status matters
- Expected message present: it must show up, exactly, in the console
  before the load completes
- The verdict is computed once; the terminal action runs once
"""

import logging
import sys
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAIL = "fail"

EXIT_PASS = 0
EXIT_FAIL = 1


def _echo_stdout(msg: str) -> None:
    print(msg, file=sys.stdout, flush=True)


def _exit_process(code: int) -> None:
    sys.stdout.flush()
    raise SystemExit(code)


class VerdictTracker:
    """
    Owns the observed-message state for one page-load attempt.

    Register on_console_message and on_load_finished with the page host;
    nothing else mutates the tracker.
    """

    def __init__(
        self,
        expected_message: Optional[str] = None,
        terminate: Callable[[int], None] = _exit_process,
        echo: Callable[[str], None] = _echo_stdout,
    ):
        self._expected = expected_message or None
        self._observed = self._expected is None
        self._verdict: Optional[bool] = None
        self._terminate = terminate
        self._echo = echo

    @classmethod
    def from_argv(cls, argv: Sequence[str], **kwargs) -> "VerdictTracker":
        """Take the expected message from argv[1] when present and non-empty."""
        expected = argv[1] if len(argv) > 1 and argv[1] else None
        return cls(expected, **kwargs)

    @property
    def expected_message(self) -> Optional[str]:
        return self._expected

    @property
    def observed(self) -> bool:
        return self._observed

    @property
    def finished(self) -> bool:
        return self._verdict is not None

    @property
    def verdict(self) -> Optional[bool]:
        return self._verdict

    @property
    def exit_code(self) -> Optional[int]:
        if self._verdict is None:
            return None
        return EXIT_PASS if self._verdict else EXIT_FAIL

    def on_console_message(self, msg: str) -> None:
        self._echo(msg)

        if self._observed or self.finished:
            return
        if msg == self._expected:
            logger.debug("Expected message observed: %r", msg)
            self._observed = True

    def on_load_finished(self, status: str) -> None:
        if self.finished:
            logger.warning("Ignoring repeated load completion (status=%s)", status)
            return

        self._verdict = status == STATUS_SUCCESS and self._observed

        if status != STATUS_SUCCESS:
            logger.info("Page load reported status %r", status)
        elif not self._observed:
            logger.info("Expected message %r not seen before load completed", self._expected)

        self._terminate(self.exit_code)
