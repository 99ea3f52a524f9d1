"""Shared fixtures: an in-process stand-in for a Playwright page."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

import pytest
from playwright.async_api import Error


class FakeConsoleMessage:
    def __init__(self, text: str):
        self.text = text
        self.type = "log"


class FakeResponse:
    def __init__(self, status: int):
        self.status = status


class FakePage:
    """
    Scripted page: goto() replays console lines to the registered
    "console" handlers, then resolves with a response or raises.
    """

    def __init__(
        self,
        console: Optional[List[str]] = None,
        status: Optional[int] = 200,
        error: Optional[str] = None,
        page_errors: Optional[List[str]] = None,
    ):
        self.console = list(console or [])
        self.status = status
        self.error = error
        self.page_errors = list(page_errors or [])
        self.handlers: Dict[str, List[Callable]] = {}
        self.visited: List[str] = []
        self.goto_kwargs: Dict = {}

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def _emit(self, event: str, payload) -> None:
        for handler in self.handlers.get(event, []):
            handler(payload)

    async def goto(self, url: str, **kwargs):
        self.visited.append(url)
        self.goto_kwargs = kwargs
        for text in self.console:
            self._emit("console", FakeConsoleMessage(text))
        for text in self.page_errors:
            self._emit("pageerror", Error(text))
        if self.error is not None:
            raise Error(self.error)
        if self.status is None:
            return None
        return FakeResponse(self.status)


class ExitRecorder:
    """Terminal action that records exit codes instead of exiting."""

    def __init__(self):
        self.codes: List[int] = []

    def __call__(self, code: int) -> None:
        self.codes.append(code)


@pytest.fixture()
def exit_recorder() -> ExitRecorder:
    return ExitRecorder()


@pytest.fixture()
def echoed() -> List[str]:
    return []


@pytest.fixture()
def make_page() -> Callable[..., FakePage]:
    return FakePage
