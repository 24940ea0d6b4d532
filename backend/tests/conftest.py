"""
Pytest configuration for backend tests.

Adds the backend directory to Python path so imports like
'from notegen.xxx import ...' work correctly, and provides fake
fragment sources for session and API tests.
"""
import asyncio
import sys
from pathlib import Path
from typing import Optional

import pytest

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

_END = object()


class ScriptedSource:
    """
    Fragment source that replays a fixed script.

    Yields each fragment, then raises `error` if given, or waits forever
    if `hang` is set (until cancelled).
    """

    def __init__(
        self,
        fragments: list[str],
        error: Optional[BaseException] = None,
        hang: bool = False,
    ):
        self.fragments = list(fragments)
        self.error = error
        self.hang = hang
        self.calls: list[str] = []
        self.closed = 0

    async def stream(self, text: str):
        self.calls.append(text)
        try:
            for fragment in self.fragments:
                await asyncio.sleep(0)
                yield fragment
            if self.error is not None:
                raise self.error
            if self.hang:
                await asyncio.Event().wait()
        finally:
            self.closed += 1


class RoutingSource:
    """Dispatches to a per-input source."""

    def __init__(self, routes: dict[str, ScriptedSource]):
        self.routes = routes

    def stream(self, text: str):
        return self.routes[text].stream(text)


class Channel:
    """Test-controlled fragment feed for one input text."""

    def __init__(self):
        self.queue: asyncio.Queue = asyncio.Queue()
        self.opened = False
        self.closed = False

    def push(self, fragment: str) -> None:
        self.queue.put_nowait(fragment)

    def fail(self, error: BaseException) -> None:
        self.queue.put_nowait(error)

    def end(self) -> None:
        self.queue.put_nowait(_END)


class ControlledSource:
    """Fragment source fed step by step by the test, one channel per input."""

    def __init__(self):
        self.channels: dict[str, Channel] = {}

    def channel(self, text: str) -> Channel:
        if text not in self.channels:
            self.channels[text] = Channel()
        return self.channels[text]

    async def stream(self, text: str):
        channel = self.channel(text)
        channel.opened = True
        try:
            while True:
                item = await channel.queue.get()
                if item is _END:
                    return
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            channel.closed = True


async def settle(rounds: int = 20) -> None:
    """Let pending tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def controlled_source() -> ControlledSource:
    return ControlledSource()
