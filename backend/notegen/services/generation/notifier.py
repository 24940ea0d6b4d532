"""
Stream Notifier.

Forwards ResultSink events to a WebSocket client.

Sink listeners are synchronous, sends are not: the notifier enqueues
formatted messages and a separate task (run()) drains the queue, so
message order always matches sink mutation order.
"""
import asyncio
import logging
from typing import Any, Optional, Protocol

from .types import SinkEvent, SinkEventKind

logger = logging.getLogger(__name__)


class WebSocketSender(Protocol):
    """Protocol for sending WebSocket messages."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...


class StreamNotifier:
    """
    Sends sink events to one client.

    All event types follow the stream.* naming convention:
    - stream.start      new generation began, client clears its output
    - stream.chunk      fragment appended (delta + accumulated)
    - stream.end        generation completed
    - stream.error      generation failed
    - stream.cancelled  generation cancelled by the user
    Protocol problems are sent as {"type": "error", "message": ...}.
    """

    def __init__(self, sender: WebSocketSender):
        self._sender = sender
        self._queue: asyncio.Queue[Optional[dict[str, Any]]] = asyncio.Queue()
        self._stopped = False

    @property
    def stopped(self) -> bool:
        """True once a send failed; later messages are dropped."""
        return self._stopped

    def __call__(self, event: SinkEvent) -> None:
        """Sink listener entry point."""
        self._put(self.format_event(event))

    def notify_protocol_error(self, message: str) -> None:
        """Queue an error about a malformed client message."""
        self._put({"type": "error", "message": message})

    def _put(self, message: dict[str, Any]) -> None:
        if self._stopped:
            logger.debug("Dropping %s, sender stopped", message["type"])
            return
        self._queue.put_nowait(message)

    def close(self) -> None:
        """Stop run() once the already queued messages are sent."""
        self._queue.put_nowait(None)

    async def run(self) -> None:
        """Send queued messages until close() is called or the socket fails."""
        while True:
            message = await self._queue.get()
            if message is None:
                break
            try:
                await self._sender.send_json(message)
            except Exception as e:
                logger.warning("Failed to send %s: %s", message["type"], e)
                self._stopped = True
                # Nothing queued after the failure can be delivered
                while not self._queue.empty():
                    self._queue.get_nowait()
                break

    @staticmethod
    def format_event(event: SinkEvent) -> dict[str, Any]:
        """Build the client message for a sink event."""
        snapshot = event.snapshot

        if event.kind == SinkEventKind.RESET:
            return {"type": "stream.start", "generation": event.generation}

        if event.kind == SinkEventKind.FRAGMENT:
            return {
                "type": "stream.chunk",
                "generation": event.generation,
                "delta": event.delta,
                "accumulated": snapshot.text,
            }

        if event.kind == SinkEventKind.COMPLETED:
            return {
                "type": "stream.end",
                "generation": event.generation,
                "content": snapshot.text,
            }

        if event.kind == SinkEventKind.FAILED:
            return {
                "type": "stream.error",
                "generation": event.generation,
                "error": snapshot.error,
                "content": snapshot.text,
            }

        return {
            "type": "stream.cancelled",
            "generation": event.generation,
            "content": snapshot.text,
        }
