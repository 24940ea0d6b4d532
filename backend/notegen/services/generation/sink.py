"""
Result Sink.

Observable state container for one session's output: accumulated
text, error message and running flag. Only GenerationSession mutates
it; everyone else reads properties, polls snapshot() or subscribes.
"""
import logging
from typing import Callable, Optional

from .types import SinkEvent, SinkEventKind, SinkSnapshot

logger = logging.getLogger(__name__)

SinkListener = Callable[[SinkEvent], None]


class ResultSink:
    """
    Accumulated output of the current generation.

    Listeners are called synchronously, after each mutation has been
    fully applied, on the thread that drives the session. Listeners
    must not block; a listener that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._fragments: list[str] = []
        self._text = ""
        self._error: Optional[str] = None
        self._is_running = False
        self._generation = 0
        self._listeners: list[SinkListener] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def fragments(self) -> tuple[str, ...]:
        return tuple(self._fragments)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def generation(self) -> int:
        """Generation that last reset this sink (0 before the first start)."""
        return self._generation

    def snapshot(self) -> SinkSnapshot:
        return SinkSnapshot(
            text=self._text,
            error=self._error,
            is_running=self._is_running,
        )

    def subscribe(self, listener: SinkListener) -> Callable[[], None]:
        """
        Register a listener for sink events.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Mutations, GenerationSession only

    def reset(self, generation: int) -> None:
        """Clear text and error for a new running generation."""
        self._fragments = []
        self._text = ""
        self._error = None
        self._is_running = True
        self._generation = generation
        self._emit(SinkEventKind.RESET)

    def append(self, fragment: str) -> None:
        self._fragments.append(fragment)
        self._text += fragment
        self._emit(SinkEventKind.FRAGMENT, delta=fragment)

    def complete(self) -> None:
        self._is_running = False
        self._emit(SinkEventKind.COMPLETED)

    def fail(self, message: str) -> None:
        self._error = message
        self._is_running = False
        self._emit(SinkEventKind.FAILED)

    def stop(self) -> None:
        """Mark the generation cancelled; text is kept, no error is set."""
        self._is_running = False
        self._emit(SinkEventKind.CANCELED)

    def _emit(self, kind: SinkEventKind, delta: str = "") -> None:
        event = SinkEvent(
            kind=kind,
            generation=self._generation,
            snapshot=self.snapshot(),
            delta=delta,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Sink listener failed on %s event", kind.value)
