"""
Generation Types.

Data structures shared by the generation session, the result sink
and the notifier. Snapshots and events are immutable dataclasses so
observers can keep them around safely.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class GenerationStatus(str, Enum):
    """Lifecycle status of a session's current generation."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            GenerationStatus.COMPLETED,
            GenerationStatus.FAILED,
            GenerationStatus.CANCELED,
        )


class SinkEventKind(str, Enum):
    """Kind of mutation applied to a ResultSink."""

    RESET = "reset"          # New generation started, buffers cleared
    FRAGMENT = "fragment"    # One fragment appended
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"


@dataclass(frozen=True)
class SinkSnapshot:
    """
    Point-in-time view of a ResultSink.

    Attributes:
        text: Accumulated text so far
        error: Error message, only set after a failed generation
        is_running: Whether a generation is in flight
    """

    text: str
    error: Optional[str]
    is_running: bool


@dataclass(frozen=True)
class SinkEvent:
    """
    Notification delivered to sink listeners after a mutation.

    Attributes:
        kind: What changed
        generation: Generation the mutation belongs to
        snapshot: Sink state after the mutation
        delta: Appended fragment (FRAGMENT events only)
    """

    kind: SinkEventKind
    generation: int
    snapshot: SinkSnapshot
    delta: str = ""
