"""
Generation Services Module.

Streams AI-generated notes into an observable result buffer.

Architecture:
- FragmentSource: Produces ordered text fragments for an input (PydanticAI)
- ResultSink: Observable accumulated text, error and running flag
- GenerationSession: Single in-flight stream with supersede-on-start
- StreamNotifier: Sends sink events to WebSocket clients

Usage:
    from notegen.services.generation import (
        GenerationSession,
        create_agent_source,
    )

    session = GenerationSession(create_agent_source())
    session.sink.subscribe(listener)
    session.start("raw meeting minutes ...")
"""

from .types import (
    GenerationStatus,
    SinkEvent,
    SinkEventKind,
    SinkSnapshot,
)
from .errors import GenerationError, SourceFailure
from .sink import ResultSink
from .lifecycle import GenerationLifecycle
from .source import AgentFragmentSource, FragmentSource, create_agent_source
from .session import GenerationSession
from .notifier import StreamNotifier

__all__ = [
    # Types
    "GenerationStatus",
    "SinkEvent",
    "SinkEventKind",
    "SinkSnapshot",
    # Errors
    "GenerationError",
    "SourceFailure",
    # Services
    "ResultSink",
    "GenerationLifecycle",
    "FragmentSource",
    "AgentFragmentSource",
    "create_agent_source",
    "GenerationSession",
    "StreamNotifier",
]
