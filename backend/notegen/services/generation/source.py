"""
Fragment Sources.

A fragment source turns input text into an ordered, finite stream of
text fragments. GenerationSession depends only on the FragmentSource
protocol; AgentFragmentSource is the PydanticAI implementation.
"""
import logging
from typing import AsyncIterator, Optional, Protocol, Union

from pydantic_ai import Agent
from pydantic_ai.models import Model

from notegen.ai.prompts import build_system_prompt
from notegen.config import settings

from .errors import SourceFailure

logger = logging.getLogger(__name__)


class FragmentSource(Protocol):
    """
    Protocol for fragment sources.

    stream() returns an async iterator, usually an async generator. When
    it has aclose(), the session calls it on completion, failure and
    cancellation, and the source must release its transport resources
    then.
    """

    def stream(self, text: str) -> AsyncIterator[str]: ...


class AgentFragmentSource:
    """
    Streams generated notes from a PydanticAI agent.

    The agent is created on first use, so provider credentials are only
    resolved when a stream is actually opened.

    Note: stream_text() is called with debounce_by=None so that every
    model delta becomes its own fragment.
    """

    def __init__(
        self,
        model: Union[str, Model],
        system_prompt: Optional[str] = None,
    ):
        self._model = model
        self._system_prompt = system_prompt or build_system_prompt()
        self._agent: Optional[Agent[None, str]] = None

    def _get_agent(self) -> Agent[None, str]:
        if self._agent is None:
            self._agent = Agent(
                model=self._model,
                system_prompt=self._system_prompt,
            )
        return self._agent

    async def stream(self, text: str) -> AsyncIterator[str]:
        """
        Stream note fragments for the given text.

        Yields:
            Non-empty text deltas in model order

        Raises:
            SourceFailure: If the model call fails at any point
        """
        total_chars = 0
        logger.info("Opening note stream for %d input chars", len(text))

        try:
            agent = self._get_agent()
            async with agent.run_stream(text) as result:
                async for delta in result.stream_text(delta=True, debounce_by=None):
                    if not delta:
                        continue
                    total_chars += len(delta)
                    yield delta

        except Exception as e:
            logger.exception("Note stream failed: %s", e)
            raise SourceFailure(str(e) or type(e).__name__, detail=repr(e)) from e

        logger.info("Note stream completed, total chars: %d", total_chars)


def create_agent_source(system_prompt: Optional[str] = None) -> AgentFragmentSource:
    """Create an agent source for the configured LLM provider."""
    return AgentFragmentSource(
        model=settings.get_llm_model(),
        system_prompt=system_prompt,
    )
