"""
Generation Session.

Owns the single in-flight note generation of one client: starts it,
supersedes it, cancels it and pumps its fragments into a ResultSink.

Two mechanisms keep generations from interleaving:
- the previous task is cancelled so the source stops promptly
- every fragment and terminal event is checked against the generation
  counter, so events of a superseded generation never reach the sink
  even when cancellation is delivered late
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator, Optional

from .errors import describe_error
from .lifecycle import GenerationLifecycle
from .sink import ResultSink
from .source import FragmentSource
from .types import GenerationStatus

logger = logging.getLogger(__name__)


@asynccontextmanager
async def closing_fragments(fragments: AsyncIterator[str]):
    """Close the fragment iterator on exit when it supports aclose()."""
    try:
        yield fragments
    finally:
        if hasattr(fragments, "aclose"):
            await fragments.aclose()


class GenerationSession:
    """
    Single-stream generation orchestrator.

    start() and cancel() are fire-and-forget and never raise for source
    errors; outcomes are observed through the sink. Both must be called
    from the event loop thread.
    """

    def __init__(
        self,
        source: FragmentSource,
        sink: Optional[ResultSink] = None,
    ):
        self._source = source
        self.sink = sink or ResultSink()
        self._lifecycle = GenerationLifecycle()
        self._generation = 0
        self._active: Optional[asyncio.Task] = None
        # Superseded tasks may still be tearing down; keep them referenced
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> GenerationStatus:
        return self._lifecycle.status

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_running(self) -> bool:
        return self._active is not None

    def start(self, text: str) -> None:
        """
        Start generating notes for text, superseding any running generation.

        Empty text is ignored.
        """
        if not text:
            logger.debug("Ignoring start with empty input")
            return

        self._generation += 1
        generation = self._generation

        previous, self._active = self._active, None
        if previous is not None:
            previous.cancel()
            logger.info("Generation superseded by generation %d", generation)

        self._lifecycle.begin()
        self.sink.reset(generation)

        task = asyncio.create_task(
            self._consume(generation, text, self._source),
            name=f"generation-{generation}",
        )
        self._active = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(partial(self._on_task_done, generation))
        logger.info("Started generation %d", generation)

    def cancel(self) -> None:
        """
        Cancel the running generation, keeping its partial text.

        No-op when nothing is running.
        """
        if self._active is None:
            return

        self._generation += 1
        task, self._active = self._active, None
        task.cancel()

        self._lifecycle.abort()
        self.sink.stop()
        logger.info("Cancelled generation %d", self.sink.generation)

    async def wait(self) -> GenerationStatus:
        """Wait for the running generation to terminate, if there is one."""
        task = self._active
        if task is not None:
            await asyncio.wait({task})
        return self.state

    async def aclose(self) -> None:
        """Cancel the running generation and wait for every task to exit."""
        self.cancel()
        if self._tasks:
            await asyncio.wait(set(self._tasks))

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _on_task_done(self, generation: int, task: asyncio.Task) -> None:
        if not task.cancelled() or not self._is_current(generation):
            return
        # Cancelled from outside the session, e.g. loop shutdown, possibly
        # before the task ever ran
        logger.info("Generation %d cancelled externally", generation)
        self._generation += 1
        self._active = None
        self._lifecycle.abort()
        self.sink.stop()

    async def _consume(
        self,
        generation: int,
        text: str,
        source: FragmentSource,
    ) -> None:
        """
        Pump fragments of one generation into the sink.

        Steps:
        1. Append each fragment while the generation is current
        2. On exhaustion, mark completed
        3. On source error, record the error and mark failed
        A stale generation stops quietly and never touches the sink.
        """
        try:
            async with closing_fragments(source.stream(text)) as fragments:
                async for fragment in fragments:
                    if not self._is_current(generation):
                        logger.debug(
                            "Discarding fragment of superseded generation %d",
                            generation,
                        )
                        return
                    self.sink.append(fragment)

        except asyncio.CancelledError:
            logger.debug("Generation %d task cancelled", generation)
            raise

        except Exception as e:
            if not self._is_current(generation):
                logger.debug(
                    "Ignoring error of superseded generation %d: %s",
                    generation,
                    e,
                )
                return

            message = describe_error(e)
            logger.warning("Generation %d failed: %s", generation, message)
            self._active = None
            self._lifecycle.fail()
            self.sink.fail(message)
            return

        if not self._is_current(generation):
            return

        self._active = None
        self._lifecycle.finish()
        self.sink.complete()
        logger.info(
            "Generation %d completed, total chars: %d",
            generation,
            len(self.sink.text),
        )
