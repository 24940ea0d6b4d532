"""
Generation lifecycle.

Uses python-statemachine to keep the session status transitions explicit.
"""
import logging

from statemachine import State, StateMachine

from .types import GenerationStatus

logger = logging.getLogger(__name__)


class GenerationLifecycle(StateMachine):
    """
    State machine for the generation owned by a session.

    Any state can begin a new generation. A running generation that is
    superseded re-enters running; only a running generation can finish,
    fail or be aborted.
    """

    idle = State("Idle", value=GenerationStatus.IDLE, initial=True)
    running = State("Running", value=GenerationStatus.RUNNING)
    completed = State("Completed", value=GenerationStatus.COMPLETED)
    failed = State("Failed", value=GenerationStatus.FAILED)
    canceled = State("Canceled", value=GenerationStatus.CANCELED)

    begin = (
        idle.to(running)
        | running.to.itself()
        | completed.to(running)
        | failed.to(running)
        | canceled.to(running)
    )
    finish = running.to(completed)
    fail = running.to(failed)
    abort = running.to(canceled)

    @property
    def status(self) -> GenerationStatus:
        return GenerationStatus(self.current_state.value)

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.debug("Generation lifecycle %s: %s -> %s", event, source.id, target.id)
