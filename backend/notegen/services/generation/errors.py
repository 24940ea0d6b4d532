"""
Generation errors.

None of these cross GenerationSession.start(); failures are absorbed
into the sink's error message.
"""
from typing import Optional


class GenerationError(Exception):
    """Base exception for note generation."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class SourceFailure(GenerationError):
    """A fragment source terminated with an error mid-stream."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(message)


def describe_error(error: BaseException) -> str:
    """Human-readable description of a source error for the sink."""
    if isinstance(error, GenerationError):
        return error.message
    return str(error) or type(error).__name__
