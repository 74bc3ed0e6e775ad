"""Exception types shared by the core, the API server and the console."""

from __future__ import annotations


class PsychometrixError(Exception):
    """Base class for errors raised by the psychometric test."""


class ValidationError(PsychometrixError, ValueError):
    """Raised when user input is rejected before any state change or network call."""


class StageTransitionError(PsychometrixError, RuntimeError):
    """Raised when an operation is not allowed in the session's current stage."""


class RemoteServiceError(PsychometrixError):
    """Raised when a remote backend call fails (non-2xx status or transport error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class QuestionBankError(PsychometrixError):
    """Raised when a question bank file cannot be parsed."""
