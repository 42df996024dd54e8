"""Exception hierarchy for the quiz session engine."""

from __future__ import annotations


class QuizEngineError(Exception):
    """Base class for errors raised by the quiz engine."""


class CallerMisuseError(QuizEngineError, ValueError):
    """Raised when an operation is called in the wrong state or with a bad index."""


class InvariantViolation(QuizEngineError):
    """Raised when an internal consistency guard fails."""


class SubmissionError(QuizEngineError):
    """Base class for failures while syncing a result to the backend."""


class AuthExpiredError(SubmissionError):
    """The bearer token is missing, invalid or rejected by the server."""


class TransportError(SubmissionError):
    """The request never produced a usable HTTP response."""


class SubmissionRejectedError(SubmissionError):
    """The server answered but refused the submission."""
