"""Facade that hands out one quiz session per attempt."""

from __future__ import annotations

import logging

from quiz_taker.core.models import Quiz, QuizProgress
from quiz_taker.core.quiz_session import QuizSessionController
from quiz_taker.core.services.auth import AuthProvider
from quiz_taker.core.services.narration import Narrator
from quiz_taker.core.services.submission_gateway import SubmissionGateway

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for a loaded quiz and its collaborators: gateway, auth and narrator.

    A finished session is never reset; retrying the quiz builds a new
    ``QuizSessionController``.
    """

    def __init__(
        self,
        quiz: Quiz,
        gateway: SubmissionGateway | None = None,
        auth_provider: AuthProvider | None = None,
        narrator: Narrator | None = None,
    ) -> None:
        self._quiz = quiz
        self._gateway = gateway
        self._auth_provider = auth_provider
        self._narrator = narrator
        self._session: QuizSessionController | None = None
        self._attempts_started: int = 0

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def progress(self) -> QuizProgress | None:
        return self._quiz.progress

    @property
    def current_session(self) -> QuizSessionController | None:
        return self._session

    @property
    def attempts_started(self) -> int:
        return self._attempts_started

    def begin_attempt(self, **session_options) -> QuizSessionController:
        """Dispose any live attempt and return a fresh, not yet started session."""
        self.end_attempt()
        self._session = QuizSessionController(
            self._quiz,
            gateway=self._gateway,
            auth_provider=self._auth_provider,
            narrator=self._narrator,
            **session_options,
        )
        self._attempts_started += 1
        logger.info("Prepared attempt %d for quiz %s", self._attempts_started, self._quiz.id)
        return self._session

    def end_attempt(self) -> None:
        """Called when the student leaves the quiz screen."""
        if self._session is None:
            return
        self._session.dispose()
        self._session = None
