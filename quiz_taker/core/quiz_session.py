"""State machine for a single timed quiz attempt.

One controller instance is one attempt. It owns the answer tracker and the
countdown, and moves through ``NOT_STARTED -> IN_PROGRESS -> COMPLETED``
only. Completion can be triggered by an explicit ``submit()`` or by the
countdown expiring; whichever arrives first scores the attempt and every
later trigger gets the same result back.

Completion is split into two flows. Scoring is synchronous and local: the
result is stored and announced through ``completed`` before ``submit()``
returns. Syncing to the backend is posted as a one-shot event on the Qt
event loop and handed to the submission gateway, whose outcome is relayed
through ``submission_finished`` and never touches the stored result.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from functools import partial
import logging
import time

from PySide6.QtCore import QObject, QTimer, Signal

from quiz_taker.constants.quiz_constants import (
    MIN_OPTIONS_PER_QUESTION,
    TIMER_TICK_INTERVAL_MS,
)
from quiz_taker.constants.narration_constants import NOT_ANSWERED_LABEL
from quiz_taker.core.errors import CallerMisuseError, InvariantViolation
from quiz_taker.core.models import (
    CompletionReason,
    Quiz,
    QuizQuestion,
    QuizResult,
    SessionStatus,
    SubmissionOutcome,
)
from quiz_taker.core.services.answer_tracker import AnswerTracker
from quiz_taker.core.services.auth import AuthProvider
from quiz_taker.core.services.countdown_timer import CountdownTimer
from quiz_taker.core.services.narration import (
    LoggingNarrator,
    Narrator,
    answer_selected_text,
    completion_text,
    session_started_text,
)
from quiz_taker.core.services.scoring import score_quiz
from quiz_taker.core.services.submission_gateway import SubmissionGateway

logger = logging.getLogger(__name__)

_NEXT_STATUS: dict[SessionStatus, SessionStatus] = {
    SessionStatus.NOT_STARTED: SessionStatus.IN_PROGRESS,
    SessionStatus.IN_PROGRESS: SessionStatus.COMPLETED,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_attemptable(quiz: Quiz) -> None:
    if quiz.question_count == 0:
        raise InvariantViolation(f"Quiz {quiz.id} has no questions to attempt.")
    if quiz.time_limit_minutes <= 0:
        raise InvariantViolation(
            f"Quiz {quiz.id} has a non-positive time limit ({quiz.time_limit_minutes} min)."
        )
    for question in quiz.questions:
        if len(question.options) < MIN_OPTIONS_PER_QUESTION:
            raise InvariantViolation(
                f"Question {question.index + 1} of quiz {quiz.id} has fewer than "
                f"{MIN_OPTIONS_PER_QUESTION} options."
            )
        if not question.has_option(question.correct_option_index):
            raise InvariantViolation(
                f"Question {question.index + 1} of quiz {quiz.id} marks option "
                f"{question.correct_option_index} correct, which does not exist."
            )


class QuizSessionController(QObject):
    """Runs one attempt at a quiz from start to a single scored result."""

    status_changed = Signal(object)
    question_changed = Signal(int)
    answer_selected = Signal(int, int)
    remaining_changed = Signal(int)
    completed = Signal(object)
    submission_finished = Signal(object)

    def __init__(
        self,
        quiz: Quiz,
        gateway: SubmissionGateway | None = None,
        auth_provider: AuthProvider | None = None,
        narrator: Narrator | None = None,
        timer_interval_ms: int = TIMER_TICK_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _utc_now,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        _check_attemptable(quiz)
        self._quiz = quiz
        self._gateway = gateway
        self._auth_provider = auth_provider
        self._narrator: Narrator = narrator or LoggingNarrator()
        self._now = now

        self._status: SessionStatus = SessionStatus.NOT_STARTED
        self._answers = AnswerTracker(quiz)
        self._current_index: int = 0
        self._remaining_seconds: int = quiz.time_limit_seconds
        self._started_at: datetime | None = None
        self._completed_at: datetime | None = None
        self._result: QuizResult | None = None
        self._disposed: bool = False

        self._timer = CountdownTimer(
            quiz.time_limit_seconds, interval_ms=timer_interval_ms, clock=clock, parent=self
        )
        self._timer.remaining_changed.connect(self._on_timer_tick)
        self._timer.expired.connect(self._on_time_expired)

        if self._gateway is not None:
            self._gateway.finished.connect(self._on_submission_finished)

    # --- State ---

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def current_question_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> QuizQuestion:
        return self._quiz.questions[self._current_index]

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def answers(self) -> dict[int, int]:
        return self._answers.snapshot()

    @property
    def answered_count(self) -> int:
        return self._answers.answered_count()

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def completed_at(self) -> datetime | None:
        return self._completed_at

    @property
    def is_last_question(self) -> bool:
        return self._current_index == self._quiz.question_count - 1

    @property
    def progress_fraction(self) -> float:
        return (self._current_index + 1) / self._quiz.question_count

    def is_disposed(self) -> bool:
        return self._disposed

    def unanswered_indices(self) -> list[int]:
        return self._answers.unanswered_indices()

    def selected_option_label(self, question_index: int) -> str:
        selected = self._answers.get(question_index)
        if selected is None:
            return NOT_ANSWERED_LABEL
        return self._quiz.questions[question_index].options[selected]

    def get_result(self) -> QuizResult | None:
        return self._result if self._status is SessionStatus.COMPLETED else None

    # --- Operations ---

    def start(self) -> None:
        if self._disposed:
            raise CallerMisuseError("Cannot start a disposed quiz session.")
        if self._status is not SessionStatus.NOT_STARTED:
            raise CallerMisuseError(
                f"Quiz session can only be started once (status is {self._status.name})."
            )
        self._current_index = 0
        self._remaining_seconds = self._quiz.time_limit_seconds
        self._started_at = self._now()
        self._transition(SessionStatus.IN_PROGRESS)
        self._timer.start()
        logger.info(
            "Started quiz %s: %d questions, %d seconds",
            self._quiz.id,
            self._quiz.question_count,
            self._remaining_seconds,
        )
        self.question_changed.emit(self._current_index)
        self._narrator.announce(session_started_text())

    def select_answer(self, question_index: int, option_index: int) -> bool:
        """Record the chosen option. Returns False when the session no longer accepts answers."""
        if self._disposed or self._status is SessionStatus.COMPLETED:
            logger.debug(
                "Ignoring answer %s->%s for quiz %s: session closed",
                question_index,
                option_index,
                self._quiz.id,
            )
            return False
        if self._status is SessionStatus.NOT_STARTED:
            raise CallerMisuseError("Start the quiz before selecting answers.")

        self._answers.record(question_index, option_index)
        self.answer_selected.emit(question_index, option_index)
        question = self._quiz.questions[question_index]
        self._narrator.announce(answer_selected_text(question, option_index))
        return True

    def next_question(self) -> int:
        return self._move_to(self._current_index + 1)

    def previous_question(self) -> int:
        return self._move_to(self._current_index - 1)

    def submit(self) -> QuizResult | None:
        """Finish the attempt and return its result. Repeated calls return the same result."""
        if self._result is not None:
            return self._result
        if self._disposed:
            logger.warning("Submit called on abandoned quiz %s; ignoring", self._quiz.id)
            return None
        if self._status is SessionStatus.NOT_STARTED:
            raise CallerMisuseError("Cannot submit a quiz that has not been started.")
        return self._complete(CompletionReason.SUBMITTED)

    def dispose(self) -> None:
        """Release the countdown. An unfinished attempt is abandoned, not submitted."""
        if self._disposed:
            return
        self._disposed = True
        self._timer.stop()
        if self._gateway is not None:
            self._gateway.finished.disconnect(self._on_submission_finished)
        if self._status is SessionStatus.IN_PROGRESS:
            logger.info(
                "Abandoned quiz %s with %d of %d answered",
                self._quiz.id,
                self._answers.answered_count(),
                self._quiz.question_count,
            )

    # --- Internals ---

    def _transition(self, target: SessionStatus) -> None:
        if _NEXT_STATUS.get(self._status) is not target:
            raise CallerMisuseError(
                f"Illegal session transition {self._status.name} -> {target.name}."
            )
        self._status = target
        self.status_changed.emit(target)

    def _move_to(self, index: int) -> int:
        if self._disposed or self._status is not SessionStatus.IN_PROGRESS:
            return self._current_index
        clamped = max(0, min(index, self._quiz.question_count - 1))
        if clamped != self._current_index:
            self._current_index = clamped
            self.question_changed.emit(clamped)
        return self._current_index

    def _complete(self, reason: CompletionReason) -> QuizResult:
        if self._result is not None:
            return self._result
        self._timer.stop()
        self._answers.freeze()
        self._completed_at = self._now()
        time_spent = self._quiz.time_limit_seconds - self._remaining_seconds
        self._result = score_quiz(
            self._quiz,
            self._answers.snapshot(),
            time_spent_seconds=time_spent,
            completed_at=self._completed_at,
            reason=reason,
        )
        self._transition(SessionStatus.COMPLETED)
        logger.info(
            "Completed quiz %s (%s): %d/%d correct, %d%%, %ds",
            self._quiz.id,
            reason.name,
            self._result.correct_count,
            self._result.total_questions,
            self._result.score_percent,
            self._result.time_spent_seconds,
        )
        self.completed.emit(self._result)
        self._narrator.announce(completion_text(self._result))
        if self._gateway is not None:
            QTimer.singleShot(0, partial(self._dispatch_submission, self._result))
        return self._result

    def _dispatch_submission(self, result: QuizResult) -> None:
        if self._gateway is None:
            return
        token = self._current_token()
        self._gateway.submit(result, self._quiz.id, token)

    def _current_token(self) -> str | None:
        if self._auth_provider is None:
            return None
        token = self._auth_provider.get_token()
        if token is None or not self._auth_provider.is_token_valid(token):
            return None
        return token

    def _on_timer_tick(self, remaining: int) -> None:
        if self._status is not SessionStatus.IN_PROGRESS or self._disposed:
            return
        self._remaining_seconds = remaining
        self.remaining_changed.emit(remaining)

    def _on_time_expired(self) -> None:
        if self._status is not SessionStatus.IN_PROGRESS or self._disposed:
            return
        self._complete(CompletionReason.TIME_EXPIRED)

    def _on_submission_finished(self, outcome: SubmissionOutcome) -> None:
        if self._result is None or outcome.result is not self._result:
            return
        self.submission_finished.emit(outcome)
