"""Domain models for the quiz-taking engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto

from quiz_taker.constants.narration_constants import NOT_ANSWERED_LABEL
from quiz_taker.constants.quiz_constants import SECONDS_PER_MINUTE


class SessionStatus(Enum):
    """Lifecycle of a single quiz attempt. Only ever advances forward."""

    NOT_STARTED = 0
    IN_PROGRESS = 1
    COMPLETED = 2


class CompletionReason(Enum):
    SUBMITTED = auto()
    TIME_EXPIRED = auto()


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    """Single-answer multiple-choice question."""

    index: int
    text: str
    options: tuple[str, ...]
    correct_option_index: int

    def has_option(self, option_index: int) -> bool:
        return 0 <= option_index < len(self.options)


@dataclass(frozen=True, slots=True)
class QuizProgress:
    """Best-score summary computed by the backend across attempts (read-only)."""

    attempts: int = 0
    best_score: int = 0
    last_attempt_at: datetime | None = None
    is_completed: bool = False


@dataclass(frozen=True, slots=True)
class Quiz:
    """Immutable quiz definition supplied by the content service."""

    id: str
    title: str
    questions: tuple[QuizQuestion, ...]
    time_limit_minutes: int
    subject: str
    description: str | None = None
    progress: QuizProgress | None = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def time_limit_seconds(self) -> int:
        return self.time_limit_minutes * SECONDS_PER_MINUTE

    def has_question(self, question_index: int) -> bool:
        return 0 <= question_index < len(self.questions)


@dataclass(frozen=True, slots=True)
class QuestionOutcome:
    """Per-question line of a scored attempt."""

    question_index: int
    selected_option_index: int | None
    correct_option_index: int
    is_correct: bool

    @property
    def is_answered(self) -> bool:
        return self.selected_option_index is not None

    def selected_option_text(self, question: QuizQuestion) -> str:
        """Return the chosen option text, or a placeholder for unanswered questions."""
        if self.selected_option_index is None:
            return NOT_ANSWERED_LABEL
        return question.options[self.selected_option_index]

    def correct_option_text(self, question: QuizQuestion) -> str:
        return question.options[self.correct_option_index]


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Scored outcome of one attempt. Created once, never mutated."""

    quiz_id: str
    score_percent: int
    correct_count: int
    total_questions: int
    per_question: tuple[QuestionOutcome, ...]
    time_spent_seconds: int
    completed_at: datetime
    completion_reason: CompletionReason = CompletionReason.SUBMITTED


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """What the backend said about a submitted result."""

    quiz_id: str
    success: bool
    error: str | None = None
    server_score: int | None = None
    is_passed: bool | None = None
    # The result this outcome answers for; compared by identity.
    result: QuizResult | None = field(default=None, repr=False, compare=False)


def format_clock(seconds: int) -> str:
    """Render a second count as ``m:ss``."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, SECONDS_PER_MINUTE)
    return f"{minutes}:{secs:02d}"
