"""Service holding the in-progress answers of a quiz attempt."""

from __future__ import annotations

from quiz_taker.core.errors import CallerMisuseError
from quiz_taker.core.models import Quiz


class AnswerTracker:
    """Maps question index to the selected option index.

    An unanswered question simply has no entry. Once frozen, the mapping can
    no longer change.
    """

    def __init__(self, quiz: Quiz) -> None:
        self._quiz = quiz
        self._answers: dict[int, int] = {}
        self._frozen: bool = False

    def record(self, question_index: int, option_index: int) -> bool:
        """Record an answer. Returns True if it's a new answer, False if update."""
        if self._frozen:
            raise CallerMisuseError("Answers are frozen once the quiz is completed.")
        self._validate(question_index, option_index)
        is_new = question_index not in self._answers
        self._answers[question_index] = option_index
        return is_new

    def get(self, question_index: int) -> int | None:
        return self._answers.get(question_index)

    def is_answered(self, question_index: int) -> bool:
        return question_index in self._answers

    def answered_count(self) -> int:
        return len(self._answers)

    def unanswered_indices(self) -> list[int]:
        return [i for i in range(self._quiz.question_count) if i not in self._answers]

    def snapshot(self) -> dict[int, int]:
        return dict(self._answers)

    def freeze(self) -> None:
        self._frozen = True

    def is_frozen(self) -> bool:
        return self._frozen

    def _validate(self, question_index: int, option_index: int) -> None:
        if isinstance(question_index, bool) or not isinstance(question_index, int):
            raise CallerMisuseError(f"Question index must be an integer, got {question_index!r}.")
        if isinstance(option_index, bool) or not isinstance(option_index, int):
            raise CallerMisuseError(f"Option index must be an integer, got {option_index!r}.")
        if not self._quiz.has_question(question_index):
            raise CallerMisuseError(
                f"Question index {question_index} out of range (quiz has {self._quiz.question_count})."
            )
        question = self._quiz.questions[question_index]
        if not question.has_option(option_index):
            raise CallerMisuseError(
                f"Option index {option_index} out of range for question {question_index} "
                f"({len(question.options)} options)."
            )
