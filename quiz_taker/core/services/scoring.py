"""Deterministic scoring of a quiz attempt.

``score_quiz`` performs no I/O and reads no clock: the completion timestamp is
passed in. The same inputs therefore always produce an equal result, which
also makes the function usable for replaying stored attempts.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from quiz_taker.core.models import CompletionReason, QuestionOutcome, Quiz, QuizResult


def percent_round_half_up(correct: int, total: int) -> int:
    """Return ``round(correct / total * 100)`` rounding halves up, in exact integer math."""
    if total <= 0:
        return 0
    return (correct * 200 + total) // (total * 2)


def score_quiz(
    quiz: Quiz,
    answers: Mapping[int, int],
    time_spent_seconds: int,
    completed_at: datetime,
    reason: CompletionReason = CompletionReason.SUBMITTED,
) -> QuizResult:
    outcomes: list[QuestionOutcome] = []
    for question in quiz.questions:
        selected = answers.get(question.index)
        outcomes.append(
            QuestionOutcome(
                question_index=question.index,
                selected_option_index=selected,
                correct_option_index=question.correct_option_index,
                is_correct=selected is not None and selected == question.correct_option_index,
            )
        )

    correct_count = sum(1 for outcome in outcomes if outcome.is_correct)
    total = len(outcomes)
    clamped_time = max(0, min(int(time_spent_seconds), quiz.time_limit_seconds))

    return QuizResult(
        quiz_id=quiz.id,
        score_percent=percent_round_half_up(correct_count, total),
        correct_count=correct_count,
        total_questions=total,
        per_question=tuple(outcomes),
        time_spent_seconds=clamped_time,
        completed_at=completed_at,
        completion_reason=reason,
    )
