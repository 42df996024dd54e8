"""Accessibility announcements for session transitions."""

from __future__ import annotations

import logging
from typing import Protocol

from quiz_taker.constants.narration_constants import (
    ANSWER_SELECTED_TEMPLATE,
    QUIZ_COMPLETED_TEMPLATE,
    QUIZ_STARTED_ANNOUNCEMENT,
    TIME_EXPIRED_ANNOUNCEMENT,
)
from quiz_taker.core.markdown_text_renderer import renderer
from quiz_taker.core.models import CompletionReason, QuizQuestion, QuizResult

logger = logging.getLogger(__name__)


class Narrator(Protocol):
    def announce(self, text: str) -> None: ...


class LoggingNarrator:
    """Default narrator when no speech service is attached."""

    def announce(self, text: str) -> None:
        logger.info("Narration: %s", text)


def session_started_text() -> str:
    return QUIZ_STARTED_ANNOUNCEMENT


def answer_selected_text(question: QuizQuestion, option_index: int) -> str:
    option = renderer.to_plain_text(question.options[option_index])
    return ANSWER_SELECTED_TEMPLATE.format(number=option_index + 1, option=option)


def completion_text(result: QuizResult) -> str:
    text = QUIZ_COMPLETED_TEMPLATE.format(score=result.score_percent)
    if result.completion_reason is CompletionReason.TIME_EXPIRED:
        return f"{TIME_EXPIRED_ANNOUNCEMENT} {text}"
    return text
