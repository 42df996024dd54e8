"""Loading quiz definitions delivered by the lesson/content service.

Payload shape (JSON, camelCase as served by the backend):

    {
      "_id": "65f0c0ffee",
      "title": "Fractions",
      "subject": "Maths",
      "description": "Optional blurb",
      "timeLimit": 20,
      "questions": [
        {"question": "What is $1/2 + 1/4$?", "options": ["3/4", "2/6"], "correctIndex": 0}
      ],
      "progress": {"attempts": 1, "bestScore": 50, "lastAttemptAt": "...", "isCompleted": false}
    }

Architecture note:
    The wire models are pydantic so that aliasing and type coercion live in
    one place. Domain invariants (non-empty quiz, correct index inside its own
    options) are checked after parsing and produce frozen dataclasses, so the
    session layer never sees a partially valid quiz.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from quiz_taker.constants.quiz_constants import (
    DEFAULT_SUBJECT,
    DEFAULT_TIME_LIMIT_MINUTES,
    MIN_OPTIONS_PER_QUESTION,
)
from quiz_taker.core.models import Quiz, QuizProgress, QuizQuestion


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


class QuestionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    question: str
    options: list[str]
    correct_index: int = Field(alias="correctIndex")


class ProgressPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    attempts: int = 0
    best_score: int = Field(default=0, alias="bestScore")
    last_attempt_at: datetime | None = Field(default=None, alias="lastAttemptAt")
    is_completed: bool = Field(default=False, alias="isCompleted")


class QuizPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    title: str
    description: str | None = None
    subject: str | None = None
    time_limit: int | None = Field(default=None, alias="timeLimit")
    questions: list[QuestionPayload]
    progress: ProgressPayload | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Mongo ids arrive either as strings or as {"$oid": "..."}.
        if isinstance(value, dict) and "$oid" in value:
            return str(value["$oid"])
        if isinstance(value, int):
            return str(value)
        return value


def load_quiz(payload: dict[str, Any]) -> Quiz:
    """Validate a decoded quiz payload and build the immutable quiz."""
    try:
        parsed = QuizPayload.model_validate(payload)
    except ValidationError as exc:
        raise QuizImportError(f"Quiz payload is malformed: {exc}") from exc
    return _build_quiz(parsed)


def load_quiz_from_file(file_path: Path) -> Quiz:
    text = file_path.read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuizImportError(f"{file_path.name} is not valid JSON.") from exc
    if not isinstance(payload, dict):
        raise QuizImportError("Quiz file must contain a JSON object.")
    return load_quiz(payload)


def _build_quiz(parsed: QuizPayload) -> Quiz:
    title = parsed.title.strip()
    if not title:
        raise QuizImportError("Quiz title must not be empty.")
    if not parsed.questions:
        raise QuizImportError("Quiz must contain at least one question.")

    questions = tuple(
        _build_question(index, question) for index, question in enumerate(parsed.questions)
    )
    subject = (parsed.subject or "").strip() or DEFAULT_SUBJECT

    return Quiz(
        id=parsed.id,
        title=title,
        questions=questions,
        time_limit_minutes=_normalize_time_limit(parsed.time_limit),
        subject=subject,
        description=parsed.description,
        progress=_build_progress(parsed.progress),
    )


def _build_question(index: int, payload: QuestionPayload) -> QuizQuestion:
    text = payload.question.strip()
    if not text:
        raise QuizImportError(f"Question {index + 1} has no text.")
    options = tuple(option.strip() for option in payload.options)
    if len(options) < MIN_OPTIONS_PER_QUESTION:
        raise QuizImportError(
            f"Question {index + 1} must offer at least {MIN_OPTIONS_PER_QUESTION} options."
        )
    if any(not option for option in options):
        raise QuizImportError(f"Question {index + 1} has an empty option.")
    if not 0 <= payload.correct_index < len(options):
        raise QuizImportError(
            f"Question {index + 1} marks option {payload.correct_index} as correct "
            f"but only has {len(options)} options."
        )
    return QuizQuestion(
        index=index,
        text=text,
        options=options,
        correct_option_index=payload.correct_index,
    )


def _normalize_time_limit(time_limit: int | None) -> int:
    # A missing or zero limit falls back to the default, as the backend treats it as unset.
    if not time_limit:
        return DEFAULT_TIME_LIMIT_MINUTES
    if time_limit < 0:
        raise QuizImportError("Time limit must be a positive number of minutes.")
    return time_limit


def _build_progress(payload: ProgressPayload | None) -> QuizProgress | None:
    if payload is None:
        return None
    return QuizProgress(
        attempts=payload.attempts,
        best_score=payload.best_score,
        last_attempt_at=payload.last_attempt_at,
        is_completed=payload.is_completed,
    )
