"""Command-line entry point: score a stored quiz attempt and optionally sync it."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import json
from pathlib import Path
import sys

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quiz_taker.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quiz_taker.core.errors import CallerMisuseError, SubmissionError
from quiz_taker.core.models import QuizResult, format_clock
from quiz_taker.core.quiz_importer import QuizImportError, load_quiz_from_file
from quiz_taker.core.services.answer_tracker import AnswerTracker
from quiz_taker.core.services.scoring import score_quiz
from quiz_taker.core.services.submission_gateway import (
    SubmissionGateway,
    build_submission_request,
)
from quiz_taker.core.settings import ClientSettings
from quiz_taker.utils.logging_config import configure_logging


class StoredAttempt(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    answers: dict[int, int] = Field(default_factory=dict)
    time_spent_seconds: int = Field(default=0, alias="timeSpentSeconds")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME.lower(), description=APP_ABOUT_TEXT)
    parser.add_argument("quiz", type=Path, help="Quiz definition JSON file")
    parser.add_argument("attempt", type=Path, help="Attempt JSON: {answers: {index: option}, timeSpentSeconds}")
    parser.add_argument("--submit", action="store_true", help="Post the result to the progress service")
    parser.add_argument("--token", default=None, help="Bearer token used with --submit")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def _load_attempt(path: Path) -> StoredAttempt:
    try:
        return StoredAttempt.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise QuizImportError(f"{path.name} is not a valid attempt file: {exc}") from exc


def _print_result(result: QuizResult) -> None:
    print(f"Score: {result.score_percent}% ({result.correct_count}/{result.total_questions} correct)")
    print(f"Time taken: {format_clock(result.time_spent_seconds)}")
    for outcome in result.per_question:
        mark = "correct" if outcome.is_correct else "wrong"
        selected = "-" if outcome.selected_option_index is None else outcome.selected_option_index
        print(f"  Q{outcome.question_index + 1}: {selected} ({mark})")


def main(argv: list[str] | None = None) -> int:
    logger = configure_logging()
    args = _build_parser().parse_args(argv)

    try:
        quiz = load_quiz_from_file(args.quiz)
        attempt = _load_attempt(args.attempt)
        tracker = AnswerTracker(quiz)
        for question_index, option_index in attempt.answers.items():
            tracker.record(question_index, option_index)
    except (OSError, QuizImportError, CallerMisuseError) as exc:
        logger.error("%s", exc)
        return 2

    result = score_quiz(
        quiz,
        tracker.snapshot(),
        time_spent_seconds=attempt.time_spent_seconds,
        completed_at=datetime.now(timezone.utc),
    )
    _print_result(result)

    if args.submit:
        gateway = SubmissionGateway(settings=ClientSettings.from_env(), run_in_background=False)
        try:
            outcome = gateway.send(build_submission_request(result, quiz.id), args.token)
        except SubmissionError as exc:
            logger.error("Submission failed: %s", exc)
            return 1
        logger.info("Submitted; server score %s", outcome.server_score)
    return 0


if __name__ == "__main__":
    sys.exit(main())
