"""Best-effort sync of a finished quiz result to the progress service.

The gateway never blocks the caller: ``submit`` hands the request to a daemon
worker thread and returns. The outcome comes back through the ``finished``
signal, which Qt delivers on the receiver's thread. Every failure stops here;
nothing raised while talking to the server reaches the session or changes
the result the student already sees.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import threading
from typing import Any

from PySide6.QtCore import QObject, Signal
from pydantic import BaseModel, ConfigDict, Field, ValidationError
import requests

from quiz_taker.constants.quiz_constants import UNANSWERED_WIRE_VALUE
from quiz_taker.core.errors import (
    AuthExpiredError,
    SubmissionError,
    SubmissionRejectedError,
    TransportError,
)
from quiz_taker.core.models import QuizResult, SubmissionOutcome
from quiz_taker.core.settings import ClientSettings

logger = logging.getLogger(__name__)


class SubmittedAnswerPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_index: int = Field(alias="questionIndex")
    selected_answer: int = Field(alias="selectedAnswer")
    correct_answer: int = Field(alias="correctAnswer")


class SubmissionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    quiz_id: str = Field(alias="quizId")
    answers: list[SubmittedAnswerPayload]
    time_spent_seconds: int = Field(alias="timeSpentSeconds")


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # The progress service omits "success" on its happy path.
    success: bool = True
    error: str | None = None
    message: str | None = None
    score: int | None = None
    is_passed: bool | None = Field(default=None, alias="isPassed")
    correct_answers: int | None = Field(default=None, alias="correctAnswers")
    total_questions: int | None = Field(default=None, alias="totalQuestions")


def build_submission_request(result: QuizResult, quiz_id: str) -> SubmissionRequest:
    """Translate a scored result into the wire payload, one entry per question."""
    answers = [
        SubmittedAnswerPayload(
            question_index=outcome.question_index,
            selected_answer=(
                UNANSWERED_WIRE_VALUE
                if outcome.selected_option_index is None
                else outcome.selected_option_index
            ),
            correct_answer=outcome.correct_option_index,
        )
        for outcome in result.per_question
    ]
    return SubmissionRequest(
        quiz_id=quiz_id,
        answers=answers,
        time_spent_seconds=result.time_spent_seconds,
    )


class SubmissionGateway(QObject):
    """Posts results to the backend without holding up the caller."""

    finished = Signal(object)

    def __init__(
        self,
        settings: ClientSettings | None = None,
        http_session: requests.Session | None = None,
        run_in_background: bool = True,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or ClientSettings()
        self._http = http_session or requests.Session()
        self._run_in_background = run_in_background

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def submit(self, result: QuizResult, quiz_id: str, auth_token: str | None) -> None:
        """Fire one submission and return immediately."""
        request = build_submission_request(result, quiz_id)
        if not self._run_in_background:
            self._deliver(request, auth_token, result)
            return
        worker = threading.Thread(
            target=self._deliver,
            args=(request, auth_token, result),
            name=f"quiz-submission-{quiz_id}",
            daemon=True,
        )
        worker.start()

    def send(self, request: SubmissionRequest, auth_token: str | None) -> SubmissionOutcome:
        """Perform the HTTP call synchronously. Raises ``SubmissionError`` subclasses."""
        if not auth_token:
            raise AuthExpiredError("Authentication required")

        url = self._settings.submission_url(request.quiz_id)
        try:
            response = self._http.post(
                url,
                json=request.model_dump(by_alias=True),
                headers={
                    "Authorization": f"Bearer {auth_token}",
                    "Content-Type": "application/json",
                },
                timeout=self._settings.request_timeout_seconds,
            )
        except requests.Timeout as exc:
            raise TransportError(f"Network timeout posting to {url}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"Network error posting to {url}: {exc}") from exc

        body = _decode_body(response)
        if not response.ok:
            message = _error_message(body, response.status_code)
            if response.status_code == 401 or (
                response.status_code == 403 and "token" in message.lower()
            ):
                raise AuthExpiredError(message)
            raise SubmissionRejectedError(message)

        try:
            parsed = SubmissionResponse.model_validate(body)
        except ValidationError:
            logger.warning("Unexpected submission response body for quiz %s", request.quiz_id)
            parsed = SubmissionResponse()
        if not parsed.success:
            raise SubmissionRejectedError(parsed.error or parsed.message or "Submission rejected")

        return SubmissionOutcome(
            quiz_id=request.quiz_id,
            success=True,
            server_score=parsed.score,
            is_passed=parsed.is_passed,
        )

    def _deliver(
        self, request: SubmissionRequest, auth_token: str | None, result: QuizResult | None = None
    ) -> None:
        try:
            outcome = self.send(request, auth_token)
        except AuthExpiredError as exc:
            logger.warning("Quiz %s not synced, authentication failed: %s", request.quiz_id, exc)
            outcome = SubmissionOutcome(quiz_id=request.quiz_id, success=False, error=str(exc))
        except SubmissionError as exc:
            logger.error("Failed to submit quiz %s: %s", request.quiz_id, exc)
            outcome = SubmissionOutcome(quiz_id=request.quiz_id, success=False, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error submitting quiz %s", request.quiz_id)
            outcome = SubmissionOutcome(
                quiz_id=request.quiz_id, success=False, error=f"Unexpected error: {exc}"
            )
        else:
            logger.info(
                "Quiz %s synced (server score: %s)", request.quiz_id, outcome.server_score
            )
        self.finished.emit(replace(outcome, result=result))


def _decode_body(response: requests.Response) -> dict[str, Any]:
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(body: dict[str, Any], status_code: int) -> str:
    return str(body.get("message") or body.get("error") or f"Request failed with {status_code}")
