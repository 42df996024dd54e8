"""Tests for the per-attempt facade."""

from unittest.mock import MagicMock

from conftest import MANUAL_TICK_INTERVAL_MS, quiz_payload
from quiz_taker.core.models import SessionStatus
from quiz_taker.core.quiz_importer import load_quiz
from quiz_taker.core.quiz_manager import QuizManager
from quiz_taker.core.services.submission_gateway import SubmissionGateway


def test_each_attempt_gets_a_fresh_session(quiz, narrator):
    manager = QuizManager(quiz, narrator=narrator)

    first = manager.begin_attempt(timer_interval_ms=MANUAL_TICK_INTERVAL_MS)
    first.start()
    first.select_answer(0, 1)
    first.submit()

    second = manager.begin_attempt(timer_interval_ms=MANUAL_TICK_INTERVAL_MS)

    assert second is not first
    assert second.status is SessionStatus.NOT_STARTED
    assert second.answers == {}
    assert first.is_disposed()
    assert first.get_result() is not None
    assert manager.attempts_started == 2
    manager.end_attempt()


def test_leaving_mid_attempt_abandons_it(quiz, narrator):
    gateway = MagicMock(spec=SubmissionGateway)
    manager = QuizManager(quiz, gateway=gateway, narrator=narrator)
    session = manager.begin_attempt(timer_interval_ms=MANUAL_TICK_INTERVAL_MS)
    session.start()

    manager.end_attempt()

    assert manager.current_session is None
    assert session.is_disposed()
    assert session.get_result() is None
    gateway.submit.assert_not_called()


def test_end_attempt_without_session_is_noop(quiz):
    manager = QuizManager(quiz)
    manager.end_attempt()
    assert manager.current_session is None


def test_exposes_backend_progress_read_only():
    payload = quiz_payload()
    payload["progress"] = {"attempts": 3, "bestScore": 80, "isCompleted": True}
    manager = QuizManager(load_quiz(payload))
    assert manager.progress.best_score == 80
    assert manager.progress.attempts == 3
