import json
import os

# Qt needs a platform plugin even for QtCore-only tests on headless machines.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
import requests

from quiz_taker.core.quiz_importer import load_quiz


# Long enough that the real QTimer never fires while a test drives ticks by hand.
MANUAL_TICK_INTERVAL_MS = 3_600_000


def quiz_payload(correct_indices=(1, 0, 2, 1), time_limit=20, quiz_id="quiz-1"):
    return {
        "_id": quiz_id,
        "title": "Fractions",
        "subject": "Maths",
        "timeLimit": time_limit,
        "questions": [
            {
                "question": f"Question **{i + 1}**",
                "options": ["alpha", "beta", "gamma", "delta"],
                "correctIndex": correct,
            }
            for i, correct in enumerate(correct_indices)
        ],
    }


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class RecordingNarrator:
    def __init__(self) -> None:
        self.announcements: list[str] = []

    def announce(self, text: str) -> None:
        self.announcements.append(text)


def tick(session, clock: FakeClock, times: int = 1) -> None:
    """Advance the countdown of a session by whole seconds."""
    for _ in range(times):
        clock.advance(1.0)
        session._timer._on_tick()


def make_response(status: int, body=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    if body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json; charset=utf-8"
    return response


@pytest.fixture(autouse=True)
def _qt_app(qapp):
    """Every test gets a Qt application so QTimer and signals work."""
    return qapp


@pytest.fixture
def quiz():
    """Four questions whose correct options are 1, 0, 2, 1; 20 minute limit."""
    return load_quiz(quiz_payload())


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def narrator():
    return RecordingNarrator()
