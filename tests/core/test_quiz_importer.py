"""Tests for loading quiz payloads from the content service."""

import json

import pytest

from conftest import quiz_payload
from quiz_taker.core.models import QuizProgress
from quiz_taker.core.quiz_importer import QuizImportError, load_quiz, load_quiz_from_file


class TestLoadQuiz:
    def test_maps_backend_fields(self):
        quiz = load_quiz(quiz_payload())

        assert quiz.id == "quiz-1"
        assert quiz.title == "Fractions"
        assert quiz.subject == "Maths"
        assert quiz.time_limit_minutes == 20
        assert quiz.time_limit_seconds == 1200
        assert quiz.question_count == 4
        assert [q.correct_option_index for q in quiz.questions] == [1, 0, 2, 1]
        assert [q.index for q in quiz.questions] == [0, 1, 2, 3]
        assert quiz.questions[0].options == ("alpha", "beta", "gamma", "delta")

    @pytest.mark.parametrize("time_limit", [None, 0])
    def test_missing_time_limit_defaults_to_twenty_minutes(self, time_limit):
        payload = quiz_payload()
        payload["timeLimit"] = time_limit
        assert load_quiz(payload).time_limit_minutes == 20

    def test_missing_subject_defaults_to_general(self):
        payload = quiz_payload()
        del payload["subject"]
        assert load_quiz(payload).subject == "General"

    def test_mongo_style_id_is_flattened(self):
        payload = quiz_payload()
        payload["_id"] = {"$oid": "65f0c0ffee"}
        assert load_quiz(payload).id == "65f0c0ffee"

    def test_progress_block_is_read_only_summary(self):
        payload = quiz_payload()
        payload["progress"] = {
            "attempts": 2,
            "bestScore": 75,
            "lastAttemptAt": None,
            "isCompleted": True,
        }
        quiz = load_quiz(payload)
        assert quiz.progress == QuizProgress(attempts=2, best_score=75, is_completed=True)

    def test_extra_backend_fields_are_ignored(self):
        payload = quiz_payload()
        payload["teacherId"] = "t-1"
        payload["maxAttempts"] = 3
        assert load_quiz(payload).question_count == 4


class TestLoadQuizRejects:
    def test_empty_question_list(self):
        payload = quiz_payload()
        payload["questions"] = []
        with pytest.raises(QuizImportError, match="at least one question"):
            load_quiz(payload)

    def test_correct_index_outside_own_options(self):
        payload = quiz_payload()
        payload["questions"][2]["options"] = ["only", "two"]
        with pytest.raises(QuizImportError, match="Question 3"):
            load_quiz(payload)

    def test_negative_correct_index(self):
        payload = quiz_payload()
        payload["questions"][0]["correctIndex"] = -1
        with pytest.raises(QuizImportError):
            load_quiz(payload)

    def test_single_option_question(self):
        payload = quiz_payload()
        payload["questions"][0]["options"] = ["lonely"]
        payload["questions"][0]["correctIndex"] = 0
        with pytest.raises(QuizImportError, match="at least 2 options"):
            load_quiz(payload)

    def test_blank_option(self):
        payload = quiz_payload()
        payload["questions"][1]["options"][3] = "   "
        with pytest.raises(QuizImportError, match="empty option"):
            load_quiz(payload)

    def test_negative_time_limit(self):
        payload = quiz_payload()
        payload["timeLimit"] = -5
        with pytest.raises(QuizImportError, match="positive"):
            load_quiz(payload)

    def test_missing_required_field(self):
        payload = quiz_payload()
        del payload["title"]
        with pytest.raises(QuizImportError, match="malformed"):
            load_quiz(payload)


class TestLoadQuizFromFile:
    def test_reads_json_file(self, tmp_path):
        path = tmp_path / "quiz.json"
        path.write_text(json.dumps(quiz_payload()), encoding="utf-8")
        assert load_quiz_from_file(path).title == "Fractions"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "quiz.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(QuizImportError, match="not valid JSON"):
            load_quiz_from_file(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "quiz.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(QuizImportError, match="JSON object"):
            load_quiz_from_file(path)
