"""Static metadata describing QuizTaker."""

APP_NAME = "QuizTaker"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "QuizTaker runs timed multiple-choice quizzes for students: it tracks answers, "
    "counts down the time limit, scores the attempt locally and syncs the result to the school backend."
)
