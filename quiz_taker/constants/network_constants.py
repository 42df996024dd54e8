"""Network configuration constants for the submission client."""

DEFAULT_API_BASE_URL: str = "http://localhost:4000"
SUBMISSION_PATH_TEMPLATE: str = "/api/student/quizzes/{quiz_id}/submit"
REQUEST_TIMEOUT_SECONDS: float = 10.0
API_URL_ENV_VAR: str = "QUIZ_TAKER_API_URL"
REQUEST_TIMEOUT_ENV_VAR: str = "QUIZ_TAKER_REQUEST_TIMEOUT"
