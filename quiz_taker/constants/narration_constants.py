"""Plain-text announcements handed to the accessibility narrator."""

QUIZ_STARTED_ANNOUNCEMENT: str = "Quiz started. Good luck!"
ANSWER_SELECTED_TEMPLATE: str = "Selected option {number}: {option}"
QUIZ_COMPLETED_TEMPLATE: str = "Quiz completed! Your score is {score}%."
TIME_EXPIRED_ANNOUNCEMENT: str = "Time is up. Your answers have been submitted."
NOT_ANSWERED_LABEL: str = "Not answered"
