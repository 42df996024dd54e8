"""Quiz-related constants shared across the session and scoring layers."""

DEFAULT_TIME_LIMIT_MINUTES: int = 20
DEFAULT_SUBJECT: str = "General"
SECONDS_PER_MINUTE: int = 60
MIN_OPTIONS_PER_QUESTION: int = 2
TIMER_TICK_INTERVAL_MS: int = 1000
UNANSWERED_WIRE_VALUE: int = -1
