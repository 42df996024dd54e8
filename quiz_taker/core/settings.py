"""Client settings for talking to the school backend."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
import os

from quiz_taker.constants.network_constants import (
    API_URL_ENV_VAR,
    DEFAULT_API_BASE_URL,
    REQUEST_TIMEOUT_ENV_VAR,
    REQUEST_TIMEOUT_SECONDS,
    SUBMISSION_PATH_TEMPLATE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClientSettings:
    api_base_url: str = DEFAULT_API_BASE_URL
    submission_path_template: str = SUBMISSION_PATH_TEMPLATE
    request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS

    def submission_url(self, quiz_id: str) -> str:
        path = self.submission_path_template.format(quiz_id=quiz_id)
        return f"{self.api_base_url.rstrip('/')}{path}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientSettings:
        """Build settings, letting environment variables override the defaults."""
        env = os.environ if environ is None else environ
        base_url = env.get(API_URL_ENV_VAR, "").strip() or DEFAULT_API_BASE_URL
        timeout = REQUEST_TIMEOUT_SECONDS
        raw_timeout = env.get(REQUEST_TIMEOUT_ENV_VAR, "").strip()
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Ignoring non-numeric %s=%r", REQUEST_TIMEOUT_ENV_VAR, raw_timeout)
            else:
                if timeout <= 0:
                    logger.warning("Ignoring non-positive %s=%r", REQUEST_TIMEOUT_ENV_VAR, raw_timeout)
                    timeout = REQUEST_TIMEOUT_SECONDS
        return cls(api_base_url=base_url, request_timeout_seconds=timeout)
