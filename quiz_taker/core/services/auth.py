"""Seam to the authentication provider that owns the bearer token."""

from __future__ import annotations

from typing import Protocol


class AuthProvider(Protocol):
    def get_token(self) -> str | None: ...

    def is_token_valid(self, token: str) -> bool: ...


class StaticTokenProvider:
    """Hands out a fixed token. Used by the CLI and in tests."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        return self._token

    def is_token_valid(self, token: str) -> bool:
        return bool(token and token.strip())
