"""Shared admin password check for privileged operations."""

from __future__ import annotations

from hostelmart.domain.exceptions import AuthenticationError


class AdminGuard:

    def __init__(self, password: str) -> None:
        self._password = password

    def check(self, given: object) -> None:
        if not isinstance(given, str) or given != self._password:
            raise AuthenticationError("Wrong admin password")
