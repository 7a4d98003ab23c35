"""Exception types raised by the notifier's external clients."""

from __future__ import annotations


class NotifierError(Exception):
    """Base class for notifier failures."""


class GitHubApiError(NotifierError):
    """Raised when a GitHub REST call fails or returns a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
