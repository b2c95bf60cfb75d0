"""Custom exception classes for the GitHub client."""

from datetime import datetime
from typing import Optional


class GitHubError(Exception):
    """Base exception for all client errors.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class NetworkError(GitHubError):
    """Raised when the HTTP transport fails."""


class ResponseError(GitHubError):
    """Raised when the API answers with a non-success status.

    Attributes:
        status_code: HTTP status code of the response.
    """

    def __init__(self, message: str, status_code: int) -> None:
        """Initialize the exception.

        Args:
            message: Error message, usually the API's ``message`` field.
            status_code: HTTP status code of the response.
        """
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code


class RateLimitError(GitHubError):
    """Raised when the API request quota is exhausted."""

    def __init__(self, limit: int, reset: Optional[datetime], duration: str) -> None:
        """Initialize the exception.

        Args:
            limit: Request quota of the current window.
            reset: When the quota resets.
            duration: Human-readable time until the reset.
        """
        super().__init__(f"ratelimit of {limit} requests exceeded, resets in {duration}")
        self.limit = limit
        self.reset = reset


class ParseError(GitHubError):
    """Raised when a version constraint is not a valid semver range."""

    def __init__(self, constraint: str) -> None:
        super().__init__(f"Invalid semver range: {constraint!r}")
        self.constraint = constraint
