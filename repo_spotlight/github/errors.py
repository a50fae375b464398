"""Errors raised by the GitHub repository provider."""

from repo_spotlight.github.constants import (
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_UNAUTHORIZED,
)


class GitHubAPIError(Exception):
    """Raised when a GitHub API request fails.

    Carries the HTTP status when a response was received, so the ranking
    engine can surface it to callers.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after: int | None = None,
    ) -> None:
        """Initialize the API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code, if a response was received.
            retry_after: Retry-After seconds, if the server sent one.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retry_after = retry_after

    @property
    def is_auth_error(self) -> bool:
        """Check if this is a 401/403 authentication error."""
        return self.status_code in (HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN)
