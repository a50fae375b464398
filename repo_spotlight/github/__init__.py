"""GitHub REST repository provider."""

from repo_spotlight.github.client import GitHubRepositoryProvider
from repo_spotlight.github.errors import GitHubAPIError
from repo_spotlight.github.redact import redact_headers


__all__ = [
    "GitHubAPIError",
    "GitHubRepositoryProvider",
    "redact_headers",
]
