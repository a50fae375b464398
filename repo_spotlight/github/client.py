"""GitHub REST implementation of the repository data provider."""

import json
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from repo_spotlight.github.constants import (
    AUTH_ERROR_HINT,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    GITHUB_API_BASE_URL,
    GITHUB_API_VERSION,
    GITHUB_AUTHENTICATED_REPOS_PATH,
    GITHUB_MAX_PER_PAGE,
    GITHUB_TRAFFIC_VIEWS_PATH,
    GITHUB_USER_REPOS_PATH,
    HEADER_RATELIMIT_REMAINING,
    HEADER_RETRY_AFTER,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    HTTP_STATUS_UNAUTHORIZED,
    MAX_PAGES,
)
from repo_spotlight.github.errors import GitHubAPIError
from repo_spotlight.github.redact import redact_headers
from repo_spotlight.provider import RepositorySummary, TrafficSample


logger = structlog.get_logger()


class GitHubRepositoryProvider:
    """Repository provider backed by the GitHub REST API.

    Lists repositories with Link-header pagination and fetches the
    14-day view traffic of individual repositories. Requests are issued
    one at a time; pacing is the ranking engine's concern.

    API documentation: https://docs.github.com/en/rest/metrics/traffic
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = GITHUB_API_BASE_URL,
        authenticated_listing: bool = False,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            token: GitHub token used as a Bearer credential.
            base_url: API root URL.
            authenticated_listing: List the token owner's repositories
                (including private ones) instead of the subject's public ones.
            timeout_seconds: Per-request timeout.
            user_agent: User-Agent header value.
            transport: Optional httpx transport, for testing.
        """
        self._authenticated_listing = authenticated_listing
        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": user_agent,
            "Authorization": f"Bearer {token}",
        }
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=self._headers,
            timeout=timeout_seconds,
            follow_redirects=True,
            transport=transport,
        )
        self._log = logger.bind(component="github")

    def __enter__(self) -> "GitHubRepositoryProvider":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def list_repositories(self, subject: str) -> list[RepositorySummary]:
        """List every repository owned by a subject.

        Follows ``Link: rel="next"`` until the listing is exhausted.

        Args:
            subject: User or organization login.

        Returns:
            Repositories in listing order.

        Raises:
            GitHubAPIError: If any page fails or is malformed.
        """
        if self._authenticated_listing:
            path = GITHUB_AUTHENTICATED_REPOS_PATH
            params: dict[str, str | int] = {
                "per_page": GITHUB_MAX_PER_PAGE,
                "affiliation": "owner",
                "visibility": "all",
            }
        else:
            path = GITHUB_USER_REPOS_PATH.format(subject=_path_segment(subject))
            params = {"per_page": GITHUB_MAX_PER_PAGE, "type": "owner"}

        repos: list[RepositorySummary] = []
        url: str | None = path
        page_params: dict[str, str | int] | None = params
        pages = 0

        while url and pages < MAX_PAGES:
            response = self._get(url, page_params)
            pages += 1
            payload = _decode_json(response)
            if not isinstance(payload, list):
                msg = f"Expected array of repositories from {response.url}"
                raise GitHubAPIError(msg, response.status_code)

            repos.extend(_parse_repository(raw) for raw in payload)

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            page_params = None

        self._log.debug(
            "repositories_listed",
            subject=subject,
            count=len(repos),
            pages=pages,
        )
        return repos

    def get_traffic(self, owner: str, name: str) -> TrafficSample:
        """Fetch view traffic for one repository.

        Args:
            owner: Repository owner login.
            name: Repository name.

        Returns:
            Traffic sample with total and unique views.

        Raises:
            GitHubAPIError: If the request fails or is malformed.
        """
        path = GITHUB_TRAFFIC_VIEWS_PATH.format(
            owner=_path_segment(owner), name=_path_segment(name)
        )
        response = self._get(path)
        payload = _decode_json(response)
        try:
            return TrafficSample.model_validate(payload)
        except ValidationError as e:
            msg = f"Malformed traffic response for {owner}/{name}: {e.error_count()} errors"
            raise GitHubAPIError(msg, response.status_code) from e

    def _get(
        self, url: str, params: dict[str, str | int] | None = None
    ) -> httpx.Response:
        """Issue a GET request and raise on non-2xx.

        Args:
            url: Path relative to the base URL, or an absolute URL.
            params: Query parameters.

        Returns:
            Successful response.
        """
        self._log.debug("github_request", url=url, headers=redact_headers(self._headers))
        try:
            response = self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            msg = f"Request timed out: {e}"
            raise GitHubAPIError(msg) from e
        except httpx.HTTPError as e:
            msg = f"Connection failed: {e}"
            raise GitHubAPIError(msg) from e

        if HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            return response

        raise _classify_http_error(response)


def _classify_http_error(response: httpx.Response) -> GitHubAPIError:
    """Build a GitHubAPIError from a failed response.

    Args:
        response: Non-2xx response.

    Returns:
        Error carrying status, message and Retry-After.
    """
    status = response.status_code
    api_message = _api_message(response)
    retry_after = _parse_retry_after(response.headers.get(HEADER_RETRY_AFTER))

    rate_limited = status == HTTP_STATUS_TOO_MANY_REQUESTS or (
        status == HTTP_STATUS_FORBIDDEN
        and response.headers.get(HEADER_RATELIMIT_REMAINING) == "0"
    )
    if rate_limited:
        msg = f"Rate limited ({status}): {api_message}"
    elif status in (HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN):
        msg = f"Authentication failed ({status}): {api_message}. {AUTH_ERROR_HINT}"
    else:
        msg = f"GitHub API error ({status}): {api_message}"

    return GitHubAPIError(msg, status_code=status, retry_after=retry_after)


def _api_message(response: httpx.Response) -> str:
    """Extract GitHub's error message from a response body."""
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.reason_phrase or "Unknown error"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase or "Unknown error"


def _decode_json(response: httpx.Response) -> Any:
    """Decode a JSON body, raising GitHubAPIError on garbage."""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = f"Failed to parse JSON response from {response.url}: {e}"
        raise GitHubAPIError(msg, response.status_code) from e


def _parse_repository(raw: Any) -> RepositorySummary:
    """Parse one repository object from the listing.

    Args:
        raw: Repository JSON object.

    Returns:
        RepositorySummary.
    """
    if not isinstance(raw, dict):
        msg = "Expected repository object in listing"
        raise GitHubAPIError(msg)

    owner = raw.get("owner") or {}
    try:
        return RepositorySummary(
            owner=owner.get("login", ""),
            name=raw.get("name", ""),
            full_name=raw.get("full_name", ""),
            fork=bool(raw.get("fork", False)),
            archived=bool(raw.get("archived", False)),
        )
    except ValidationError as e:
        msg = f"Malformed repository in listing: {raw.get('full_name') or raw.get('id')}"
        raise GitHubAPIError(msg) from e


def _parse_retry_after(value: str | None) -> int | None:
    """Parse Retry-After header value.

    Args:
        value: Header value (seconds or HTTP date).

    Returns:
        Seconds to wait, or None if not parseable.
    """
    if not value:
        return None

    try:
        return int(value)
    except ValueError:
        pass

    try:
        dt = parsedate_to_datetime(value)
        delta = dt - datetime.now(UTC)
        return max(0, int(delta.total_seconds()))
    except (ValueError, TypeError):
        pass

    return None


def _path_segment(value: str) -> str:
    """Percent-encode a value for use as a single URL path segment."""
    if value in (".", ".."):
        # Dot segments would otherwise be resolved away by URL normalization
        return value.replace(".", "%2E")
    return quote(value, safe="")
