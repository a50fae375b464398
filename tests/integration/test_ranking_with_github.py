"""Integration tests for the ranking engine over the GitHub provider."""

import random

import httpx
import pytest

from repo_spotlight import SpotlightError, SpotlightErrorKind, rank
from repo_spotlight.github import GitHubRepositoryProvider
from tests.helpers.fakes import RecordingSink, SleepRecorder


def _listing(owner: str, names: list[str], **flags: dict[str, bool]) -> list[dict]:
    return [
        {
            "name": name,
            "full_name": f"{owner}/{name}",
            "owner": {"login": owner},
            **flags.get(name, {}),
        }
        for name in names
    ]


class TestRankingOverGitHub:
    """End-to-end runs against a mocked GitHub API."""

    def test_paginated_listing_ranked(self) -> None:
        """Repositories across pages are filtered, fetched and ranked."""
        page2 = "https://api.github.com/users/octocat/repos?per_page=100&type=owner&page=2"
        traffic_paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path == "/users/octocat/repos":
                if request.url.params.get("page") == "2":
                    return httpx.Response(
                        200,
                        json=_listing(
                            "octocat", ["old", "dots"], old={"archived": True}
                        ),
                    )
                return httpx.Response(
                    200,
                    json=_listing("octocat", ["hello", "spoon"], spoon={"fork": True}),
                    headers={"Link": f'<{page2}>; rel="next"'},
                )
            traffic_paths.append(path)
            counts = {"hello": 42, "dots": 99}
            name = path.split("/")[3]
            return httpx.Response(200, json={"count": counts[name], "uniques": 1})

        sink = RecordingSink()
        with GitHubRepositoryProvider(
            "t", transport=httpx.MockTransport(handler)
        ) as provider:
            result = rank(
                provider,
                "octocat",
                {"limit": 5},
                sink=sink,
                sleep=SleepRecorder(),
                rng=random.Random(0),
            )

        assert [(e.name, e.views) for e in result] == [
            ("octocat/dots", 99),
            ("octocat/hello", 42),
        ]
        assert traffic_paths == [
            "/repos/octocat/hello/traffic/views",
            "/repos/octocat/dots/traffic/views",
        ]

    def test_missing_push_access_skipped(self) -> None:
        """A 403 on one repository is skipped with a warning."""

        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path.endswith("/repos"):
                return httpx.Response(200, json=_listing("me", ["theirs", "mine"]))
            if "/theirs/" in path:
                return httpx.Response(
                    403, json={"message": "Must have push access to repository"}
                )
            return httpx.Response(200, json={"count": 5, "uniques": 2})

        sink = RecordingSink()
        with GitHubRepositoryProvider(
            "t", transport=httpx.MockTransport(handler)
        ) as provider:
            result = rank(provider, "me", sink=sink, sleep=SleepRecorder())

        assert [e.name for e in result] == ["me/mine"]
        assert len(sink.warnings) == 1
        assert sink.warnings[0].startswith(
            "Skipped me/theirs: Authentication failed (403)"
        )

    def test_unknown_user_fails_with_status(self) -> None:
        """A 404 listing becomes a PROVIDER error carrying 404."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Not Found"})

        with GitHubRepositoryProvider(
            "t", transport=httpx.MockTransport(handler)
        ) as provider, pytest.raises(SpotlightError) as exc_info:
            rank(provider, "ghost", sleep=SleepRecorder(), sink=RecordingSink())

        assert exc_info.value.kind == SpotlightErrorKind.PROVIDER
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == (
            "Failed to fetch repositories: GitHub API error (404): Not Found"
        )

    def test_rate_limit_trips_breaker(self) -> None:
        """Repeated rate limiting aborts with the last status."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/repos"):
                return httpx.Response(200, json=_listing("me", ["a", "b", "c"]))
            return httpx.Response(
                429,
                json={"message": "secondary rate limit"},
                headers={"Retry-After": "30"},
            )

        with GitHubRepositoryProvider(
            "t", transport=httpx.MockTransport(handler)
        ) as provider, pytest.raises(SpotlightError) as exc_info:
            rank(provider, "me", sleep=SleepRecorder(), sink=RecordingSink())

        assert exc_info.value.message == "Too many consecutive errors (3)"
        assert exc_info.value.status_code == 429
