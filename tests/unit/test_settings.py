"""Unit tests for environment settings resolution."""

from pathlib import Path

import pytest

from repo_spotlight.settings import AppSettings
from tests.helpers.env import clear_spotlight_env


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Clear spotlight variables and keep any local .env out of reach."""
    clear_spotlight_env(monkeypatch)
    monkeypatch.chdir(tmp_path)


class TestTokenResolution:
    """Tests for token precedence."""

    def test_no_token(self) -> None:
        """Nothing configured resolves to None."""
        assert AppSettings().resolve_token() is None

    def test_flag_used_when_env_unset(self) -> None:
        """The flag is used when no variable is set."""
        assert AppSettings().resolve_token("flag-token") == "flag-token"

    def test_dedicated_token_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GH_SPOTLIGHT_TOKEN beats every other source."""
        monkeypatch.setenv("GH_SPOTLIGHT_TOKEN", "dedicated")
        monkeypatch.setenv("GITHUB_TOKEN", "workflow")
        monkeypatch.setenv("INPUT_TOKEN", "input")

        assert AppSettings().resolve_token("flag-token") == "dedicated"

    def test_github_token_beats_input(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GITHUB_TOKEN beats the pipeline input and the flag."""
        monkeypatch.setenv("GITHUB_TOKEN", "workflow")
        monkeypatch.setenv("INPUT_TOKEN", "input")

        assert AppSettings().resolve_token("flag-token") == "workflow"

    def test_blank_variable_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Blank variables count as unset."""
        monkeypatch.setenv("GH_SPOTLIGHT_TOKEN", "")
        monkeypatch.setenv("INPUT_TOKEN", "input")

        assert AppSettings().resolve_token() == "input"


class TestSubjectResolution:
    """Tests for subject precedence."""

    def test_flag_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The --user flag beats the environment."""
        monkeypatch.setenv("GITHUB_USER", "env-user")

        assert AppSettings().resolve_subject("flag-user") == "flag-user"

    def test_github_user_then_actor(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GITHUB_USER beats GITHUB_ACTOR."""
        monkeypatch.setenv("GITHUB_USER", "env-user")
        monkeypatch.setenv("GITHUB_ACTOR", "actor")

        assert AppSettings().resolve_subject() == "env-user"

    def test_actor_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GITHUB_ACTOR is the last resort."""
        monkeypatch.setenv("GITHUB_ACTOR", "actor")

        assert AppSettings().resolve_subject() == "actor"

    def test_nothing_configured(self) -> None:
        """No subject resolves to None."""
        assert AppSettings().resolve_subject("  ") is None


class TestConfigValues:
    """Tests for ranking option precedence."""

    def test_flags_only(self) -> None:
        """Flags are used when no variable is set; None flags are omitted."""
        values = AppSettings().resolve_config_values(
            {"delay": "200", "limit": None, "include_forks": True}
        )

        assert values == {"delay": "200", "include_forks": True}

    def test_input_beats_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Pipeline inputs beat flags."""
        monkeypatch.setenv("INPUT_LIMIT", "8")

        values = AppSettings().resolve_config_values({"limit": "3"})

        assert values["limit"] == "8"

    def test_override_beats_input(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """SPOTLIGHT_* overrides beat pipeline inputs."""
        monkeypatch.setenv("SPOTLIGHT_DELAY", "1000")
        monkeypatch.setenv("INPUT_DELAY", "500")

        values = AppSettings().resolve_config_values({"delay": "200"})

        assert values["delay"] == "1000"

    def test_min_views_spellings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Both MIN_VIEWS and MINVIEWS variable spellings are read."""
        monkeypatch.setenv("INPUT_MINVIEWS", "12")

        assert AppSettings().resolve_config_values()["min_views"] == "12"

    def test_blank_inputs_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Blank Actions inputs fall through to the flag."""
        monkeypatch.setenv("INPUT_INCLUDE_ARCHIVED", "")

        values = AppSettings().resolve_config_values({"include_archived": False})

        assert values["include_archived"] is False


class TestActionsDetection:
    """Tests for GitHub Actions detection."""

    def test_not_in_actions(self) -> None:
        """Without GITHUB_ACTIONS the runner is not detected."""
        assert AppSettings().is_github_actions is False

    def test_in_actions(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GITHUB_ACTIONS=true is detected."""
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        monkeypatch.setenv("GITHUB_OUTPUT", "/tmp/out")  # noqa: S108

        settings = AppSettings()

        assert settings.is_github_actions is True
        assert settings.github_output == "/tmp/out"  # noqa: S108
