"""Application settings powered by Pydantic BaseSettings."""

from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Configuration keys, in the order they are reported
CONFIG_KEYS: tuple[str, ...] = (
    "delay",
    "limit",
    "min_views",
    "include_forks",
    "include_archived",
)

AUTHENTICATED_USER_LABEL = "authenticated user"


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Precedence for ranking options is: explicit ``SPOTLIGHT_*`` override,
    then the pipeline input (``INPUT_*``, as GitHub Actions exposes step
    inputs), then the command-line flag, then the built-in default.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gh_spotlight_token: str | None = Field(
        default=None, validation_alias="GH_SPOTLIGHT_TOKEN"
    )
    github_token: str | None = Field(default=None, validation_alias="GITHUB_TOKEN")
    input_token: str | None = Field(default=None, validation_alias="INPUT_TOKEN")

    github_user: str | None = Field(default=None, validation_alias="GITHUB_USER")
    github_actor: str | None = Field(default=None, validation_alias="GITHUB_ACTOR")
    github_actions: bool | None = Field(default=None, validation_alias="GITHUB_ACTIONS")
    github_output: str | None = Field(default=None, validation_alias="GITHUB_OUTPUT")

    # Explicit overrides
    override_delay: str | None = Field(
        default=None, validation_alias="SPOTLIGHT_DELAY"
    )
    override_limit: str | None = Field(
        default=None, validation_alias="SPOTLIGHT_LIMIT"
    )
    override_min_views: str | None = Field(
        default=None, validation_alias=AliasChoices("SPOTLIGHT_MIN_VIEWS", "SPOTLIGHT_MINVIEWS")
    )
    override_include_forks: str | None = Field(
        default=None, validation_alias="SPOTLIGHT_INCLUDE_FORKS"
    )
    override_include_archived: str | None = Field(
        default=None, validation_alias="SPOTLIGHT_INCLUDE_ARCHIVED"
    )

    # Pipeline inputs
    input_delay: str | None = Field(default=None, validation_alias="INPUT_DELAY")
    input_limit: str | None = Field(default=None, validation_alias="INPUT_LIMIT")
    input_min_views: str | None = Field(
        default=None, validation_alias=AliasChoices("INPUT_MIN_VIEWS", "INPUT_MINVIEWS")
    )
    input_include_forks: str | None = Field(
        default=None, validation_alias="INPUT_INCLUDE_FORKS"
    )
    input_include_archived: str | None = Field(
        default=None, validation_alias="INPUT_INCLUDE_ARCHIVED"
    )

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_unset(cls, v: Any) -> Any:
        """Treat empty strings as unset (Actions passes blank inputs)."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_github_actions(self) -> bool:
        """Check if running as a GitHub Actions step."""
        return bool(self.github_actions)

    def resolve_token(self, flag_token: str | None = None) -> str | None:
        """Resolve the API token.

        Order: GH_SPOTLIGHT_TOKEN, GITHUB_TOKEN, pipeline input, flag.

        Args:
            flag_token: Value of the ``--token`` flag.

        Returns:
            Token, or None if none is configured.
        """
        for candidate in (
            self.gh_spotlight_token,
            self.github_token,
            self.input_token,
            flag_token,
        ):
            if candidate:
                return candidate
        return None

    def resolve_subject(self, flag_user: str | None = None) -> str | None:
        """Resolve the subject login.

        Order: flag, GITHUB_USER, GITHUB_ACTOR.

        Args:
            flag_user: Value of the ``--user`` flag.

        Returns:
            Subject login, or None if none is configured.
        """
        for candidate in (flag_user, self.github_user, self.github_actor):
            if candidate and candidate.strip():
                return candidate.strip()
        return None

    def resolve_config_values(
        self, flag_values: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Merge ranking options from every source.

        Values are returned raw; SpotlightConfig validates them.

        Args:
            flag_values: Command-line values keyed by config key; None = unset.

        Returns:
            Raw values per key, omitting keys no source sets.
        """
        flags = flag_values or {}
        resolved: dict[str, Any] = {}
        for key in CONFIG_KEYS:
            for candidate in (
                getattr(self, f"override_{key}"),
                getattr(self, f"input_{key}"),
                flags.get(key),
            ):
                if candidate is not None:
                    resolved[key] = candidate
                    break
        return resolved


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
