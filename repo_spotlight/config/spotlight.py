"""Validated configuration record for a ranking run."""

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    ValidationError,
    model_validator,
)

from repo_spotlight.config.constants import (
    DEFAULT_DELAY_MS,
    DEFAULT_INCLUDE_ARCHIVED,
    DEFAULT_INCLUDE_FORKS,
    DEFAULT_LIMIT,
    DEFAULT_MIN_VIEWS,
    KEY_ALIASES,
    MAX_DELAY_MS,
    MAX_LIMIT,
    MIN_DELAY_MS,
    MIN_LIMIT,
    MIN_MIN_VIEWS,
    NUMERIC_BOUNDS,
)
from repo_spotlight.errors import SpotlightError


# Pydantic error types raised when a value cannot be read as an integer
_NUMBER_PARSE_ERRORS = frozenset(
    {"int_parsing", "int_type", "int_from_float", "finite_number"}
)
_RANGE_ERRORS = frozenset({"greater_than_equal", "less_than_equal"})


class SpotlightConfig(BaseModel):
    """Configuration for one ranking run.

    Immutable once built; every field is checked at construction so the
    engine never sees an out-of-range value. Numeric fields accept
    integers or numeric strings. Construction failures raise
    SpotlightError (VALIDATION), not pydantic's ValidationError.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    delay: Annotated[int, Field(ge=MIN_DELAY_MS, le=MAX_DELAY_MS)] = DEFAULT_DELAY_MS
    limit: Annotated[int, Field(ge=MIN_LIMIT, le=MAX_LIMIT)] = DEFAULT_LIMIT
    min_views: Annotated[int, Field(ge=MIN_MIN_VIEWS, alias="minViews")] = (
        DEFAULT_MIN_VIEWS
    )
    include_forks: bool = DEFAULT_INCLUDE_FORKS
    include_archived: bool = DEFAULT_INCLUDE_ARCHIVED

    @model_validator(mode="wrap")
    @classmethod
    def as_spotlight_error(
        cls,
        data: Any,
        handler: ModelWrapValidatorHandler["SpotlightConfig"],
    ) -> "SpotlightConfig":
        """Convert pydantic validation failures into SpotlightError."""
        try:
            return handler(data)
        except ValidationError as e:
            raw: dict[str, Any] = {}
            if isinstance(data, Mapping):
                raw = {KEY_ALIASES.get(str(k), str(k)): v for k, v in data.items()}
            raise _to_spotlight_error(e, raw) from e

    @classmethod
    def from_values(
        cls, values: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> "SpotlightConfig":
        """Build a config from raw values, raising SpotlightError on bad input.

        Keys may use snake_case or camelCase spellings. ``None`` values are
        treated as unset and fall back to defaults.

        Args:
            values: Raw configuration mapping.
            **kwargs: Additional raw values; override ``values``.

        Returns:
            Validated SpotlightConfig.

        Raises:
            SpotlightError: VALIDATION error naming the offending field.
        """
        raw: dict[str, Any] = {}
        for key, value in {**(values or {}), **kwargs}.items():
            if value is None:
                continue
            field_name = KEY_ALIASES.get(key)
            if field_name is None:
                msg = f"Unknown configuration key: {key}"
                raise SpotlightError.validation(msg)
            raw[field_name] = value

        return cls.model_validate(raw)


def _to_spotlight_error(
    error: ValidationError, raw: Mapping[str, Any]
) -> SpotlightError:
    """Convert the first pydantic error into a VALIDATION SpotlightError.

    Args:
        error: Pydantic validation error.
        raw: Raw values keyed by canonical field name.

    Returns:
        SpotlightError describing the field and offending value.
    """
    first = error.errors()[0]
    loc = first.get("loc") or ("config",)
    field_name = KEY_ALIASES.get(str(loc[0]), str(loc[0]))
    value = raw.get(field_name, first.get("input"))
    error_type = first.get("type", "")

    if error_type in _NUMBER_PARSE_ERRORS:
        return SpotlightError.validation(f"Invalid number for {field_name}: {value}")

    if error_type in _RANGE_ERRORS and field_name in NUMERIC_BOUNDS:
        low, high = NUMERIC_BOUNDS[field_name]
        if high is None:
            msg = f"{field_name} must be at least {low} (got {value})"
        else:
            msg = f"{field_name} must be between {low} and {high} (got {value})"
        return SpotlightError.validation(msg)

    if error_type.startswith("bool"):
        return SpotlightError.validation(f"Invalid boolean for {field_name}: {value}")

    return SpotlightError.validation(f"Invalid value for {field_name}: {value}")
