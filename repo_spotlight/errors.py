"""Error types for the spotlight ranking run."""

from enum import Enum


class SpotlightErrorKind(str, Enum):
    """Classification of run-fatal errors.

    - VALIDATION: Bad subject or configuration; no network activity occurred
    - PROVIDER: Enumeration failed or the consecutive-error breaker tripped
    """

    VALIDATION = "VALIDATION"
    PROVIDER = "PROVIDER"


class SpotlightError(Exception):
    """Run-fatal error raised by the ranking engine.

    A single exception type discriminated by ``kind``. Provider errors may
    carry the HTTP status of the underlying failure so callers can tell
    rate limiting from auth problems.
    """

    def __init__(
        self,
        kind: SpotlightErrorKind,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize the spotlight error.

        Args:
            kind: Classification of the error.
            message: Human-readable error message.
            status_code: HTTP status of the underlying failure, if any.
        """
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    @classmethod
    def validation(cls, message: str) -> "SpotlightError":
        """Build a VALIDATION error."""
        return cls(SpotlightErrorKind.VALIDATION, message)

    @classmethod
    def provider(
        cls, message: str, status_code: int | None = None
    ) -> "SpotlightError":
        """Build a PROVIDER error."""
        return cls(SpotlightErrorKind.PROVIDER, message, status_code)

    @property
    def is_validation(self) -> bool:
        """Check if this is a validation error."""
        return self.kind == SpotlightErrorKind.VALIDATION

    @property
    def is_provider(self) -> bool:
        """Check if this is a provider error."""
        return self.kind == SpotlightErrorKind.PROVIDER

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
        }


def status_code_of(error: BaseException) -> int | None:
    """Extract an HTTP status code from an arbitrary provider error.

    Looks for ``status_code`` first, then ``status``, then an httpx-style
    ``response.status_code``.

    Args:
        error: Exception raised by a provider.

    Returns:
        Integer status code, or None if the error carries none.
    """
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value

    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None
