"""Data models for the ranking engine."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class RankedEntry(BaseModel):
    """One repository in the ranked output.

    Attributes:
        name: Qualified repository name (owner/name).
        views: Total view count.
        uniques: Distinct viewer count.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1)]
    views: Annotated[int, Field(ge=0)]
    uniques: Annotated[int, Field(ge=0)] = 0

    def to_summary_line(self, rank: int) -> str:
        """Format the entry as a numbered summary line.

        Args:
            rank: 1-based rank.

        Returns:
            Human-readable line.
        """
        return f"{rank}. {self.name} - {self.views} views ({self.uniques} unique)"


@dataclass(frozen=True)
class PacingDecision:
    """How long to wait before the next traffic fetch.

    Attributes:
        delay_ms: Milliseconds to sleep.
        periodic: Whether this is a periodic pause rather than the base delay.
    """

    delay_ms: int
    periodic: bool = False
