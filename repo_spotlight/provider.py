"""Repository data provider interface and its data models."""

from collections.abc import Sequence
from typing import Annotated, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class RepositorySummary(BaseModel):
    """A repository as listed by the provider.

    Attributes:
        owner: Login of the repository owner.
        name: Repository name.
        full_name: Qualified name (owner/name).
        fork: Whether the repository is a fork.
        archived: Whether the repository is archived.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    owner: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1)]
    full_name: Annotated[str, Field(min_length=1)]
    fork: bool = False
    archived: bool = False


class TrafficSample(BaseModel):
    """View counts for a repository over the provider's reporting window."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    count: Annotated[int, Field(ge=0)]
    uniques: Annotated[int, Field(ge=0)] = 0


@runtime_checkable
class RepositoryProvider(Protocol):
    """Protocol for repository data providers.

    Any object implementing these two calls can feed the ranking engine.
    Failures are raised as exceptions; an integer ``status_code`` (or
    ``status``) attribute on the exception is surfaced to the caller.
    """

    def list_repositories(self, subject: str) -> Sequence[RepositorySummary]:
        """List every repository owned by a subject.

        Pagination is the provider's concern; the result is flattened.

        Args:
            subject: User or organization login.

        Returns:
            Repositories in listing order.
        """
        ...

    def get_traffic(self, owner: str, name: str) -> TrafficSample:
        """Fetch the traffic sample for one repository.

        Args:
            owner: Repository owner login.
            name: Repository name.

        Returns:
            Traffic sample for the repository.
        """
        ...
