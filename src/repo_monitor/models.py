"""
Domain models for the GitHub Repository Monitor.

Repository records as returned by the GitHub API, the snapshots kept between
polls, and the change events produced by comparing the two.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RepoIdentity(BaseModel):
    """Composite key identifying one repository across polls."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str

    def __str__(self) -> str:
        return f"{self.id}:{self.name}"


class RepoSnapshot(BaseModel):
    """Last observed metrics of one repository."""

    model_config = ConfigDict(frozen=True)

    watchers: int
    forks: int
    open_issues: int


class RepositoryRecord(BaseModel):
    """One element of the ``/users/{username}/repos`` response."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    name: str
    watchers: int = Field(ge=0)
    forks: int = Field(ge=0)
    open_issues: int = Field(ge=0)

    @property
    def identity(self) -> RepoIdentity:
        return RepoIdentity(id=self.id, name=self.name)

    def snapshot(self) -> RepoSnapshot:
        return RepoSnapshot(
            watchers=self.watchers, forks=self.forks, open_issues=self.open_issues
        )


class ChangeEventType(str, Enum):
    """Direction of a change in one tracked metric."""

    WATCHERS_GROWN = "watchers_grown"
    WATCHERS_FALLEN = "watchers_fallen"
    ISSUES_GROWN = "issues_grown"
    ISSUES_FALLEN = "issues_fallen"
    FORKS_GROWN = "forks_grown"
    FORKS_FALLEN = "forks_fallen"

    @property
    def label(self) -> str:
        """Human readable title, e.g. ``Watchers Grown``."""
        return self.value.replace("_", " ").title()


class ChangeEvent(BaseModel):
    """Notification describing one metric's delta for one repository."""

    model_config = ConfigDict(frozen=True)

    type: ChangeEventType
    content: str
    link_url: str


class RateLimitState(BaseModel):
    """Rate limit headers of the last response and the last attempt time."""

    model_config = ConfigDict(frozen=True)

    limit: str | None = None
    remaining: str | None = None
    reset_epoch_seconds: str | None = None
    last_attempt: datetime | None = None


class FailureState(BaseModel):
    """Consecutive failure count and the number of failures reported."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    threshold_allowed: int = 5


class CycleOutcome(str, Enum):
    """Terminal state of one poll cycle."""

    SUCCESS = "success"
    FAILURE_REPORTED = "failure_reported"
    FAILURE_SUPPRESSED = "failure_suppressed"
    DECODE_ERROR = "decode_error"
    CONSUMER_ERROR = "consumer_error"
    TRANSPORT_ERROR = "transport_error"
    INTERNAL_ERROR = "internal_error"
    SKIPPED = "skipped"


class CycleResult(BaseModel):
    """Result of processing one poll cycle."""

    outcome: CycleOutcome
    status_code: int | None = None
    repositories: int = 0
    events: list[ChangeEvent] = Field(default_factory=list)
    error: str | None = None
    error_code: str | None = None
    error_context: dict[str, Any] = Field(default_factory=dict)
    generation: int | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == CycleOutcome.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON friendly dictionary."""
        return self.model_dump(mode="json")
