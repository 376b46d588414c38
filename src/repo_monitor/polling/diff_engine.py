"""
Snapshot diff engine for the GitHub Repository Monitor.

This module compares an incoming repository record with the snapshot stored
from the previous poll and produces one change event per metric that moved.
"""

import structlog

from ..models import ChangeEvent, ChangeEventType, RepositoryRecord, RepoSnapshot
from ..state import SnapshotStore

logger = structlog.get_logger(__name__)


class MetricRule:
    """How one tracked metric maps onto change events."""

    def __init__(
        self,
        metric: str,
        grown: ChangeEventType,
        fallen: ChangeEventType,
        link_suffix: str,
        blank_grown_content: bool = False,
    ):
        self.metric = metric
        self.grown = grown
        self.fallen = fallen
        self.link_suffix = link_suffix
        self.blank_grown_content = blank_grown_content


# Order is the order events are emitted for one repository
METRIC_RULES = (
    MetricRule(
        "watchers",
        ChangeEventType.WATCHERS_GROWN,
        ChangeEventType.WATCHERS_FALLEN,
        "/watchers",
    ),
    MetricRule(
        "open_issues",
        ChangeEventType.ISSUES_GROWN,
        ChangeEventType.ISSUES_FALLEN,
        "/issues",
        blank_grown_content=True,
    ),
    MetricRule(
        "forks",
        ChangeEventType.FORKS_GROWN,
        ChangeEventType.FORKS_FALLEN,
        "/network",
    ),
)


class DiffEngine:
    """
    Turns two observations of a repository into change events.

    The first observation of a repository only seeds its snapshot; events are
    emitted from the second observation onwards.
    """

    def __init__(
        self,
        store: SnapshotStore,
        username: str,
        web_url: str = "https://github.com",
    ):
        """
        Initialize the diff engine.

        Args:
            store: Snapshot store shared across poll cycles
            username: GitHub user owning the repositories
            web_url: Base URL used for event links
        """
        self.store = store
        self.username = username
        self.web_url = web_url.rstrip("/")

    def repository_url(self, repo_name: str) -> str:
        return f"{self.web_url}/{self.username}/{repo_name}"

    def diff(self, record: RepositoryRecord) -> list[ChangeEvent]:
        """
        Compare a repository record with its stored snapshot.

        The record's metrics always replace the stored snapshot, whether or
        not any event was produced.

        Args:
            record: Repository record from the current poll

        Returns:
            Change events in watcher, issue, fork order
        """
        identity = record.identity
        previous = self.store.get(identity)
        current = record.snapshot()

        events: list[ChangeEvent] = []
        if previous is not None:
            events = self._compare(record.name, previous, current)
        else:
            logger.debug("First observation of repository", repository=str(identity))

        self.store.set(identity, current)

        if events:
            logger.debug(
                "Repository changed",
                repository=str(identity),
                events=[event.type.value for event in events],
            )
        return events

    def _compare(
        self, repo_name: str, previous: RepoSnapshot, current: RepoSnapshot
    ) -> list[ChangeEvent]:
        events = []
        base_url = self.repository_url(repo_name)

        for rule in METRIC_RULES:
            before = getattr(previous, rule.metric)
            after = getattr(current, rule.metric)

            if after < before:
                event_type = rule.fallen
                content = repo_name
            elif after > before:
                event_type = rule.grown
                content = "" if rule.blank_grown_content else repo_name
            else:
                continue

            events.append(
                ChangeEvent(
                    type=event_type,
                    content=content,
                    link_url=base_url + rule.link_suffix,
                )
            )

        return events
