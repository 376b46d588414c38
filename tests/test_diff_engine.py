"""
Tests for the snapshot diff engine and snapshot store.
"""

from repo_monitor.models import (
    ChangeEvent,
    ChangeEventType,
    RepoIdentity,
    RepositoryRecord,
    RepoSnapshot,
)
from repo_monitor.polling.diff_engine import DiffEngine
from repo_monitor.state import InMemorySnapshotStore


def record(**overrides) -> RepositoryRecord:
    data = {"id": 1, "name": "a", "watchers": 10, "forks": 2, "open_issues": 3}
    data.update(overrides)
    return RepositoryRecord.model_validate(data)


class TestInMemorySnapshotStore:
    """Test the in-memory snapshot store."""

    def test_get_missing_returns_none(self):
        store = InMemorySnapshotStore()
        assert store.get(RepoIdentity(id=1, name="a")) is None
        assert len(store) == 0

    def test_set_and_get(self):
        store = InMemorySnapshotStore()
        identity = RepoIdentity(id=1, name="a")
        snapshot = RepoSnapshot(watchers=1, forks=2, open_issues=3)

        store.set(identity, snapshot)

        assert store.get(RepoIdentity(id=1, name="a")) == snapshot
        assert identity in store
        assert len(store) == 1

    def test_identity_is_composite(self):
        store = InMemorySnapshotStore()
        store.set(RepoIdentity(id=1, name="a"), RepoSnapshot(watchers=1, forks=0, open_issues=0))

        assert RepoIdentity(id=1, name="b") not in store
        assert RepoIdentity(id=2, name="a") not in store

    def test_identities_and_clear(self):
        store = InMemorySnapshotStore()
        snapshot = RepoSnapshot(watchers=0, forks=0, open_issues=0)
        store.set(RepoIdentity(id=2, name="b"), snapshot)
        store.set(RepoIdentity(id=1, name="a"), snapshot)

        assert store.identities() == [
            RepoIdentity(id=1, name="a"),
            RepoIdentity(id=2, name="b"),
        ]

        store.clear()
        assert len(store) == 0


class TestDiffEngine:
    """Test change detection between two observations."""

    def setup_method(self):
        self.store = InMemorySnapshotStore()
        self.engine = DiffEngine(self.store, "octocat")

    def test_first_observation_emits_nothing_and_stores_snapshot(self):
        events = self.engine.diff(record())

        assert events == []
        assert self.store.get(RepoIdentity(id=1, name="a")) == RepoSnapshot(
            watchers=10, forks=2, open_issues=3
        )

    def test_identical_record_is_idempotent(self):
        self.engine.diff(record())
        assert self.engine.diff(record()) == []
        assert self.engine.diff(record()) == []

    def test_watchers_fallen(self):
        self.engine.diff(record())
        events = self.engine.diff(record(watchers=9))

        assert events == [
            ChangeEvent(
                type=ChangeEventType.WATCHERS_FALLEN,
                content="a",
                link_url="https://github.com/octocat/a/watchers",
            )
        ]

    def test_watchers_grown(self):
        self.engine.diff(record())
        events = self.engine.diff(record(watchers=12))

        assert len(events) == 1
        assert events[0].type == ChangeEventType.WATCHERS_GROWN
        assert events[0].content == "a"
        assert events[0].link_url == "https://github.com/octocat/a/watchers"

    def test_issue_opened_has_blank_content(self):
        self.engine.diff(record())
        events = self.engine.diff(record(open_issues=4))

        assert events == [
            ChangeEvent(
                type=ChangeEventType.ISSUES_GROWN,
                content="",
                link_url="https://github.com/octocat/a/issues",
            )
        ]

    def test_issue_resolved_names_repository(self):
        self.engine.diff(record())
        events = self.engine.diff(record(open_issues=1))

        assert events[0].type == ChangeEventType.ISSUES_FALLEN
        assert events[0].content == "a"
        assert events[0].link_url == "https://github.com/octocat/a/issues"

    def test_forks_link_to_network(self):
        self.engine.diff(record())

        grown = self.engine.diff(record(forks=3))
        fallen = self.engine.diff(record(forks=1))

        assert grown[0].type == ChangeEventType.FORKS_GROWN
        assert fallen[0].type == ChangeEventType.FORKS_FALLEN
        assert grown[0].link_url == "https://github.com/octocat/a/network"
        assert fallen[0].content == "a"

    def test_metrics_are_independent(self):
        self.engine.diff(record())
        events = self.engine.diff(record(watchers=11, forks=1, open_issues=5))

        assert [event.type for event in events] == [
            ChangeEventType.WATCHERS_GROWN,
            ChangeEventType.ISSUES_GROWN,
            ChangeEventType.FORKS_FALLEN,
        ]

    def test_snapshot_updated_after_change(self):
        self.engine.diff(record())
        self.engine.diff(record(watchers=20))

        assert self.engine.diff(record(watchers=20)) == []
        assert self.store.get(RepoIdentity(id=1, name="a")).watchers == 20

    def test_renamed_repository_is_new_identity(self):
        self.engine.diff(record())
        events = self.engine.diff(record(name="renamed", watchers=50))

        assert events == []
        assert len(self.store) == 2

    def test_custom_web_url(self):
        engine = DiffEngine(self.store, "octocat", web_url="https://ghe.example.com/")
        engine.diff(record())
        events = engine.diff(record(watchers=1))

        assert events[0].link_url == "https://ghe.example.com/octocat/a/watchers"

    def test_event_type_labels(self):
        assert ChangeEventType.WATCHERS_GROWN.label == "Watchers Grown"
        assert ChangeEventType.ISSUES_FALLEN.label == "Issues Fallen"
        assert ChangeEventType.FORKS_FALLEN.label == "Forks Fallen"
        assert len(ChangeEventType) == 6
