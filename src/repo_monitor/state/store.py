"""
Snapshot storage for the GitHub Repository Monitor.

Keeps the last observed metrics of every repository seen by the poller.
Snapshots live for the lifetime of the process only.
"""

import sys
from abc import ABC, abstractmethod
from typing import Any

import structlog

from ..models import RepoIdentity, RepoSnapshot

logger = structlog.get_logger(__name__)


class SnapshotStore(ABC):
    """Abstract base class for snapshot storage."""

    @abstractmethod
    def get(self, identity: RepoIdentity) -> RepoSnapshot | None:
        """
        Get the snapshot stored for a repository.

        Args:
            identity: Repository identity

        Returns:
            Stored snapshot or None if the repository was never observed
        """
        pass

    @abstractmethod
    def set(self, identity: RepoIdentity, snapshot: RepoSnapshot) -> None:
        """
        Store the snapshot for a repository, replacing any previous one.

        Args:
            identity: Repository identity
            snapshot: Snapshot to store
        """
        pass

    @abstractmethod
    def identities(self) -> list[RepoIdentity]:
        """Get all repository identities with a stored snapshot."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all snapshots."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, RepoIdentity) and self.get(identity) is not None

    def get_memory_stats(self) -> dict[str, Any]:
        """Get memory usage statistics."""
        return {"snapshots_count": len(self), "memory_usage_bytes": 0}


class InMemorySnapshotStore(SnapshotStore):
    """Dictionary backed snapshot store."""

    def __init__(self) -> None:
        self._snapshots: dict[RepoIdentity, RepoSnapshot] = {}

    def get(self, identity: RepoIdentity) -> RepoSnapshot | None:
        return self._snapshots.get(identity)

    def set(self, identity: RepoIdentity, snapshot: RepoSnapshot) -> None:
        self._snapshots[identity] = snapshot

    def identities(self) -> list[RepoIdentity]:
        return sorted(self._snapshots, key=lambda identity: (identity.id, identity.name))

    def clear(self) -> None:
        count = len(self._snapshots)
        self._snapshots.clear()
        logger.debug("Cleared snapshot store", snapshots_removed=count)

    def __len__(self) -> int:
        return len(self._snapshots)

    def get_memory_stats(self) -> dict[str, Any]:
        return {
            "snapshots_count": len(self._snapshots),
            "memory_usage_bytes": sys.getsizeof(self._snapshots),
        }
