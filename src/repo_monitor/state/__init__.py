"""
State management for the GitHub Repository Monitor.

This package provides snapshot storage behind an abstract interface.
"""

from .store import InMemorySnapshotStore, SnapshotStore

__all__ = [
    "SnapshotStore",
    "InMemorySnapshotStore",
]
