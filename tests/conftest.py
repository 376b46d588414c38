"""
Pytest configuration and fixtures for GitHub Repository Monitor tests.
"""

import json
from typing import Any
from unittest.mock import Mock

import pytest

from repo_monitor.config import Settings
from repo_monitor.events import EventDispatcher, RepositoryEventHandler
from repo_monitor.polling.diff_engine import DiffEngine
from repo_monitor.polling.failure_counter import FailureCounter
from repo_monitor.polling.processor import ResponseProcessor
from repo_monitor.polling.rate_limiter import RateLimitTracker
from repo_monitor.state import InMemorySnapshotStore


@pytest.fixture
def mock_settings() -> Settings:
    """Settings for testing."""
    return Settings(
        github_username="octocat",
        app_version="1.2.3",
        poll_interval_seconds=60,
        debug=True,
        log_level="DEBUG",
        _env_file=None,
    )


@pytest.fixture
def mock_handler() -> Mock:
    """Event handler recording every notification."""
    return Mock(spec=RepositoryEventHandler)


@pytest.fixture
def store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def rate_limiter() -> RateLimitTracker:
    return RateLimitTracker()


@pytest.fixture
def failure_counter() -> FailureCounter:
    return FailureCounter()


@pytest.fixture
def processor(
    store: InMemorySnapshotStore,
    rate_limiter: RateLimitTracker,
    failure_counter: FailureCounter,
    mock_handler: Mock,
) -> ResponseProcessor:
    """Response processor wired to in-memory collaborators."""
    return ResponseProcessor(
        rate_limiter=rate_limiter,
        failure_counter=failure_counter,
        diff_engine=DiffEngine(store, "octocat"),
        dispatcher=EventDispatcher([mock_handler]),
    )


@pytest.fixture
def rate_limit_headers() -> dict[str, str]:
    return {
        "X-RateLimit-Limit": "60",
        "X-RateLimit-Remaining": "59",
        "X-RateLimit-Reset": "1700003600",
    }


def make_repo(
    repo_id: int = 1,
    name: str = "a",
    watchers: int = 10,
    forks: int = 2,
    open_issues: int = 0,
) -> dict[str, Any]:
    """Repository record as returned by the GitHub API."""
    return {
        "id": repo_id,
        "name": name,
        "full_name": f"octocat/{name}",
        "watchers": watchers,
        "forks": forks,
        "open_issues": open_issues,
    }


def encode(payload: Any) -> bytes:
    return json.dumps(payload).encode("utf-8")
