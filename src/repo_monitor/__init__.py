"""
GitHub Repository Monitor

Polls a GitHub user's repository list and reports changes in watchers, open
issues and forks between polls.
"""

__version__ = "0.1.0"
__author__ = "GitHub Repository Monitor"
__email__ = "support@example.com"

from .config import Settings
from .events import EventDispatcher, RepositoryEventHandler
from .exceptions import RepoMonitorError
from .models import ChangeEvent, ChangeEventType, CycleOutcome, CycleResult
from .polling import Poller, PollingOrchestrator

__all__ = [
    "Settings",
    "ChangeEvent",
    "ChangeEventType",
    "CycleOutcome",
    "CycleResult",
    "EventDispatcher",
    "Poller",
    "PollingOrchestrator",
    "RepoMonitorError",
    "RepositoryEventHandler",
]
