"""
Polling system for the GitHub Repository Monitor.

This package contains the poll cycle: rate limit tracking, failure gating,
snapshot diffing, response processing and scheduling.
"""

from .diff_engine import DiffEngine
from .failure_counter import FailureCounter
from .orchestrator import PollingOrchestrator
from .poller import Poller
from .processor import ResponseProcessor
from .rate_limiter import RateLimitTracker

__all__ = [
    "DiffEngine",
    "FailureCounter",
    "Poller",
    "PollingOrchestrator",
    "RateLimitTracker",
    "ResponseProcessor",
]
