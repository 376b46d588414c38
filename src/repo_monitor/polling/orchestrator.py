"""
Polling orchestrator for the GitHub Repository Monitor.

This module wires the poll cycle components together and runs cycles at a
fixed interval in a background task.
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

import structlog

from ..config import Settings
from ..events import EventDispatcher, RepositoryEventHandler
from ..exceptions import RateLimitStateError
from ..github_client import GitHubTransport
from ..state import InMemorySnapshotStore, SnapshotStore
from .diff_engine import DiffEngine
from .failure_counter import FailureCounter
from .poller import Poller, Transport
from .processor import ResponseProcessor
from .rate_limiter import RateLimitTracker

logger = structlog.get_logger(__name__)


class PollingOrchestrator:
    """
    Owns the poll cycle components for one GitHub user.

    The orchestrator schedules cycles; it never retries a failed cycle early.
    When the rate limit quota is exhausted the next cycle waits for the quota
    window to reset.
    """

    def __init__(
        self,
        settings: Settings,
        handlers: list[RepositoryEventHandler] | None = None,
        transport: Transport | None = None,
        store: SnapshotStore | None = None,
    ):
        """
        Initialize the polling orchestrator.

        Args:
            settings: Application settings
            handlers: Event handlers receiving poll results
            transport: HTTP transport, built from settings when omitted
            store: Snapshot store, in memory when omitted
        """
        self.settings = settings
        self.config = settings.polling_config

        logger.debug("Setting username", username=settings.github_username)
        logger.debug("Setting user agent", user_agent=settings.user_agent)
        logger.debug("Setting version", version=settings.app_version)

        self.transport = transport or GitHubTransport(
            user_agent=settings.user_agent,
            timeout=self.config.request_timeout_seconds,
            trust_env=self.config.trust_env_proxy,
        )
        self.store = store or InMemorySnapshotStore()
        self.dispatcher = EventDispatcher(handlers)
        self.rate_limiter = RateLimitTracker()
        self.failure_counter = FailureCounter(self.config.failure_threshold)
        self.diff_engine = DiffEngine(
            self.store, settings.github_username, settings.github_web_url
        )
        self.processor = ResponseProcessor(
            rate_limiter=self.rate_limiter,
            failure_counter=self.failure_counter,
            diff_engine=self.diff_engine,
            dispatcher=self.dispatcher,
        )
        self.poller = Poller(
            transport=self.transport,
            processor=self.processor,
            rate_limiter=self.rate_limiter,
            repos_url=settings.repos_url,
        )

        self.is_running_flag = False
        self.polling_task: asyncio.Task[None] | None = None
        self.last_cycle_at: datetime | None = None

    def is_running(self) -> bool:
        """Check if polling is currently active."""
        return self.is_running_flag

    def start(self) -> asyncio.Task[None]:
        """Start polling in a background task."""
        if self.polling_task is None or self.polling_task.done():
            self.polling_task = asyncio.create_task(self.start_polling())
        return self.polling_task

    async def start_polling(self) -> None:
        """Start the polling process."""
        if self.is_running_flag:
            logger.warning("Polling already running")
            return

        self.is_running_flag = True
        logger.info(
            "Starting polling orchestrator",
            username=self.settings.github_username,
            interval_seconds=self.config.interval_seconds,
        )

        try:
            await self._polling_loop()
        except asyncio.CancelledError:
            logger.info("Polling cancelled")
        finally:
            self.is_running_flag = False

    async def stop_polling(self) -> None:
        """Stop the polling process."""
        self.is_running_flag = False

        if self.polling_task and not self.polling_task.done():
            logger.info("Stopping polling orchestrator")
            self.polling_task.cancel()
            try:
                await self.polling_task
            except asyncio.CancelledError:
                pass

    async def close(self) -> None:
        await self.stop_polling()
        if isinstance(self.transport, GitHubTransport):
            await self.transport.close()

    async def _polling_loop(self) -> None:
        """Main polling loop."""
        while self.is_running_flag:
            result = await self.poller.initiate()
            self.last_cycle_at = datetime.now(UTC)

            logger.info(
                "Polling cycle completed",
                outcome=result.outcome.value,
                repositories=result.repositories,
                events=len(result.events),
            )

            if self.is_running_flag:
                await asyncio.sleep(self.next_cycle_delay())

    def next_cycle_delay(self) -> float:
        """Seconds until the next cycle should start."""
        delay = float(self.config.interval_seconds)

        if self.rate_limiter.has_exceeded_limit():
            try:
                minutes = self.rate_limiter.minutes_until_reset()
            except RateLimitStateError:
                return delay

            logger.warning(
                "Rate limit exceeded, waiting for reset", minutes_until_reset=minutes
            )
            delay = max(delay, minutes * 60.0)

        return delay

    def get_status(self) -> dict[str, Any]:
        """Get poll state for monitoring."""
        last_result = self.poller.last_result
        return {
            "username": self.settings.github_username,
            "running": self.is_running_flag,
            "in_flight": self.poller.in_flight,
            "generation": self.poller.generation,
            "last_cycle_at": (
                self.last_cycle_at.isoformat() if self.last_cycle_at else None
            ),
            "last_outcome": last_result.outcome.value if last_result else None,
            "rate_limit": self.rate_limiter.to_dict(),
            "failures": self.failure_counter.state.model_dump(),
            "snapshots": self.store.get_memory_stats(),
        }
