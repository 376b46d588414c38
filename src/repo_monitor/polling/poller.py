"""
Poller for the GitHub Repository Monitor.

One call to ``initiate`` runs one poll cycle: record the attempt time, fetch
the user's repository list, and hand the response to the processor. At most
one cycle is in flight per poller.
"""

import asyncio
from typing import Protocol

import structlog

from ..exceptions import TransportError
from ..github_client import TransportResponse
from ..models import CycleOutcome, CycleResult
from .processor import ResponseProcessor
from .rate_limiter import RateLimitTracker

logger = structlog.get_logger(__name__)


class Transport(Protocol):
    async def get(self, url: str) -> TransportResponse: ...


class Poller:
    """Runs poll cycles for a single GitHub user."""

    def __init__(
        self,
        transport: Transport,
        processor: ResponseProcessor,
        rate_limiter: RateLimitTracker,
        repos_url: str,
    ):
        """
        Initialize the poller.

        Args:
            transport: HTTP transport issuing the request
            processor: Processor handling the response
            rate_limiter: Tracker receiving the attempt time
            repos_url: URL of the user's repository list
        """
        self.transport = transport
        self.processor = processor
        self.rate_limiter = rate_limiter
        self.repos_url = repos_url

        self._lock = asyncio.Lock()
        self.generation = 0
        self.last_result: CycleResult | None = None

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def initiate(self) -> CycleResult:
        """
        Run one poll cycle.

        A call made while another cycle is in flight is rejected without
        issuing a request.

        Returns:
            Outcome of the cycle
        """
        if self._lock.locked():
            logger.warning("Poll already in flight, skipping", generation=self.generation)
            return CycleResult(outcome=CycleOutcome.SKIPPED, generation=self.generation)

        async with self._lock:
            self.generation += 1
            generation = self.generation
            attempted_at = self.rate_limiter.record_attempt()

            logger.debug(
                "Poll cycle started",
                generation=generation,
                url=self.repos_url,
                attempted_at=attempted_at.isoformat(),
            )

            try:
                response = await self.transport.get(self.repos_url)
                result = self.processor.process(
                    response.status_code, response.headers, response.body
                )
            except TransportError as e:
                logger.error("Transport failure", url=e.url, error=str(e))
                result = CycleResult(
                    outcome=CycleOutcome.TRANSPORT_ERROR,
                    error=str(e),
                    error_code=e.code,
                )
            except Exception as e:
                # Any other fault ends this cycle only; the next one starts clean
                logger.exception(
                    "Unexpected poll cycle failure",
                    generation=generation,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                result = CycleResult(
                    outcome=CycleOutcome.INTERNAL_ERROR,
                    error=f"{type(e).__name__}: {e}",
                    error_code="INTERNAL_ERROR",
                )

            result.generation = generation
            self.last_result = result

            logger.debug(
                "Poll cycle completed",
                generation=generation,
                outcome=result.outcome.value,
                events=len(result.events),
            )
            return result
