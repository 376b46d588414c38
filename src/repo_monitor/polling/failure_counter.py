"""
Consecutive failure counter for the polling system.

Failed polls are reported to event handlers until the threshold is reached.
Further failures are dropped silently until a successful poll resets the
count.
"""

from collections.abc import Callable

import structlog

from ..models import FailureState

logger = structlog.get_logger(__name__)

DEFAULT_FAILURE_THRESHOLD = 5

FailureReporter = Callable[[int, str | None], None]


class FailureCounter:
    """Bounded counter gating failure reports."""

    def __init__(self, threshold_allowed: int = DEFAULT_FAILURE_THRESHOLD) -> None:
        self.threshold_allowed = threshold_allowed
        self.count = 0

    def is_under_limit(self) -> bool:
        """Check whether the next failure may still be reported."""
        return self.count < self.threshold_allowed

    def on_success(self) -> None:
        """Reset the count after a successful poll."""
        if self.count:
            logger.debug("Resetting failure count", previous_count=self.count)
        self.count = 0

    def on_failure(
        self, status_code: int, message: str | None, report: FailureReporter
    ) -> bool:
        """
        Record a failed poll and report it while under the threshold.

        Args:
            status_code: HTTP status code of the response
            message: Error message from the response body
            report: Called with ``(status_code, message)`` when reported

        Returns:
            True if the failure was reported
        """
        if not self.is_under_limit():
            logger.debug(
                "Failure suppressed",
                status_code=status_code,
                failure_count=self.count,
                threshold=self.threshold_allowed,
            )
            return False

        self.count += 1
        report(status_code, message)
        return True

    @property
    def state(self) -> FailureState:
        return FailureState(count=self.count, threshold_allowed=self.threshold_allowed)
