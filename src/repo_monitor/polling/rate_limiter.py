"""
Rate limit tracker for the GitHub Repository Monitor polling system.

This module records the GitHub API rate limit headers of every response and
answers whether the hourly quota is exhausted and when it resets.
"""

from datetime import UTC, datetime

import structlog

from ..exceptions import RateLimitStateError
from ..models import RateLimitState

logger = structlog.get_logger(__name__)

LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric rate limit header", value=value)
        return None


class RateLimitTracker:
    """
    Tracker for GitHub API rate limit headers.

    Header values are stored verbatim as received; the numeric accessors
    interpret them on demand.
    """

    def __init__(self) -> None:
        self._limit: str | None = None
        self._remaining: str | None = None
        self._reset: str | None = None
        self._last_attempt: datetime | None = None

    def update(
        self, limit: str | None, remaining: str | None, reset: str | None
    ) -> None:
        """
        Store the rate limit header values of a response.

        Args:
            limit: ``X-RateLimit-Limit`` header value
            remaining: ``X-RateLimit-Remaining`` header value
            reset: ``X-RateLimit-Reset`` header value (Unix epoch seconds)
        """
        self._limit = limit
        self._remaining = remaining
        self._reset = reset

        logger.debug(f"Header [{LIMIT_HEADER}]", value=limit)
        logger.debug(f"Header [{REMAINING_HEADER}]", value=remaining)
        logger.debug(f"Header [{RESET_HEADER}]", value=reset)

    def record_attempt(self, when: datetime | None = None) -> datetime:
        """Record the time of the latest request attempt."""
        self._last_attempt = when or datetime.now(UTC)
        return self._last_attempt

    @property
    def limit(self) -> int | None:
        return _to_int(self._limit)

    @property
    def remaining(self) -> int | None:
        return _to_int(self._remaining)

    @property
    def reset_epoch_seconds(self) -> int | None:
        return _to_int(self._reset)

    @property
    def last_attempt(self) -> datetime | None:
        return self._last_attempt

    @property
    def state(self) -> RateLimitState:
        """Current rate limit state."""
        return RateLimitState(
            limit=self._limit,
            remaining=self._remaining,
            reset_epoch_seconds=self._reset,
            last_attempt=self._last_attempt,
        )

    def has_exceeded_limit(self) -> bool:
        """
        Check whether the hourly quota is used up.

        Returns:
            True if a remaining count was received and is zero or less
        """
        remaining = self.remaining
        return remaining is not None and remaining <= 0

    def minutes_until_reset(self) -> int:
        """
        Whole minutes from the last attempt until the quota window resets.

        One minute is always added so a countdown never shows zero.

        Raises:
            RateLimitStateError: If no reset header or attempt was recorded
        """
        reset = self.reset_epoch_seconds
        if reset is None or self._last_attempt is None:
            raise RateLimitStateError(
                "Rate limit reset time is unknown until a response is received",
                context={"reset": self._reset, "last_attempt": self._last_attempt},
            )

        last_attempt_ms = int(self._last_attempt.timestamp() * 1000)
        time_diff_ms = reset * 1000 - last_attempt_ms
        return time_diff_ms // 60000 + 1

    def to_dict(self) -> dict[str, object]:
        """Summary used by the status endpoint."""
        try:
            minutes = self.minutes_until_reset()
        except RateLimitStateError:
            minutes = None

        return {
            "limit": self.limit,
            "remaining": self.remaining,
            "reset": self.reset_epoch_seconds,
            "last_attempt": (
                self._last_attempt.isoformat() if self._last_attempt else None
            ),
            "exceeded": self.has_exceeded_limit(),
            "minutes_until_reset": minutes,
        }
