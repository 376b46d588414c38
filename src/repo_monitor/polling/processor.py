"""
Response processor for the GitHub Repository Monitor polling system.

This module turns one HTTP response into rate limit updates, failure reports
and repository change events, and summarises the cycle in a ``CycleResult``.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from ..codec import JsonCodec
from ..events import EventDispatcher
from ..exceptions import ConsumerError, DecodeError, GitHubAPIError
from ..models import ChangeEvent, CycleOutcome, CycleResult, RepositoryRecord
from .diff_engine import DiffEngine
from .failure_counter import FailureCounter
from .rate_limiter import LIMIT_HEADER, REMAINING_HEADER, RESET_HEADER, RateLimitTracker

logger = structlog.get_logger(__name__)

REPOSITORY_LIST = TypeAdapter(list[RepositoryRecord])


class ResponseClass(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def classify(status_code: int) -> ResponseClass:
    """Only HTTP 200 counts as a successful poll."""
    return ResponseClass.SUCCESS if status_code == 200 else ResponseClass.FAILURE


class ResponseProcessor:
    """
    Processes repository list responses.

    Rate limit headers are recorded for every response, before the body is
    decoded. Decoding errors and handler faults end the cycle; they are logged
    and returned as the cycle outcome, never raised.
    """

    def __init__(
        self,
        rate_limiter: RateLimitTracker,
        failure_counter: FailureCounter,
        diff_engine: DiffEngine,
        dispatcher: EventDispatcher,
        codec: JsonCodec | None = None,
    ):
        """
        Initialize the response processor.

        Args:
            rate_limiter: Rate limit tracker updated from response headers
            failure_counter: Counter gating failure reports
            diff_engine: Diff engine producing change events
            dispatcher: Event dispatcher notifying handlers
            codec: Body decoder
        """
        self.rate_limiter = rate_limiter
        self.failure_counter = failure_counter
        self.diff_engine = diff_engine
        self.dispatcher = dispatcher
        self.codec = codec or JsonCodec()

    def process(
        self, status_code: int, headers: Mapping[str, str], body: bytes
    ) -> CycleResult:
        """
        Process one response.

        Args:
            status_code: HTTP status code
            headers: Response headers
            body: Raw response body

        Returns:
            Outcome of the cycle
        """
        response_headers = httpx.Headers(headers)
        self.rate_limiter.update(
            response_headers.get(LIMIT_HEADER),
            response_headers.get(REMAINING_HEADER),
            response_headers.get(RESET_HEADER),
        )
        logger.debug(f"HTTP Response Status code [{status_code}]")

        try:
            payload = self.codec.decode(body)

            if classify(status_code) is ResponseClass.SUCCESS:
                return self._handle_success(payload)
            return self._handle_failure(status_code, payload)

        except DecodeError as e:
            logger.error(
                "Problem decoding response", status_code=status_code, error=str(e)
            )
            return CycleResult(
                outcome=CycleOutcome.DECODE_ERROR,
                status_code=status_code,
                error=str(e),
                error_code=e.code,
            )
        except ConsumerError as e:
            logger.error(
                "Problem with response handler",
                status_code=status_code,
                handler=e.handler,
                error=str(e),
            )
            return CycleResult(
                outcome=CycleOutcome.CONSUMER_ERROR,
                status_code=status_code,
                error=str(e),
                error_code=e.code,
            )

    def _handle_success(self, payload: Any) -> CycleResult:
        records = self._parse_records(payload)

        self.failure_counter.on_success()
        self.dispatcher.on_success(payload)

        events: list[ChangeEvent] = []
        for record in records:
            for event in self.diff_engine.diff(record):
                self.dispatcher.on_repository_changed(event)
                events.append(event)

        return CycleResult(
            outcome=CycleOutcome.SUCCESS,
            status_code=200,
            repositories=len(records),
            events=events,
        )

    def _handle_failure(self, status_code: int, payload: Any) -> CycleResult:
        message = payload.get("message") if isinstance(payload, dict) else None
        api_error = GitHubAPIError(
            message or f"GitHub API returned HTTP {status_code}",
            status_code=status_code,
            context={"documentation_url": payload.get("documentation_url")}
            if isinstance(payload, dict)
            else None,
        )

        reported = self.failure_counter.on_failure(
            status_code, message, self.dispatcher.on_failure
        )
        logger.warning(
            "GitHub API request failed",
            status_code=status_code,
            message=message,
            reported=reported,
            failure_count=self.failure_counter.count,
        )

        return CycleResult(
            outcome=(
                CycleOutcome.FAILURE_REPORTED
                if reported
                else CycleOutcome.FAILURE_SUPPRESSED
            ),
            status_code=status_code,
            error=str(api_error),
            error_code=api_error.code,
            error_context=api_error.context,
        )

    @staticmethod
    def _parse_records(payload: Any) -> list[RepositoryRecord]:
        """Validate the whole repository list before any state changes."""
        if not isinstance(payload, list):
            raise DecodeError(
                "Expected a JSON array of repositories",
                context={"type": type(payload).__name__},
            )

        try:
            return REPOSITORY_LIST.validate_python(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Invalid repository record: {e.error_count()} validation error(s)",
                context={"errors": e.errors(include_url=False)},
            ) from e
