"""
Event handlers for the GitHub Repository Monitor.

Poll results are delivered to handler objects registered with an
``EventDispatcher``. Any number of handlers may be registered; a fault in a
handler surfaces as ``ConsumerError``.
"""

from collections import deque
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import structlog

from .exceptions import ConsumerError
from .models import ChangeEvent

logger = structlog.get_logger(__name__)


class RepositoryEventHandler:
    """Base handler; override the notifications you are interested in."""

    def on_success(self, repositories: list[dict[str, Any]]) -> None:
        """Called once per successful poll with the decoded repository list."""

    def on_failure(self, status_code: int, message: str | None) -> None:
        """Called for a failed poll while failures are still reported."""

    def on_repository_changed(self, event: ChangeEvent) -> None:
        """Called once per detected metric change."""


class CallbackEventHandler(RepositoryEventHandler):
    """Adapts plain callables to the handler interface."""

    def __init__(
        self,
        on_success: Callable[[list[dict[str, Any]]], None] | None = None,
        on_failure: Callable[[int, str | None], None] | None = None,
        on_repository_changed: Callable[[ChangeEvent], None] | None = None,
    ):
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_repository_changed = on_repository_changed

    def on_success(self, repositories: list[dict[str, Any]]) -> None:
        if self._on_success:
            self._on_success(repositories)

    def on_failure(self, status_code: int, message: str | None) -> None:
        if self._on_failure:
            self._on_failure(status_code, message)

    def on_repository_changed(self, event: ChangeEvent) -> None:
        if self._on_repository_changed:
            self._on_repository_changed(event)


class LoggingEventHandler(RepositoryEventHandler):
    """Writes every notification to the structured log."""

    def on_success(self, repositories: list[dict[str, Any]]) -> None:
        logger.info("Repositories fetched", count=len(repositories))

    def on_failure(self, status_code: int, message: str | None) -> None:
        logger.warning("GitHub request failed", status_code=status_code, message=message)

    def on_repository_changed(self, event: ChangeEvent) -> None:
        logger.info(
            event.type.label,
            event_type=event.type.value,
            content=event.content,
            link_url=event.link_url,
        )


class RecentEventsHandler(RepositoryEventHandler):
    """Keeps a bounded history of change events and the last failure."""

    def __init__(self, limit: int = 50):
        self.events: deque[dict[str, Any]] = deque(maxlen=limit)
        self.last_failure: dict[str, Any] | None = None
        self.last_success_at: datetime | None = None

    def on_success(self, repositories: list[dict[str, Any]]) -> None:
        self.last_success_at = datetime.now(UTC)

    def on_failure(self, status_code: int, message: str | None) -> None:
        self.last_failure = {
            "status_code": status_code,
            "message": message,
            "at": datetime.now(UTC).isoformat(),
        }

    def on_repository_changed(self, event: ChangeEvent) -> None:
        self.events.appendleft(
            {
                "type": event.type.value,
                "title": event.type.label,
                "content": event.content,
                "link_url": event.link_url,
                "detected_at": datetime.now(UTC).isoformat(),
            }
        )


class EventDispatcher:
    """Fans notifications out to every registered handler."""

    def __init__(self, handlers: list[RepositoryEventHandler] | None = None):
        self.handlers: list[RepositoryEventHandler] = list(handlers or [])

    def register(self, handler: RepositoryEventHandler) -> None:
        self.handlers.append(handler)

    def on_success(self, repositories: list[dict[str, Any]]) -> None:
        self._dispatch("on_success", repositories)

    def on_failure(self, status_code: int, message: str | None) -> None:
        self._dispatch("on_failure", status_code, message)

    def on_repository_changed(self, event: ChangeEvent) -> None:
        self._dispatch("on_repository_changed", event)

    def _dispatch(self, name: str, *args: Any) -> None:
        for handler in self.handlers:
            try:
                getattr(handler, name)(*args)
            except Exception as e:
                handler_name = type(handler).__name__
                raise ConsumerError(
                    f"{handler_name}.{name} failed: {e}", handler=handler_name
                ) from e
