"""
Custom exceptions for the GitHub Repository Monitor.

This module defines the error taxonomy of a poll cycle. Every cycle error is
caught at the cycle boundary and reported through a ``CycleResult``.
"""

from typing import Any


class RepoMonitorError(Exception):
    """Base exception for GitHub Repository Monitor errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code or "REPO_MONITOR_ERROR"
        self.context = context or {}


class TransportError(RepoMonitorError):
    """Exception for network or connection failures."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "TRANSPORT_ERROR", context)
        self.url = url


class DecodeError(RepoMonitorError):
    """Exception for response bodies that are not valid structured data."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "DECODE_ERROR", context)


class GitHubAPIError(RepoMonitorError):
    """Exception for non-200 responses carrying an error envelope."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GITHUB_API_ERROR", context)
        self.status_code = status_code


class ConsumerError(RepoMonitorError):
    """Exception for faults raised by a registered event handler."""

    def __init__(
        self,
        message: str,
        handler: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "CONSUMER_ERROR", context)
        self.handler = handler


class RateLimitStateError(RepoMonitorError):
    """Exception for rate limit queries made before any state was recorded."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "RATE_LIMIT_STATE_ERROR", context)


class ConfigurationError(RepoMonitorError):
    """Exception for configuration related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "CONFIGURATION_ERROR", context)
