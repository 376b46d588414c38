"""
Configuration management for the GitHub Repository Monitor.

This module handles environment variables, settings validation, and configuration
management using Pydantic Settings for type safety and validation.
"""

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__
from .exceptions import ConfigurationError


class ServerConfig(BaseModel):
    """Status server configuration settings."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")


class PollingConfig(BaseModel):
    """Polling configuration settings."""

    interval_seconds: int = Field(
        default=300, description="Delay between poll cycles in seconds"
    )
    failure_threshold: int = Field(
        default=5, description="Consecutive failures reported before suppression"
    )
    request_timeout_seconds: float = Field(
        default=30.0, description="Transport timeout for one request"
    )
    trust_env_proxy: bool = Field(
        default=True, description="Resolve proxies from the environment"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub configuration
    github_username: str = Field(..., description="GitHub user whose repos are polled")
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub API URL"
    )
    github_web_url: str = Field(
        default="https://github.com", description="Base URL for change event links"
    )
    app_version: str = Field(
        default=__version__, description="Version reported in the User-Agent"
    )

    # Polling configuration
    poll_interval_seconds: int = Field(
        default=300, description="Delay between poll cycles in seconds"
    )
    failure_threshold: int = Field(
        default=5, description="Consecutive failures reported before suppression"
    )
    request_timeout_seconds: float = Field(
        default=30.0, description="Transport timeout in seconds"
    )
    trust_env_proxy: bool = Field(
        default=True, description="Use system proxy configuration"
    )
    recent_events_limit: int = Field(
        default=50, description="Number of change events kept for /events"
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format")

    @field_validator("github_username")
    @classmethod
    def validate_github_username(cls, v: str) -> str:
        """Validate GitHub username."""
        v = v.strip()
        if not v or "/" in v:
            raise ValueError(f"Invalid GitHub username: {v!r}")
        return v

    @field_validator("github_api_url", "github_web_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise base URLs."""
        return v.rstrip("/")

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: int) -> int:
        """Keep the poll interval within the hourly quota."""
        if v < 60:
            raise ValueError("poll_interval_seconds must be at least 60")
        return v

    @field_validator("failure_threshold", "recent_events_limit")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate non-negative counters."""
        if v < 0:
            raise ValueError("value must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in {"json", "console"}:
            raise ValueError(f"Invalid log format: {v}")
        return v

    @property
    def user_agent(self) -> str:
        """User agent sent with every API request."""
        return f"github-repo-monitor/{self.app_version}"

    @property
    def repos_url(self) -> str:
        """Endpoint listing the configured user's repositories."""
        return f"{self.github_api_url}/users/{self.github_username}/repos"

    @property
    def server_config(self) -> ServerConfig:
        """Get server configuration."""
        return ServerConfig(host=self.host, port=self.port, debug=self.debug)

    @property
    def polling_config(self) -> PollingConfig:
        """Get polling configuration."""
        return PollingConfig(
            interval_seconds=self.poll_interval_seconds,
            failure_threshold=self.failure_threshold,
            request_timeout_seconds=self.request_timeout_seconds,
            trust_env_proxy=self.trust_env_proxy,
        )


# Global settings instance - initialized lazily to avoid import-time errors
_settings_instance = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings_instance
    if _settings_instance is None:
        try:
            _settings_instance = Settings()  # type: ignore[call-arg,unused-ignore]
        except ValidationError as e:
            if "github_username" in str(e):
                raise ConfigurationError(
                    "GITHUB_USERNAME environment variable is required. "
                    "Please set it to the GitHub user to monitor.",
                    context={"errors": e.errors(include_url=False)},
                ) from e
            raise ConfigurationError(
                f"Invalid configuration: {e}",
                context={"errors": e.errors(include_url=False)},
            ) from e
    return _settings_instance
