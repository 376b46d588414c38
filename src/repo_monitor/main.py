"""
Main application entry point for the GitHub Repository Monitor.

This module configures logging, builds the polling orchestrator, and serves a
small status API alongside the background poll loop.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Request

from . import __version__
from .config import Settings, get_settings
from .events import LoggingEventHandler, RecentEventsHandler
from .polling import PollingOrchestrator


def setup_logging(settings: Settings) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level), format="%(message)s"
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(
    settings: Settings | None = None,
    orchestrator: PollingOrchestrator | None = None,
    start_polling: bool = True,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings, loaded from the environment if omitted
        orchestrator: Pre-built orchestrator, mainly for tests
        start_polling: Start the background poll loop on startup
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        logger = structlog.get_logger()
        logger.info(
            "Starting GitHub Repository Monitor",
            username=settings.github_username,
            interval_seconds=settings.poll_interval_seconds,
        )

        recent_events = RecentEventsHandler(settings.recent_events_limit)
        polling = orchestrator or PollingOrchestrator(
            settings, handlers=[LoggingEventHandler()]
        )
        polling.dispatcher.register(recent_events)

        app.state.orchestrator = polling
        app.state.recent_events = recent_events

        if start_polling:
            polling.start()

        yield

        logger.info("Shutting down GitHub Repository Monitor")
        await polling.close()

    app = FastAPI(
        title="GitHub Repository Monitor",
        description="Watches a GitHub user's repositories for metric changes",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "GitHub Repository Monitor",
            "version": __version__,
            "username": settings.github_username,
        }

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/status")
    async def status(request: Request) -> dict[str, Any]:
        """Rate limit, failure and snapshot state of the poller."""
        status_data = request.app.state.orchestrator.get_status()
        status_data["last_failure"] = request.app.state.recent_events.last_failure
        return status_data

    @app.get("/events")
    async def events(request: Request) -> dict[str, Any]:
        """Most recent repository change events, newest first."""
        recent = list(request.app.state.recent_events.events)
        return {"count": len(recent), "events": recent}

    @app.post("/poll")
    async def poll(request: Request) -> dict[str, Any]:
        """Run one poll cycle now."""
        result = await request.app.state.orchestrator.poller.initiate()
        return result.to_dict()

    return app


def main() -> None:
    """Main entry point."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    logger = structlog.get_logger()
    server = settings.server_config

    logger.info("Starting server", host=server.host, port=server.port, debug=server.debug)

    uvicorn.run(
        create_app(settings),
        host=server.host,
        port=server.port,
        log_level="debug" if server.debug else None,
        log_config=None,  # We handle logging ourselves
    )


if __name__ == "__main__":
    main()
