#!/usr/bin/env python3
"""
Test GitHub connection for local development.

This script runs a single poll cycle for the configured user and prints the
repositories, rate limit state and outcome.
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from repo_monitor.config import get_settings
from repo_monitor.events import CallbackEventHandler
from repo_monitor.polling import PollingOrchestrator


async def test_github_connection() -> bool:
    """Run one poll cycle against the GitHub API."""
    print("🔍 Testing GitHub connection...")

    settings = get_settings()
    print("📋 Configuration:")
    print(f"   Username: {settings.github_username}")
    print(f"   API URL: {settings.github_api_url}")
    print(f"   User agent: {settings.user_agent}")

    def show_repositories(repos: list) -> None:
        print(f"✅ Found {len(repos)} repositories")
        for repo in repos[:10]:
            print(
                f"   - {repo['name']}: {repo['watchers']} watchers, "
                f"{repo['open_issues']} open issues, {repo['forks']} forks"
            )

    def show_failure(status_code: int, message: str | None) -> None:
        print(f"❌ GitHub returned HTTP {status_code}: {message}")

    orchestrator = PollingOrchestrator(
        settings,
        handlers=[
            CallbackEventHandler(on_success=show_repositories, on_failure=show_failure)
        ],
    )

    try:
        result = await orchestrator.poller.initiate()
    finally:
        await orchestrator.close()

    rate_limit = orchestrator.rate_limiter.to_dict()
    print(
        f"📊 Rate limit: {rate_limit['remaining']}/{rate_limit['limit']} remaining, "
        f"resets in {rate_limit['minutes_until_reset']} minute(s)"
    )
    print(f"Outcome: {result.outcome.value}")
    return result.ok


if __name__ == "__main__":
    print("🚀 GitHub Repository Monitor - GitHub Connection Test")
    print("=" * 50)

    if not os.getenv("GITHUB_USERNAME") and not Path(".env").exists():
        print("❌ GITHUB_USERNAME not set")
        sys.exit(1)

    success = asyncio.run(test_github_connection())
    sys.exit(0 if success else 1)
