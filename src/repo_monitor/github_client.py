"""
HTTP transport for the GitHub Repository Monitor.

This module wraps an ``httpx.AsyncClient`` configured with the monitor's
User-Agent, timeout and proxy resolution, and returns raw responses for the
poll cycle to classify and decode.
"""

from dataclasses import dataclass, field
from types import TracebackType

import httpx
import structlog

from .exceptions import TransportError

logger = structlog.get_logger(__name__)


@dataclass
class TransportResponse:
    """Raw HTTP response handed to the response processor."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""


class GitHubTransport:
    """
    Asynchronous GitHub API transport.

    Proxy settings are resolved once, at construction, from the environment
    (``HTTPS_PROXY``, ``NO_PROXY`` and friends) when ``trust_env`` is set.
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float = 30.0,
        trust_env: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: Request timeout in seconds
            trust_env: Resolve proxies from the environment
            client: Pre-built client, mainly for tests
        """
        self.user_agent = user_agent
        self._client = client or httpx.AsyncClient(
            headers={
                "User-Agent": user_agent,
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=timeout,
            trust_env=trust_env,
        )
        logger.debug("GitHub transport created", user_agent=user_agent, timeout=timeout)

    async def get(self, url: str) -> TransportResponse:
        """
        Issue a GET request.

        Args:
            url: Absolute URL to fetch

        Returns:
            Status code, headers and raw body of the response

        Raises:
            TransportError: If the request could not be completed
        """
        try:
            response = await self._client.get(
                url, headers={"User-Agent": self.user_agent}
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request to {url} failed: {e}", url=url, context={"error": repr(e)}
            ) from e

        return TransportResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
