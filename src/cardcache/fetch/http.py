"""HTTP fetcher built on httpx."""

import logging

import httpx

from ..errors import DownloadFailed, InvalidInput, NetworkError
from .base import RemoteFetcher

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) AppleWebKit/605.1.15"
)
DEFAULT_TIMEOUT = 30.0


class HttpFetcher(RemoteFetcher):
    """Fetch resources with a plain HTTP GET.

    Sends a browser-like User-Agent and an Accept header matching the
    expected content type. Only a 200 response counts as success.
    """

    accept = "*/*"

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Shared client to borrow. When omitted the fetcher creates
                    and owns its own client, closed by aclose().
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header value

        Raises:
            ValueError: If timeout is not positive
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self._client = client
        self._owns_client = client is None
        self.timeout = timeout
        self.user_agent = user_agent

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}

    async def fetch(self, url: str) -> bytes:
        """Download url and return the validated body.

        Raises:
            InvalidInput: If the URL is empty or malformed
            NetworkError: On transport failures, including timeouts, redirect
                loops and undecodable response bodies
            DownloadFailed: If the status code is not 200
        """
        if not url or not url.strip():
            raise InvalidInput("URL cannot be empty")

        logger.debug(f"GET {url}")
        try:
            response = await self.client.get(
                url,
                headers=self.headers(),
                timeout=self.timeout,
                follow_redirects=True,
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidInput(f"Invalid URL '{url}': {e}", e) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request to {url} failed: {e!r}", e) from e

        if response.status_code != 200:
            raise DownloadFailed(
                f"Download from {url} failed: HTTP {response.status_code}",
                response.status_code,
            )

        data = response.content
        logger.debug(f"Downloaded {len(data)} bytes from {url}")
        return self.validate(data)

    def validate(self, data: bytes) -> bytes:
        """Check a successful response body; subclasses may raise."""
        return data

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
