"""Abstract base class for remote fetchers.

A fetcher obtains the raw bytes of an asset on a cache miss. The cache layer
decides when to call it and where the bytes end up.
"""

from abc import ABC, abstractmethod


class RemoteFetcher(ABC):
    """Abstract base class for remote fetchers.

    Every call is an independent round-trip: fetchers never de-duplicate
    concurrent requests for the same URL.
    """

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """Download the resource at url.

        Args:
            url: Absolute URL of the resource

        Returns:
            Complete response body

        Raises:
            NetworkError: If the resource cannot be reached
            DownloadFailed: If the server answers with a non-200 status
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the fetcher."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
