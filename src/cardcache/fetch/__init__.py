"""Remote fetchers for cache misses.

This module provides a registry mapping each asset kind to the fetcher
class that downloads it.
"""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .base import RemoteFetcher

from .http import HttpFetcher
from .image import ImageFetcher
from .preview import PreviewFetcher
from .speech import SpeechFetcher

__all__ = [
    "FetcherRegistry",
    "HttpFetcher",
    "ImageFetcher",
    "PreviewFetcher",
    "SpeechFetcher",
]


class FetcherRegistry:
    """Registry for fetcher classes keyed by asset kind name."""

    _fetchers: ClassVar[dict[str, type["RemoteFetcher"]]] = {}

    @classmethod
    def register(cls, kind: str, fetcher_class: type["RemoteFetcher"]) -> None:
        """Register a fetcher class for an asset kind.

        Args:
            kind: Asset kind name (e.g. "audio")
            fetcher_class: Class implementing RemoteFetcher
        """
        cls._fetchers[kind] = fetcher_class

    @classmethod
    def get(cls, kind: str) -> type["RemoteFetcher"]:
        """Get the fetcher class for an asset kind.

        Raises:
            KeyError: If no fetcher is registered for kind
        """
        if kind not in cls._fetchers:
            available = ", ".join(cls._fetchers.keys()) if cls._fetchers else "none"
            raise KeyError(
                f"Fetcher for '{kind}' not found. Available kinds: {available}"
            )
        return cls._fetchers[kind]

    @classmethod
    def kinds(cls) -> list[str]:
        return list(cls._fetchers.keys())


# Register fetchers
FetcherRegistry.register("audio", SpeechFetcher)
FetcherRegistry.register("image", ImageFetcher)
FetcherRegistry.register("preview", PreviewFetcher)
