"""Composition root: builds one cache per asset kind.

Construct a CacheServices once at application start and pass the caches to
the components that need them.
"""

import logging

import httpx

from .cache import get_cache_dir
from .cache.manager import AudioCache, ContentCache, ImageCache, PreviewAudioCache
from .cache.memory import MemoryCache
from .cache.models import AssetKind
from .cache.storage import CacheStore
from .config import CardcacheConfig, load_config
from .fetch import FetcherRegistry

logger = logging.getLogger(__name__)


class CacheServices:
    """The audio, image and preview-audio caches sharing one HTTP client.

    Example:
        async with CacheServices.create() as services:
            path = await services.audio.get("Hola", "es")
            image = await services.image.load_image(photo_url)
    """

    def __init__(
        self,
        audio: AudioCache,
        image: ImageCache,
        preview: PreviewAudioCache,
        client: httpx.AsyncClient | None = None,
        owns_client: bool = False,
    ):
        self.audio = audio
        self.image = image
        self.preview = preview
        self._client = client
        self._owns_client = owns_client

    @classmethod
    def create(
        cls,
        config: CardcacheConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "CacheServices":
        """Build the three caches from configuration.

        Args:
            config: Configuration to use (loaded from the config file if omitted)
            client: Shared HTTP client to borrow. When omitted one is created
                    and closed by aclose().

        Returns:
            Ready-to-use CacheServices
        """
        config = config or load_config()
        owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(follow_redirects=True)

        http_options = {
            "client": client,
            "timeout": config.http.timeout,
            "user_agent": config.http.user_agent,
        }
        root = config.cache.root
        coalesce = config.cache.coalesce_requests

        audio = AudioCache(
            CacheStore(get_cache_dir(AssetKind.AUDIO, root)),
            FetcherRegistry.get(AssetKind.AUDIO.value)(
                endpoint=config.audio.endpoint, **http_options
            ),
            voice_codes=config.audio.voice_codes,
            coalesce=coalesce,
        )
        image = ImageCache(
            CacheStore(get_cache_dir(AssetKind.IMAGE, root)),
            FetcherRegistry.get(AssetKind.IMAGE.value)(**http_options),
            memory=MemoryCache(
                count_limit=config.cache.memory_count_limit,
                total_cost_limit=config.cache.memory_cost_limit,
            ),
            coalesce=coalesce,
        )
        preview = PreviewAudioCache(
            CacheStore(get_cache_dir(AssetKind.PREVIEW, root)),
            FetcherRegistry.get(AssetKind.PREVIEW.value)(**http_options),
            coalesce=coalesce,
        )

        logger.debug(f"Cache services initialized at {root}")
        return cls(audio, image, preview, client=client, owns_client=owns_client)

    def for_kind(self, kind: AssetKind | str) -> ContentCache:
        """Get the cache for an asset kind.

        Raises:
            ValueError: If kind is not a known asset kind
        """
        kind = AssetKind(kind)
        return {
            AssetKind.AUDIO: self.audio,
            AssetKind.IMAGE: self.image,
            AssetKind.PREVIEW: self.preview,
        }[kind]

    def all(self) -> list[ContentCache]:
        return [self.audio, self.image, self.preview]

    def sizes(self) -> dict[str, int]:
        """Total bytes on disk per asset kind."""
        return {cache.kind.value: cache.size_bytes() for cache in self.all()}

    def clear_all(self) -> dict[str, int]:
        """Clear every cache and return the number of files removed per kind."""
        return {cache.kind.value: cache.clear() for cache in self.all()}

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CacheServices":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
