"""Cache-aside orchestration over a CacheStore and a RemoteFetcher.

One generic ContentCache implements the lookup policy; the three asset kinds
differ only in how they derive keys and reach the remote resource.

Example:
    store = CacheStore(root / "AudioCache")
    audio = AudioCache(store, SpeechFetcher())

    # First call - cache miss, downloads and stores the MP3
    path = await audio.get("Hola", "es")

    # Second call - cache hit, no network I/O
    path = await audio.get("Hola", "es")
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from PIL import Image

from ..errors import InvalidImageData, InvalidInput, IOFailure, NotFound
from ..fetch.base import RemoteFetcher
from ..fetch.image import decode_image, encode_jpeg
from ..fetch.speech import SpeechFetcher
from .keys import audio_key, image_key, photo_key, preview_key
from .memory import MemoryCache
from .models import AssetKind, ImageResult, RepairResult
from .storage import CacheStore, is_regular_file
from .validation import audio_looks_complete

logger = logging.getLogger(__name__)


class ContentCache(ABC):
    """Keyed content cache with remote fallback.

    A lookup derives the key, returns the stored file on a hit, and on a miss
    fetches the remote bytes, writes them and returns the new file. Fetch
    errors propagate unchanged and leave nothing on disk, because the store
    only writes complete payloads.

    With ``coalesce`` enabled, concurrent misses for the same key share a
    single fetch. Without it every concurrent miss fetches on its own and
    the last write wins, which is harmless since the content is identical.
    """

    kind: AssetKind
    # Re-check cached files with is_valid() on every hit
    validate_hits = False

    def __init__(
        self, store: CacheStore, fetcher: RemoteFetcher, coalesce: bool = False
    ):
        self.store = store
        self.fetcher = fetcher
        self.coalesce = coalesce
        self._in_flight: dict[str, asyncio.Task] = {}

    @abstractmethod
    def derive_key(self, *inputs) -> str:
        """Map lookup inputs to a cache key.

        Raises:
            InvalidInput: If the inputs are invalid
        """

    @abstractmethod
    async def fetch_remote(self, *inputs) -> bytes:
        """Download the bytes for lookup inputs on a miss."""

    def cached_path(self, *inputs) -> Path | None:
        """Return the cached file for inputs, or None on a miss."""
        key = self.derive_key(*inputs)
        if self.store.exists(key):
            return self.store.path_for(key)
        return None

    def is_cached(self, *inputs) -> bool:
        return self.cached_path(*inputs) is not None

    async def get(self, *inputs) -> Path:
        """Return the local file for inputs, downloading it on a miss.

        Raises:
            InvalidInput: If the inputs are invalid (no I/O is performed)
            NetworkError: If the remote resource cannot be reached
            DownloadFailed: If the remote answers with a non-200 status
            InvalidImageData: If an image download cannot be decoded
            IOFailure: If the downloaded bytes cannot be written
        """
        key = self.derive_key(*inputs)
        if self.store.exists(key):
            if not self.validate_hits or await self._cached_bytes(key) is not None:
                logger.debug(f"Cache hit ({self.kind.value}): {key}")
                return self.store.path_for(key)

        await self._miss(key, inputs)
        return self.store.path_for(key)

    async def get_bytes(self, *inputs) -> bytes:
        """Return the cached bytes for inputs, downloading them on a miss.

        Raises the same errors as get().
        """
        key = self.derive_key(*inputs)
        if self.store.exists(key):
            data = await self._cached_bytes(key)
            if data is not None:
                logger.debug(f"Cache hit ({self.kind.value}): {key}")
                return data

        return await self._miss(key, inputs)

    def is_valid(self, data: bytes) -> bool:
        """Check cached contents; invalid files are treated as misses."""
        return bool(data)

    async def _cached_bytes(self, key: str) -> bytes | None:
        try:
            data = await asyncio.to_thread(self.store.read, key)
        except NotFound:
            # Removed between the existence check and the read
            return None

        if self.validate_hits and not self.is_valid(data):
            logger.warning(f"Discarding invalid cached {self.kind.value} file {key}")
            await asyncio.to_thread(self.store.delete, key)
            return None
        return data

    async def _miss(self, key: str, inputs: tuple) -> bytes:
        logger.debug(f"Cache miss ({self.kind.value}): {key}")
        if not self.coalesce:
            return await self._fetch_and_store(key, inputs)

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(key, inputs))
            self._in_flight[key] = task
            task.add_done_callback(lambda _t, k=key: self._in_flight.pop(k, None))
        else:
            logger.debug(f"Joining in-flight fetch for {key}")
        return await asyncio.shield(task)

    async def _fetch_and_store(self, key: str, inputs: tuple) -> bytes:
        data = await self.fetch_remote(*inputs)
        await asyncio.to_thread(self.store.write, key, data)
        logger.debug(f"Cached {len(data)} bytes as {key}")
        return data

    def remove(self, *inputs) -> bool:
        """Remove the cached file for inputs.

        Returns:
            True if a file was removed
        """
        return self.store.delete(self.derive_key(*inputs))

    def clear(self) -> int:
        """Remove every cached file of this kind and return the count."""
        return self.store.clear_all()

    def size_bytes(self) -> int:
        return self.store.total_size_bytes()

    def purge_invalid(self) -> int:
        """Remove cached files that fail is_valid() and return the count."""
        return self.store.purge_invalid(self.is_valid)


class UrlContentCache(ContentCache):
    """ContentCache keyed by a source URL, with best-effort repair."""

    async def fetch_remote(self, url: str) -> bytes:
        return await self.fetcher.fetch(url)

    def resolve_local_path(self, local_path: str | Path | None) -> Path | None:
        """Turn a recorded path into a filesystem path.

        Records may hold either a bare file name relative to the cache
        directory or a legacy absolute path.
        """
        if local_path is None or not str(local_path).strip():
            return None
        path = Path(local_path)
        if path.is_absolute():
            return path
        return self.store.directory / path

    async def repair(
        self, local_path: str | Path | None, remote_url: str | None
    ) -> RepairResult:
        """Make a recorded file available again, re-downloading it if missing.

        Never raises: any failure results in RepairResult.unavailable().

        Args:
            local_path: Path previously recorded by the caller
            remote_url: Source URL retained alongside the record

        Returns:
            The usable path. After a re-download, new_key holds the file name
            the caller should store in place of the old path.
        """
        existing = self.resolve_local_path(local_path)
        if existing is not None:
            try:
                if is_regular_file(existing):
                    return RepairResult(path=existing)
            except IOFailure as e:
                logger.warning(f"Cannot use recorded path '{local_path}': {e}")

        if not remote_url or not remote_url.strip():
            logger.info(
                f"Cannot repair {self.kind.value} '{local_path}': no remote URL"
            )
            return RepairResult.unavailable()

        try:
            key = self.derive_key(remote_url)
            data = await self.fetch_remote(remote_url)
            path = await asyncio.to_thread(self.store.write, key, data)
        except Exception as e:
            logger.warning(
                f"Repair of {self.kind.value} '{local_path}' "
                f"from {remote_url} failed: {e}"
            )
            return RepairResult.unavailable()

        logger.info(f"Repaired {self.kind.value} '{local_path}' as {key}")
        return RepairResult(path=path, new_key=key, repaired=True)


class AudioCache(ContentCache):
    """Synthesized speech keyed by (text, language code)."""

    kind = AssetKind.AUDIO
    validate_hits = True

    def __init__(
        self,
        store: CacheStore,
        fetcher: SpeechFetcher,
        voice_codes: dict[str, str] | None = None,
        coalesce: bool = False,
    ):
        super().__init__(store, fetcher, coalesce)
        self.voice_codes = dict(voice_codes or {})

    def derive_key(self, text: str, language_code: str) -> str:
        return audio_key(text, language_code)

    def voice_code_for(self, language_code: str) -> str:
        """Map a language code to the endpoint's voice code (identity by default)."""
        return self.voice_codes.get(language_code, language_code)

    async def fetch_remote(self, text: str, language_code: str) -> bytes:
        return await self.fetcher.synthesize(text, self.voice_code_for(language_code))

    def is_valid(self, data: bytes) -> bool:
        return audio_looks_complete(data)

    async def store_audio(self, text: str, language_code: str, data: bytes) -> Path:
        """Cache audio produced elsewhere, e.g. by another synthesis provider.

        Returns the existing file untouched if a valid file is already cached.
        An invalid cached file is replaced.

        Raises:
            InvalidInput: If text is empty, or data is empty or truncated
            IOFailure: If the file cannot be written
        """
        key = self.derive_key(text, language_code)
        if self.store.exists(key) and await self._cached_bytes(key) is not None:
            return self.store.path_for(key)
        if not data:
            raise InvalidInput("No audio data provided")
        if not self.is_valid(data):
            raise InvalidInput("Audio data is incomplete")

        path = await asyncio.to_thread(self.store.write, key, data)
        logger.debug(f"Stored {len(data)} bytes of external audio as {key}")
        return path


class PreviewAudioCache(UrlContentCache):
    """Voice-preview clips keyed by their source URL."""

    kind = AssetKind.PREVIEW
    validate_hits = True

    def derive_key(self, url: str) -> str:
        return preview_key(url)

    def is_valid(self, data: bytes) -> bool:
        return audio_looks_complete(data)


class ImageCache(UrlContentCache):
    """Photos keyed by source URL, with a bounded in-memory layer.

    The memory layer holds decoded images keyed by the source URL string and
    is rebuilt lazily from disk after a restart.
    """

    kind = AssetKind.IMAGE

    def __init__(
        self,
        store: CacheStore,
        fetcher: RemoteFetcher,
        memory: MemoryCache | None = None,
        coalesce: bool = False,
    ):
        super().__init__(store, fetcher, coalesce)
        self.memory = memory if memory is not None else MemoryCache()

    def derive_key(self, url: str) -> str:
        return image_key(url)

    async def load_image(self, url: str) -> Image.Image:
        """Return the decoded image for url from memory, disk or network.

        Raises:
            InvalidImageData: If the cached bytes cannot be decoded
            NetworkError, DownloadFailed, IOFailure: As for get()
        """
        image = self.memory.get(url)
        if image is not None:
            return image

        data = await self.get_bytes(url)
        image = await asyncio.to_thread(decode_image, data)
        self.memory.put(url, image, cost=len(data))
        return image

    async def load_with_fallback(
        self, local_path: str | Path | None, web_url: str | None
    ) -> ImageResult:
        """Load a recorded image, re-downloading it if the file is gone.

        A recorded file that cannot be decoded is treated like a missing one.
        Never raises. new_local_path is set only when the image was
        re-downloaded, so callers know to update their record.
        """
        result = await self.repair(local_path, web_url)
        if not result.available:
            return ImageResult(image=None)

        loaded = await self._read_image(result.path)
        if loaded is None and not result.repaired and web_url and web_url.strip():
            logger.info(f"Recorded image {result.path} is unreadable, re-downloading")
            result = await self.repair(None, web_url)
            if not result.available:
                return ImageResult(image=None)
            loaded = await self._read_image(result.path)
        if loaded is None:
            return ImageResult(image=None)

        image, cost = loaded
        self.memory.put(web_url or str(result.path), image, cost=cost)
        return ImageResult(image=image, new_local_path=result.new_key)

    def is_valid(self, data: bytes) -> bool:
        try:
            decode_image(data)
        except InvalidImageData:
            return False
        return True

    async def _read_image(self, path: Path) -> tuple[Image.Image, int] | None:
        try:
            data = await asyncio.to_thread(path.read_bytes)
            image = await asyncio.to_thread(decode_image, data)
        except Exception as e:
            logger.warning(f"Failed to load image from {path}: {e}")
            return None
        return image, len(data)

    async def save_photo(self, identifier: str, photo_id: str | int, url: str) -> str:
        """Download a photo, store it as JPEG and return its file name.

        Args:
            identifier: Caller-side identifier, such as the card text
            photo_id: Stock-photo provider id of the photo
            url: Download URL of the chosen size

        Returns:
            Relative file name to persist with the caller's record

        Raises:
            InvalidInput, NetworkError, DownloadFailed, InvalidImageData, IOFailure
        """
        key = photo_key(identifier, photo_id)
        data = await self.fetcher.fetch(url)
        image = await asyncio.to_thread(decode_image, data)
        jpeg = await asyncio.to_thread(encode_jpeg, image)
        path = await asyncio.to_thread(self.store.write, key, jpeg)
        logger.info(
            f"Saved photo {photo_id} for '{identifier[:50]}' ({len(jpeg)} bytes)"
        )
        logger.debug(f"Photo written to {path}")
        return key

    def remove(self, url: str) -> bool:
        removed = super().remove(url)
        self.memory.remove(url)
        return removed

    def clear(self) -> int:
        count = super().clear()
        self.memory.clear()
        return count
