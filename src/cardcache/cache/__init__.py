"""Content cache for audio, image and voice-preview assets."""

from pathlib import Path

from ..paths import get_data_dir
from .manager import (
    AudioCache,
    ContentCache,
    ImageCache,
    PreviewAudioCache,
    UrlContentCache,
)
from .memory import MemoryCache
from .models import AssetKind, CacheEntry, ImageResult, RepairResult
from .storage import CacheStore

__all__ = [
    "AssetKind",
    "AudioCache",
    "CacheEntry",
    "CacheStore",
    "ContentCache",
    "ImageCache",
    "ImageResult",
    "MemoryCache",
    "PreviewAudioCache",
    "RepairResult",
    "UrlContentCache",
    "get_cache_dir",
]


def get_cache_dir(kind: AssetKind, root: Path | None = None) -> Path:
    """Get or create the cache directory for an asset kind.

    Args:
        kind: Asset kind whose directory is wanted
        root: Cache root (defaults to the XDG data directory)

    Returns:
        Path to the directory, e.g. ~/.local/share/cardcache/AudioCache
    """
    directory = (root or get_data_dir()) / kind.directory_name
    directory.mkdir(parents=True, exist_ok=True)
    return directory
