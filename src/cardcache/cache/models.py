"""Data models for cache storage."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class AssetKind(str, Enum):
    """Kinds of cached content, each with its own directory and key format."""

    AUDIO = "audio"
    IMAGE = "image"
    PREVIEW = "preview"

    @property
    def directory_name(self) -> str:
        """Name of the cache subdirectory holding this kind."""
        return _DIRECTORIES[self]


_DIRECTORIES = {
    AssetKind.AUDIO: "AudioCache",
    AssetKind.IMAGE: "ImageCache",
    AssetKind.PREVIEW: "PreviewAudioCache",
}


@dataclass
class CacheEntry:
    """A cached file.

    Attributes:
        key: Derived, filesystem-safe identifier (the file name)
        local_path: Location of the file inside its cache directory
    """

    key: str
    local_path: Path

    @property
    def size_bytes(self) -> int:
        """Size of the file on disk, read on demand."""
        return self.local_path.stat().st_size


@dataclass
class RepairResult:
    """Outcome of a best-effort repair.

    Attributes:
        path: Local file to use, or None when nothing could be restored
        new_key: Key the file was re-cached under, set only after a re-download
        repaired: Whether a re-download happened
    """

    path: Path | None
    new_key: str | None = None
    repaired: bool = False

    @property
    def available(self) -> bool:
        return self.path is not None

    @classmethod
    def unavailable(cls) -> "RepairResult":
        return cls(path=None)


@dataclass
class ImageResult:
    """Decoded image plus the replacement file name after a repair."""

    image: Any | None
    new_local_path: str | None = None
