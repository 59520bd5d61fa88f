"""Unit tests for cache data models."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from cardcache.cache import get_cache_dir
from cardcache.cache.models import AssetKind, CacheEntry, ImageResult, RepairResult


class TestAssetKind:
    """Test asset kind values and directories."""

    @pytest.mark.parametrize(
        "kind, directory",
        [
            (AssetKind.AUDIO, "AudioCache"),
            (AssetKind.IMAGE, "ImageCache"),
            (AssetKind.PREVIEW, "PreviewAudioCache"),
        ],
    )
    def test_directory_names(self, kind: AssetKind, directory: str) -> None:
        assert kind.directory_name == directory

    def test_lookup_by_value(self) -> None:
        assert AssetKind("preview") is AssetKind.PREVIEW

    def test_get_cache_dir_creates_directory(self, tmp_path: Path) -> None:
        directory = get_cache_dir(AssetKind.IMAGE, tmp_path)
        assert directory == tmp_path / "ImageCache"
        assert directory.is_dir()

    def test_get_cache_dir_default_root(self, tmp_path: Path) -> None:
        directory = get_cache_dir(AssetKind.AUDIO)
        assert directory == tmp_path / "xdg-data" / "cardcache" / "AudioCache"


class TestResults:
    """Test CacheEntry and result containers."""

    def test_cache_entry_size_read_on_demand(self, tmp_path: Path) -> None:
        path = tmp_path / "k"
        path.write_bytes(b"abc")
        entry = CacheEntry(key="k", local_path=path)
        assert entry.size_bytes == 3

        path.write_bytes(b"abcdef")
        assert entry.size_bytes == 6

    def test_repair_result_unavailable(self) -> None:
        result = RepairResult.unavailable()
        assert not result.available
        assert result.new_key is None
        assert not result.repaired

    def test_repair_result_available(self, tmp_path: Path) -> None:
        result = RepairResult(path=tmp_path, new_key="k", repaired=True)
        assert result.available

    def test_image_result_defaults(self) -> None:
        assert ImageResult(image=None).new_local_path is None
