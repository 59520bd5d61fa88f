"""Pytest configuration and fixtures for cardcache tests."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(autouse=True)
def isolate_xdg_dirs(monkeypatch, tmp_path: Path) -> None:
    """Point config and data directories at test-specific locations."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    for name in (
        "CARDCACHE_ROOT",
        "CARDCACHE_COALESCE",
        "CARDCACHE_HTTP_TIMEOUT",
        "CARDCACHE_TTS_ENDPOINT",
    ):
        monkeypatch.delenv(name, raising=False)

    # Drop config memoized by earlier tests
    monkeypatch.setattr("cardcache.config._cached_config", None)


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Root directory for cache stores."""
    root = tmp_path / "cache-root"
    root.mkdir()
    return root
