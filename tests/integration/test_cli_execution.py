"""Integration tests for CLI execution."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

# Project root for running tests
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli(*args: str, input: str | None = None) -> subprocess.CompletedProcess:
    """Run the cardcache CLI in a subprocess using the test's XDG dirs."""
    return subprocess.run(
        [sys.executable, "-m", "cardcache", *args],
        cwd=PROJECT_ROOT,
        env={**os.environ, "PYTHONPATH": "src"},
        input=input,
        capture_output=True,
        text=True,
    )


@pytest.fixture
def root(cache_root: Path) -> Path:
    """Cache root pre-populated with one file per kind."""
    (cache_root / "AudioCache").mkdir()
    (cache_root / "AudioCache" / "es_123.mp3").write_bytes(b"a" * 2048)
    (cache_root / "ImageCache").mkdir()
    (cache_root / "ImageCache" / "9_beach.jpg").write_bytes(b"i" * 100)
    (cache_root / "PreviewAudioCache").mkdir()
    return cache_root


def test_cli_shows_help() -> None:
    """Test that CLI shows help when --help flag used."""
    result = run_cli("--help")

    assert result.returncode == 0
    assert "flashcard content cache" in result.stdout
    for command in ("audio", "image", "preview", "repair", "size", "clear"):
        assert command in result.stdout


def test_size_reports_each_kind(root: Path) -> None:
    result = run_cli("--root", str(root), "size")

    assert result.returncode == 0
    assert "audio: 2.0 KB" in result.stdout
    assert "image: 100 B" in result.stdout
    assert "preview: 0 B" in result.stdout
    assert "total: 2.1 KB" in result.stdout


def test_list_shows_cached_files(root: Path) -> None:
    result = run_cli("--root", str(root), "list", "audio")

    assert result.returncode == 0
    assert "es_123.mp3" in result.stdout

    empty = run_cli("--root", str(root), "list", "preview")
    assert empty.returncode == 0
    assert "No cached files" in empty.stdout


def test_clear_one_kind_with_yes(root: Path) -> None:
    result = run_cli("--root", str(root), "clear", "--kind", "audio", "--yes")

    assert result.returncode == 0
    assert "audio: removed 1 files" in result.stdout
    assert list((root / "AudioCache").iterdir()) == []
    assert (root / "ImageCache" / "9_beach.jpg").exists()


def test_clear_declined_keeps_files(root: Path) -> None:
    result = run_cli("--root", str(root), "clear", input="n\n")

    assert result.returncode == 1
    assert (root / "AudioCache" / "es_123.mp3").exists()


def test_repair_without_url_is_unavailable(root: Path) -> None:
    result = run_cli("--root", str(root), "repair", "preview", "missing.mp3")

    assert result.returncode == 1
    assert "Unavailable" in result.stdout


def test_repair_existing_file_prints_path(root: Path) -> None:
    result = run_cli("--root", str(root), "repair", "image", "9_beach.jpg")

    assert result.returncode == 0
    assert str(root / "ImageCache" / "9_beach.jpg") in result.stdout
    assert "New local path" not in result.stdout


def test_audio_rejects_empty_text(root: Path) -> None:
    result = run_cli("--root", str(root), "audio", "   ", "--lang", "es")

    assert result.returncode == 1
    assert "Error: Text cannot be empty" in result.stderr


def test_config_init_writes_file(tmp_path: Path) -> None:
    result = run_cli("config", "--init")

    config_path = tmp_path / "xdg-config" / "cardcache" / "config.toml"
    assert result.returncode == 0
    assert str(config_path) in result.stdout
    assert "[cache]" in config_path.read_text()


def test_purge_removes_invalid_audio(root: Path) -> None:
    (root / "AudioCache" / "es_456.mp3").write_bytes(b"")

    result = run_cli("--root", str(root), "purge", "--kind", "audio")

    assert result.returncode == 0
    assert "audio: removed 1 invalid files" in result.stdout
    assert (root / "AudioCache" / "es_123.mp3").exists()
    assert not (root / "AudioCache" / "es_456.mp3").exists()
