"""Playback of cached audio files using pygame."""

# ruff: noqa: E402
import os

# Suppress pygame's welcome message BEFORE any pygame import
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import warnings

# Suppress pygame's pkg_resources deprecation warning spam
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import asyncio
import io
from pathlib import Path

import pygame


class AudioPlayer:
    """Play cached speech and voice-preview clips through the speakers."""

    def __init__(self) -> None:
        """Initialize the audio player with pygame mixer.

        Raises:
            RuntimeError: If pygame mixer fails to initialize.
        """
        try:
            pygame.mixer.init()
        except pygame.error as e:
            raise RuntimeError(f"Failed to initialize pygame audio mixer: {e}") from e

    def play_bytes(self, audio_data: bytes) -> None:
        """Play MP3 or WAV bytes (blocking until playback completes).

        Raises:
            ValueError: If audio_data is empty.
            RuntimeError: If audio playback fails.
        """
        if not audio_data:
            raise ValueError("No audio data provided")

        try:
            pygame.mixer.music.load(io.BytesIO(audio_data))
            pygame.mixer.music.play()

            while pygame.mixer.music.get_busy():
                pygame.time.Clock().tick(10)

        except pygame.error as e:
            raise RuntimeError(f"Failed to play audio: {e}") from e

    def play_file(self, path: str | Path) -> None:
        """Play a cached audio file (blocking).

        Raises:
            OSError: If the file cannot be read.
            RuntimeError: If audio playback fails.
        """
        self.play_bytes(Path(path).read_bytes())

    async def play_file_async(self, path: str | Path) -> None:
        """Play a cached audio file without blocking the event loop."""
        await asyncio.to_thread(self.play_file, path)
