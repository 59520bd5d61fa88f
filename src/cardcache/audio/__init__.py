"""Audio playback package for cardcache.

This package plays cached audio through the speakers using pygame.
"""

from .player import AudioPlayer

__all__ = ["AudioPlayer"]
