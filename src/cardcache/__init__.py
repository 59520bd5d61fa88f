"""cardcache - on-disk content cache for flashcard audio, images and voice previews."""

__version__ = "0.1.0"
__all__ = ["CacheServices"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "CacheServices":
        from .services import CacheServices

        return CacheServices
    raise AttributeError(f"module 'cardcache' has no attribute {name!r}")
