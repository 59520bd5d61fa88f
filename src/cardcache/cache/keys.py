"""Cache key derivation for the three asset kinds.

Keys double as on-disk file names. Each one pairs a hash of the semantic
input with a human-readable tail (language code or source file name) so a
directory listing stays debuggable. The hash is SHA-256 truncated to a signed
64-bit integer and reported as its absolute value; it is stable across
processes and platforms but is not meant to be cryptographic.
"""

import hashlib
import posixpath
from urllib.parse import unquote, urlsplit

from ..errors import InvalidInput

# Limit on the identifier portion of photo keys
PHOTO_IDENTIFIER_LIMIT = 50


def stable_hash(value: str) -> int:
    """Hash a string to a signed 64-bit integer.

    Args:
        value: String to hash

    Returns:
        Signed integer built from the first 8 bytes of the SHA-256 digest
    """
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


def _safe_segment(value: str) -> str:
    # Keys must stay a single path segment
    return value.replace("/", "_").replace("\\", "_").replace("\x00", "_")


def last_path_component(url: str) -> str:
    """Return the final non-empty, percent-decoded path segment of a URL.

    Returns an empty string when the URL has no path.
    """
    segments = [s for s in urlsplit(url).path.split("/") if s]
    if not segments:
        return ""
    return _safe_segment(unquote(segments[-1]))


def audio_key(text: str, language_code: str) -> str:
    """Derive the cache key for synthesized speech.

    Args:
        text: Text to synthesize; leading/trailing whitespace is ignored
        language_code: Language code such as "es" or "en"

    Returns:
        Key of the form "{language_code}_{hash}.mp3"

    Raises:
        InvalidInput: If the trimmed text or the language code is empty
    """
    if text is None or not text.strip():
        raise InvalidInput("Text cannot be empty")
    if not language_code or not language_code.strip():
        raise InvalidInput("Language code cannot be empty")

    normalized = text.strip()
    code = _safe_segment(language_code.strip())
    return f"{code}_{abs(stable_hash(normalized))}.mp3"


def _require_url(source_url: str) -> str:
    if not source_url or not source_url.strip():
        raise InvalidInput("Source URL cannot be empty")
    return source_url.strip()


def image_key(source_url: str) -> str:
    """Derive the cache key for a photo.

    The extension of the source file name is appended again (or "jpg" when it
    has none), so "a/b/photo.png" becomes "{hash}_photo.png.png".

    Raises:
        InvalidInput: If the URL is empty
    """
    url = _require_url(source_url)
    filename = last_path_component(url)
    extension = posixpath.splitext(filename)[1].lstrip(".") or "jpg"
    return f"{abs(stable_hash(url))}_{filename}.{extension}"


def preview_key(source_url: str) -> str:
    """Derive the cache key for a voice-preview clip (no forced extension).

    Raises:
        InvalidInput: If the URL is empty
    """
    url = _require_url(source_url)
    return f"{abs(stable_hash(url))}_{last_path_component(url)}"


def photo_key(identifier: str, photo_id: str | int) -> str:
    """Derive the file name for a photo saved against a card.

    Args:
        identifier: Card text or other caller-side identifier
        photo_id: Identifier of the photo at the stock-photo provider

    Returns:
        Key of the form "{identifier}_{photo_id}.jpg" with separators replaced

    Raises:
        InvalidInput: If the identifier or photo id is empty
    """
    if not identifier or not identifier.strip():
        raise InvalidInput("Identifier cannot be empty")
    if photo_id is None or not str(photo_id).strip():
        raise InvalidInput("Photo id cannot be empty")

    safe_identifier = (
        identifier.replace(" ", "_").replace("/", "_").replace("\\", "_")
    )[:PHOTO_IDENTIFIER_LIMIT]
    return f"{_safe_segment(safe_identifier)}_{_safe_segment(str(photo_id))}.jpg"
