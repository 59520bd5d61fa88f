"""Cheap integrity checks for cached files."""

ID3_HEADER_SIZE = 10


def audio_looks_complete(data: bytes) -> bool:
    """Check that audio bytes are not empty or cut off inside their ID3 tag.

    Files without an ID3v2 tag only need to be non-empty. Tagged files must
    carry audio data past the end of the tag.
    """
    if not data:
        return False
    if not data.startswith(b"ID3"):
        return True
    if len(data) < ID3_HEADER_SIZE:
        return False

    # Tag size is a 28-bit syncsafe integer, excluding header and footer
    size = 0
    for byte in data[6:10]:
        size = (size << 7) | (byte & 0x7F)
    if data[5] & 0x10:
        size += ID3_HEADER_SIZE
    return len(data) > ID3_HEADER_SIZE + size
