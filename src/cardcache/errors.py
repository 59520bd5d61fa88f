"""Custom cache exceptions."""


class CacheError(Exception):
    """Base exception for content cache errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class InvalidInput(CacheError):
    """Exception raised when lookup inputs fail validation.

    Raised before any disk or network I/O happens, for example when the
    text to synthesize is empty after trimming. Never worth retrying.
    """

    pass


class NotFound(CacheError):
    """Exception raised when a local read targets an absent key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No cached entry for key '{key}'")
        self.key = key


class IOFailure(CacheError):
    """Exception raised for disk failures other than simple absence.

    This typically occurs when:
    - The disk is full
    - Permission is denied on the cache directory
    - The derived file name is too long for the filesystem
    """

    pass


class NetworkError(CacheError):
    """Exception raised when the remote resource cannot be reached.

    Covers DNS failures, refused connections and timeouts. The underlying
    transport exception is kept in ``original_error``.
    """

    pass


class DownloadFailed(CacheError):
    """Exception raised when the remote endpoint answers with a non-200 status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class InvalidImageData(CacheError):
    """Exception raised when fetched or cached bytes are not a decodable image."""

    pass
