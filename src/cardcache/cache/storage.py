"""Directory-backed cache storage implementation."""

import logging
import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import InvalidInput, IOFailure, NotFound
from .models import CacheEntry

logger = logging.getLogger(__name__)

# Prefix of in-progress writes; never reported as entries
TEMP_PREFIX = ".tmp-"


def is_regular_file(path: Path) -> bool:
    """Check whether path is a regular file.

    A missing file or missing parent means False. Any other stat failure,
    such as a name that is too long, raises.

    Raises:
        IOFailure: If the path cannot be checked
    """
    try:
        return stat.S_ISREG(path.stat().st_mode)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        raise IOFailure(f"Failed to check {path}: {e}", e) from e


class CacheStore:
    """Key to file mapping inside one cache directory.

    There is no index or manifest: an entry exists exactly when a file with
    the key as its name is present. Writes go through a temporary file that
    is renamed into place, so readers never observe a partial file and
    concurrent writers of the same key simply replace each other.
    """

    def __init__(self, directory: Path):
        """Initialize storage and create the directory if needed.

        Args:
            directory: Directory holding the cached files

        Raises:
            IOFailure: If the directory cannot be created
        """
        self.directory = Path(directory)
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailure(
                f"Failed to create cache directory {self.directory}: {e}", e
            ) from e

    def path_for(self, key: str) -> Path:
        """Get the file location for a key.

        Raises:
            InvalidInput: If the key is not a single plain file name
        """
        if (
            not key
            or key in (".", "..")
            or "/" in key
            or "\\" in key
            or "\x00" in key
        ):
            raise InvalidInput(f"Invalid cache key: {key!r}")
        return self.directory / key

    def exists(self, key: str) -> bool:
        """Check whether a file is cached under the key.

        Raises:
            IOFailure: If the file cannot be checked
        """
        return is_regular_file(self.path_for(key))

    def read(self, key: str) -> bytes:
        """Read the cached bytes for a key.

        Raises:
            NotFound: If nothing is cached under the key
            IOFailure: If the file exists but cannot be read
        """
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFound(key) from e
        except OSError as e:
            raise IOFailure(f"Failed to read {path}: {e}", e) from e

    def write(self, key: str, data: bytes) -> Path:
        """Write bytes under a key, replacing any existing file.

        Args:
            key: Cache key (file name)
            data: Complete file contents

        Returns:
            Path of the written file

        Raises:
            IOFailure: If the file cannot be written; no partial file remains
        """
        path = self.path_for(key)
        self._ensure_directory()

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=TEMP_PREFIX)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError as cleanup_error:
                    logger.warning(
                        f"Failed to clean up partial cache file: {cleanup_error}"
                    )
            raise IOFailure(f"Failed to write {path}: {e}", e) from e

        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return path

    def delete(self, key: str) -> bool:
        """Delete the file for a key.

        Returns:
            True if a file was removed, False if nothing was cached

        Raises:
            IOFailure: If the file exists but cannot be removed
        """
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise IOFailure(f"Failed to delete {path}: {e}", e) from e

        logger.debug(f"Deleted {path}")
        return True

    def keys(self) -> list[str]:
        """List the keys of all cached files, sorted."""
        try:
            names = [
                p.name
                for p in self.directory.iterdir()
                if p.is_file() and not p.name.startswith(TEMP_PREFIX)
            ]
        except FileNotFoundError:
            return []
        except OSError as e:
            raise IOFailure(f"Failed to list {self.directory}: {e}", e) from e
        return sorted(names)

    def entry(self, key: str) -> CacheEntry | None:
        """Get a CacheEntry for a cached key, or None if absent."""
        if not self.exists(key):
            return None
        return CacheEntry(key=key, local_path=self.path_for(key))

    def clear_all(self) -> int:
        """Delete every cached file.

        Returns:
            Number of files removed
        """
        removed = 0
        for key in self.keys():
            if self.delete(key):
                removed += 1
        logger.info(f"Cleared {removed} cached files from {self.directory}")
        return removed

    def total_size_bytes(self) -> int:
        """Sum the sizes of all cached files.

        Files that disappear or cannot be stat-ed during enumeration are
        skipped.
        """
        total = 0
        for key in self.keys():
            try:
                total += (self.directory / key).stat().st_size
            except OSError:
                continue
        return total

    def purge_invalid(self, is_valid: Callable[[bytes], bool]) -> int:
        """Delete cached files whose contents fail a validity check.

        Args:
            is_valid: Predicate over the file contents

        Returns:
            Number of files removed
        """
        removed = 0
        for key in self.keys():
            try:
                data = self.read(key)
            except NotFound:
                continue
            if not is_valid(data) and self.delete(key):
                logger.debug(f"Purged invalid cache file {key}")
                removed += 1
        logger.info(f"Purged {removed} invalid files from {self.directory}")
        return removed
