"""Storage abstraction for keyed blob persistence.

Each key maps to one UTF-8 text blob. The local implementation stores one
file per key and writes atomically via temp-file-then-rename, with
owner-only permissions on both the directory (0o700) and files (0o600).
"""

import contextlib
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

# Owner-only directory permissions for blob storage.
_BLOB_DIR_MODE = 0o700

# Owner-only file permissions for blob files.
_BLOB_FILE_MODE = 0o600

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class BlobStorage(Protocol):
    """Protocol for keyed blob persistence."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, content: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBlobStorage:
    """In-memory blob storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._blobs.get(key)

    def write(self, key: str, content: str) -> None:
        self._blobs[key] = content

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._blobs)


class LocalBlobStorage:
    """Stores each blob as `<key>.json` under a root directory."""

    def __init__(self, root_dir: str | Path) -> None:
        self._root_dir = Path(root_dir).resolve()

    def _path_for(self, key: str) -> Path:
        """Resolve the file for a key, rejecting keys that escape the root."""
        target = (self._root_dir / f"{key}.json").resolve()
        if not _VALID_KEY.match(key) or not target.is_relative_to(self._root_dir):
            raise ValueError(f"Path traversal rejected: '{key}' is not a valid storage key")
        return target

    def read(self, key: str) -> str | None:
        """Return the blob for key, or None if it was never written."""
        target = self._path_for(key)
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, key: str, content: str) -> None:
        """Atomically replace the blob for key.

        Creates the directory lazily on first write with owner-only
        permissions. Readers never observe a partially written file.
        """
        target = self._path_for(key)

        self._root_dir.mkdir(mode=_BLOB_DIR_MODE, parents=True, exist_ok=True)
        self._root_dir.chmod(_BLOB_DIR_MODE)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._root_dir), suffix=".tmp", prefix=".blob_")
        fd_owned = True
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _BLOB_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("saved blob", key=key, path=str(target))

    def delete(self, key: str) -> None:
        """Remove the blob for key; missing blobs are ignored."""
        target = self._path_for(key)
        target.unlink(missing_ok=True)
