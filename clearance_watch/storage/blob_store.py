# clearance_watch/storage/blob_store.py

"""Key-value blob storage backing snapshots and the mute registry."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from clearance_watch.errors import NotFound, StorageError

logger = logging.getLogger("clearance_watch.storage")


class BlobStore(Protocol):
    """Minimal blob container: whole-value reads and writes by key."""

    def load(self, key: str) -> bytes:
        """Return the stored bytes, raising NotFound or StorageError."""
        ...

    def save(self, key: str, data: bytes) -> None:
        """Replace the stored bytes, raising StorageError."""
        ...


class LocalBlobStore:
    """Blob container backed by one file per key in a directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        logger.debug("LocalBlobStore initialised, root=%s", self.root)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise StorageError("Invalid blob key", key=key)
        return self.root / key

    def load(self, key: str) -> bytes:
        path = self._path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound("Blob does not exist", key=key) from exc
        except OSError as exc:
            raise StorageError(
                f"Failed to read blob: {exc}", key=key
            ) from exc
        logger.debug("Loaded %d bytes from blob '%s'", len(data), key)
        return data

    def save(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.root, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(
                f"Failed to write blob: {exc}", key=key
            ) from exc
        logger.info("Saved %d bytes to blob '%s'", len(data), key)
