"""
Adapter: Local File Storage

Concrete IFileStorage writing uploads to a directory on disk. Stored names
are unique (`file-<millis>-<random><ext>`); the original name is kept only
in the document's metadata.
"""

import logging
import secrets
import time
from pathlib import Path, PurePath

from permit_tracker.core.errors import StorageError
from permit_tracker.core.interfaces.storage_service import IFileStorage, StoredFile

logger = logging.getLogger(__name__)


class LocalFileStorage(IFileStorage):
    """
    Uploads kept under one directory.

    Paths handed back to the core are bare file names relative to that
    directory, so the directory can move without touching the database.
    """

    def __init__(self, directory: str | Path):
        self._root = Path(directory).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def save(self, data: bytes, original_name: str, content_type: str) -> StoredFile:
        extension = PurePath(original_name).suffix.lower()
        name = f"file-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"
        target = self._root / name
        try:
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not write {name}: {e}") from e
        logger.debug(f"Stored {original_name} as {name} ({len(data)} bytes)")
        return StoredFile(
            path=name,
            original_name=PurePath(original_name).name,
            size_bytes=len(data),
            content_type=content_type,
        )

    def read(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def delete(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.exists():
            return False
        try:
            target.unlink()
        except OSError as e:
            raise StorageError(f"Could not delete {path}: {e}") from e
        return True

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if target.parent != self._root:
            raise StorageError(f"Path escapes the upload directory: {path}")
        return target
