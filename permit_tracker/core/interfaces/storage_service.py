"""
Contract: File Storage

Keeps the binary files uploaded against checklist documents
(local disk, S3, etc.).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class StoredFile:
    """Reference to a stored file."""
    path: str
    original_name: str
    size_bytes: int
    content_type: str


class IFileStorage(ABC):
    """
    Port: File Storage

    Persists uploaded document files. The core only keeps the returned path;
    it never reads file contents itself.
    """

    @abstractmethod
    def save(self, data: bytes, original_name: str, content_type: str) -> StoredFile:
        """
        Store a file under a fresh unique name.

        Args:
            data: File contents.
            original_name: Name supplied by the uploader (used for the extension).
            content_type: MIME type.

        Returns:
            StoredFile with its storage path.
        """
        ...

    @abstractmethod
    def read(self, path: str) -> bytes:
        """
        Read a stored file.

        Args:
            path: Path returned by `save`.

        Returns:
            File contents.
        """
        ...

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove a stored file. Returns False if it was already gone."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...
