"""
Entity: Package Document

A checklist slot on a permit package, optionally bound to an uploaded file.
"""

from dataclasses import dataclass
from datetime import datetime


DOCUMENT_FIELDS = ("document_name", "is_required", "is_completed", "notes")

FILE_FIELDS = ("file_name", "file_size", "file_path", "mime_type")


@dataclass
class FileMetadata:
    """Metadata of a stored file, as attached to a document."""
    file_name: str          # original name shown to users
    file_size: int
    file_path: str          # location inside the file storage
    mime_type: str

    def as_fields(self) -> dict:
        return {
            "file_name": self.file_name,
            "file_size": self.file_size,
            "file_path": self.file_path,
            "mime_type": self.mime_type,
        }


@dataclass
class PackageDocument:
    """Domain entity: checklist item."""
    id: int
    package_id: int
    document_name: str
    is_required: bool = True
    is_completed: bool = False
    file_name: str | None = None
    file_size: int | None = None
    file_path: str | None = None
    mime_type: str | None = None
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None
    notes: str | None = None

    @property
    def has_file(self) -> bool:
        return self.file_path is not None
