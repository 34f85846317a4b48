"""
Use Case: Document Checklist

Checklist items of a package and the files attached to them.

Two entry points drive completion and both stay valid:
  - toggling `is_completed` by hand (no file needed)
  - attaching a file (always marks complete) / removing it (always reverts)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath

from permit_tracker.core.clock import utcnow
from permit_tracker.core.entities.document import DOCUMENT_FIELDS, FILE_FIELDS, FileMetadata, PackageDocument
from permit_tracker.core.errors import NotFoundError, StorageError, ValidationError
from permit_tracker.core.interfaces.package_repository import IPackageRepository
from permit_tracker.core.interfaces.storage_service import IFileStorage

logger = logging.getLogger(__name__)


@dataclass
class UploadPolicy:
    """Limits applied to uploaded files."""
    max_file_size: int = 10 * 1024 * 1024
    allowed_extensions: list[str] = field(
        default_factory=lambda: ["pdf", "jpg", "jpeg", "png", "gif", "doc", "docx", "xls", "xlsx", "txt"]
    )

    def check(self, filename: str, size: int) -> None:
        errors = {}
        extension = PurePath(filename).suffix.lower().lstrip(".")
        allowed = [e.lower().lstrip(".") for e in self.allowed_extensions]
        if not extension or extension not in allowed:
            errors["file"] = (
                "Invalid file type. Allowed: " + ", ".join(allowed)
            )
        elif size == 0:
            errors["file"] = "Empty file"
        elif size > self.max_file_size:
            errors["file"] = f"File exceeds the {self.max_file_size} byte limit"
        if errors:
            raise ValidationError("Invalid file", errors)


@dataclass
class DocumentFile:
    """A document's file ready to be sent to a client."""
    content: bytes
    file_name: str
    mime_type: str


def validate_document_fields(fields: dict, *, partial: bool) -> dict:
    errors: dict[str, str] = {}
    cleaned: dict = {}

    for key in fields:
        if key not in DOCUMENT_FIELDS:
            errors[key] = "Unknown field"

    if "document_name" in fields:
        value = fields["document_name"]
        if not isinstance(value, str) or not value.strip():
            errors["document_name"] = "Must be a non-empty string"
        else:
            cleaned["document_name"] = value.strip()
    elif not partial:
        errors["document_name"] = "Required"

    for key in ("is_required", "is_completed"):
        if key in fields:
            if not isinstance(fields[key], bool):
                errors[key] = "Must be a boolean"
            else:
                cleaned[key] = fields[key]

    if "notes" in fields:
        if fields["notes"] is not None and not isinstance(fields["notes"], str):
            errors["notes"] = "Must be a string"
        else:
            cleaned["notes"] = fields["notes"]

    if errors:
        raise ValidationError("Invalid document data", errors)
    return cleaned


class DocumentChecklistManager:
    """
    Use Case: checklist items and their files.

    Dependency Injection: repository, file storage and the upload policy
    provider come through the constructor. The policy is fetched per upload
    so that settings edited at runtime apply immediately.
    """

    def __init__(
        self,
        repository: IPackageRepository,
        file_storage: IFileStorage,
        upload_policy: Callable[[], UploadPolicy] = UploadPolicy,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._storage = file_storage
        self._upload_policy = upload_policy
        self._clock = clock

    # ── Checklist items ───────────────────────────────────

    def add_document(
        self,
        package_id: int,
        document_name: str,
        is_required: bool = True,
        notes: str | None = None,
    ) -> PackageDocument:
        if self._repo.get_package(package_id) is None:
            raise NotFoundError("Package", package_id)
        cleaned = validate_document_fields(
            {"document_name": document_name, "is_required": is_required, "notes": notes},
            partial=False,
        )
        document = self._repo.create_document({
            **cleaned,
            "package_id": package_id,
            "is_completed": False,
        })
        logger.info(f"Added document {document.id} '{document.document_name}' to package {package_id}")
        return document

    def get_document(self, document_id: int) -> PackageDocument:
        document = self._repo.get_document(document_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        return document

    def list_documents(self, package_id: int) -> list[PackageDocument]:
        if self._repo.get_package(package_id) is None:
            raise NotFoundError("Package", package_id)
        return self._repo.get_documents_for_package(package_id)

    def update_document(self, document_id: int, fields: dict) -> PackageDocument:
        """Edit name, required flag, notes or completion of a checklist item."""
        document = self.get_document(document_id)
        cleaned = validate_document_fields(fields, partial=True)
        if cleaned.get("is_completed"):
            cleaned["uploaded_at"] = self._clock()
        return self._apply(document_id, cleaned)

    def toggle_completion(self, document_id: int, is_completed: bool) -> PackageDocument:
        return self.update_document(document_id, {"is_completed": is_completed})

    def delete_document(self, document_id: int) -> None:
        document = self.get_document(document_id)
        if not self._repo.delete_document(document_id):
            raise NotFoundError("Document", document_id)
        if document.file_path:
            self._discard(document.file_path)
        logger.info(f"Deleted document {document_id} from package {document.package_id}")

    # ── Files ─────────────────────────────────────────────

    def upload_policy(self) -> UploadPolicy:
        """Limits in force right now."""
        return self._upload_policy()

    def attach_file(
        self,
        document_id: int,
        file_meta: FileMetadata,
        uploaded_by: str | None = None,
    ) -> PackageDocument:
        """Bind file metadata to a document and mark it complete."""
        fields = {
            **file_meta.as_fields(),
            "is_completed": True,
            "uploaded_at": self._clock(),
        }
        if uploaded_by:
            fields["uploaded_by"] = uploaded_by
        return self._apply(document_id, fields)

    def upload_file(
        self,
        document_id: int,
        data: bytes,
        filename: str,
        content_type: str | None = None,
        uploaded_by: str | None = None,
        policy: UploadPolicy | None = None,
    ) -> PackageDocument:
        """
        Store an uploaded file and attach it.

        1. Check size and extension against `policy` (default: the current one)
        2. Write to file storage
        3. Attach; if that fails (missing document included) the stored file is deleted
        4. A file previously attached to the document is deleted
        """
        (policy or self._upload_policy()).check(filename, len(data))

        stored = self._storage.save(data, filename, content_type or "application/octet-stream")
        try:
            previous = self.get_document(document_id)
            document = self.attach_file(
                document_id,
                FileMetadata(
                    file_name=stored.original_name,
                    file_size=stored.size_bytes,
                    file_path=stored.path,
                    mime_type=stored.content_type,
                ),
                uploaded_by=uploaded_by,
            )
        except Exception:
            self._discard(stored.path)
            raise

        if previous.file_path and previous.file_path != stored.path:
            self._discard(previous.file_path)

        logger.info(f"Uploaded '{filename}' ({stored.size_bytes} bytes) to document {document_id}")
        return document

    def remove_file(self, document_id: int) -> PackageDocument:
        """Delete the attached file and revert completion."""
        document = self.get_document(document_id)
        if document.file_path and self._storage.exists(document.file_path):
            self._storage.delete(document.file_path)

        fields = {key: None for key in FILE_FIELDS}
        fields["is_completed"] = False
        updated = self._apply(document_id, fields)
        logger.info(f"Removed file from document {document_id}")
        return updated

    def open_file(self, document_id: int) -> DocumentFile:
        document = self.get_document(document_id)
        if not document.file_path or not self._storage.exists(document.file_path):
            raise NotFoundError("File", document_id)
        return DocumentFile(
            content=self._storage.read(document.file_path),
            file_name=document.file_name or PurePath(document.file_path).name,
            mime_type=document.mime_type or "application/octet-stream",
        )

    # ── Helpers ───────────────────────────────────────────

    def _apply(self, document_id: int, fields: dict) -> PackageDocument:
        updated = self._repo.update_document(document_id, fields)
        if updated is None:
            raise NotFoundError("Document", document_id)
        return updated

    def _discard(self, path: str) -> None:
        try:
            self._storage.delete(path)
        except StorageError as e:
            logger.warning(f"Could not delete stored file {path}: {e}")
