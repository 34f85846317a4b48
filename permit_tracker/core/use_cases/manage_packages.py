"""
Use Case: Package Lifecycle

Create / read / list / update / delete permit packages. Ties the Progress
Calculator and the Status Machine together: every status change goes through
`check_transition` before anything is written.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from permit_tracker.core.clock import utcnow
from permit_tracker.core.entities.document import PackageDocument
from permit_tracker.core.entities.package import (
    PACKAGE_FIELDS,
    REQUIRED_PACKAGE_FIELDS,
    PackageStatus,
    PermitPackage,
)
from permit_tracker.core.entities.templates import get_template
from permit_tracker.core.errors import IllegalTransitionError, NotFoundError, StorageError, ValidationError
from permit_tracker.core.interfaces.package_repository import IPackageRepository
from permit_tracker.core.interfaces.storage_service import IFileStorage
from permit_tracker.core.workflow.progress import Progress, compute_progress
from permit_tracker.core.workflow.status_machine import (
    StatusOption,
    check_transition,
    status_options,
    suggest_next_status,
    transition_side_effects,
)

logger = logging.getLogger(__name__)

_TEXT_FIELDS = set(PACKAGE_FIELDS) - {"status", "estimated_value"}


@dataclass
class PackageView:
    """Package plus its documents and derived progress."""
    package: PermitPackage
    documents: list[PackageDocument]
    progress: Progress


@dataclass
class PackageStats:
    total: int = 0
    draft: int = 0
    in_progress: int = 0
    ready_to_submit: int = 0
    submitted: int = 0


@dataclass
class PackageListing:
    packages: list[PackageView] = field(default_factory=list)
    stats: PackageStats = field(default_factory=PackageStats)


@dataclass
class StatusOverview:
    current: PackageStatus
    suggested: PackageStatus | None
    options: list[StatusOption]


def validate_package_fields(fields: dict, *, partial: bool) -> dict:
    """
    Check shape and required values of package input.

    Args:
        fields: Caller-supplied values keyed by entity attribute name.
        partial: True for updates (only supplied keys are checked).

    Returns:
        A cleaned copy with the status coerced to PackageStatus.

    Raises:
        ValidationError with one message per offending field.
    """
    errors: dict[str, str] = {}
    cleaned: dict = {}

    for key in fields:
        if key not in PACKAGE_FIELDS:
            errors[key] = "Unknown field"

    for key in REQUIRED_PACKAGE_FIELDS:
        if key not in fields:
            if not partial:
                errors[key] = "Required"
            continue
        value = fields[key]
        if not isinstance(value, str) or not value.strip():
            errors[key] = "Must be a non-empty string"
        else:
            cleaned[key] = value.strip()

    for key in _TEXT_FIELDS - set(REQUIRED_PACKAGE_FIELDS):
        if key in fields:
            value = fields[key]
            if value is not None and not isinstance(value, str):
                errors[key] = "Must be a string"
            else:
                cleaned[key] = value

    if "estimated_value" in fields:
        value = fields["estimated_value"]
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            errors["estimated_value"] = "Must be an integer amount in cents"
        elif value is not None and value < 0:
            errors["estimated_value"] = "Must not be negative"
        else:
            cleaned["estimated_value"] = value

    if fields.get("status") is not None:
        try:
            cleaned["status"] = PackageStatus(fields["status"])
        except ValueError:
            allowed = ", ".join(s.value for s in PackageStatus)
            errors["status"] = f"Must be one of: {allowed}"

    if errors:
        raise ValidationError("Invalid package data", errors)
    return cleaned


class PackageLifecycleManager:
    """
    Use Case: package lifecycle.

    Dependency Injection: the repository, file storage and clock come through
    the constructor. Without a file storage, deleting a package leaves its
    documents' files in place.
    """

    def __init__(
        self,
        repository: IPackageRepository,
        file_storage: IFileStorage | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._storage = file_storage
        self._clock = clock

    # ── Read ──────────────────────────────────────────────

    def get(self, package_id: int) -> PackageView:
        package = self._require_package(package_id)
        return self._view(package)

    def list_packages(
        self,
        status: str | None = None,
        permit_type: str | None = None,
        search: str | None = None,
    ) -> PackageListing:
        """
        All packages with progress, optionally filtered.

        `"all"` (or empty) disables a filter. Stats always cover every package,
        not just the filtered ones.
        """
        packages = self._repo.list_packages()

        if status and status != "all":
            packages = [p for p in packages if PackageStatus(p.status).value == status]
        if permit_type and permit_type != "all":
            packages = [p for p in packages if p.permit_type == permit_type]
        if search:
            packages = [p for p in packages if p.matches_search(search)]

        return PackageListing(
            packages=[self._view(p) for p in packages],
            stats=self.stats(),
        )

    def stats(self) -> PackageStats:
        counts = self._repo.count_by_status()
        return PackageStats(
            total=sum(counts.values()),
            draft=counts.get(PackageStatus.DRAFT.value, 0),
            in_progress=counts.get(PackageStatus.IN_PROGRESS.value, 0),
            ready_to_submit=counts.get(PackageStatus.READY_TO_SUBMIT.value, 0),
            submitted=counts.get(PackageStatus.SUBMITTED.value, 0),
        )

    def status_overview(self, package_id: int) -> StatusOverview:
        view = self.get(package_id)
        current = PackageStatus(view.package.status)
        return StatusOverview(
            current=current,
            suggested=suggest_next_status(current, view.progress),
            options=status_options(current, view.progress),
        )

    # ── Write ─────────────────────────────────────────────

    def create(self, fields: dict, created_by: str | None = None) -> PackageView:
        """
        Create a package and instantiate its permit type's checklist.

        1. Validate required fields
        2. Default status to draft (a package created as submitted is stamped)
        3. Persist
        4. One incomplete document per template entry
        """
        cleaned = validate_package_fields(fields, partial=False)
        status = cleaned.get("status") or PackageStatus.DRAFT
        now = self._clock()

        record = {
            **cleaned,
            "status": status.value,
            "created_at": now,
            "updated_at": now,
            **transition_side_effects(status, now),
        }
        if created_by and not record.get("created_by"):
            record["created_by"] = created_by

        package = self._repo.create_package(record)

        template = get_template(package.permit_type)
        for entry in template:
            self._repo.create_document({
                "package_id": package.id,
                "document_name": entry.document_name,
                "is_required": entry.is_required,
                "is_completed": False,
            })

        logger.info(
            f"Created package {package.id} '{package.project_name}' "
            f"[{package.permit_type}] with {len(template)} template documents"
        )
        return self.get(package.id)

    def update(self, package_id: int, fields: dict) -> PackageView:
        """
        Merge a partial update onto a package.

        A status different from the current one must pass the status machine;
        otherwise IllegalTransitionError is raised and nothing is written.
        """
        package = self._require_package(package_id)
        cleaned = validate_package_fields(fields, partial=True)
        now = self._clock()

        target = cleaned.get("status")
        current = PackageStatus(package.status)
        if target is not None:
            if target is current:
                cleaned.pop("status")
            else:
                progress = compute_progress(self._repo.get_documents_for_package(package_id))
                check = check_transition(current, target, progress)
                if not check.allowed:
                    logger.warning(
                        f"Rejected transition of package {package_id}: "
                        f"{current.value} -> {target.value} ({check.reason})"
                    )
                    raise IllegalTransitionError(current.value, target.value, check.reason)
                cleaned["status"] = target.value
                cleaned.update(transition_side_effects(target, now))
                logger.info(f"Package {package_id} moved {current.value} -> {target.value}")

        cleaned["updated_at"] = now
        updated = self._repo.update_package(package_id, cleaned)
        if updated is None:
            raise NotFoundError("Package", package_id)
        return self._view(updated)

    def transition(self, package_id: int, target: PackageStatus | str) -> PackageView:
        return self.update(package_id, {"status": target})

    def delete(self, package_id: int) -> None:
        """Delete a package, its documents and the files attached to them."""
        file_paths = [
            d.file_path for d in self._repo.get_documents_for_package(package_id) if d.file_path
        ]
        if not self._repo.delete_package(package_id):
            raise NotFoundError("Package", package_id)

        if self._storage is not None:
            for path in file_paths:
                try:
                    self._storage.delete(path)
                except StorageError as e:
                    logger.warning(f"Could not delete stored file {path}: {e}")
        logger.info(f"Deleted package {package_id}, its documents and {len(file_paths)} files")

    # ── Helpers ───────────────────────────────────────────

    def _require_package(self, package_id: int) -> PermitPackage:
        package = self._repo.get_package(package_id)
        if package is None:
            raise NotFoundError("Package", package_id)
        return package

    def _view(self, package: PermitPackage) -> PackageView:
        documents = self._repo.get_documents_for_package(package.id)
        return PackageView(
            package=package,
            documents=documents,
            progress=compute_progress(documents),
        )
