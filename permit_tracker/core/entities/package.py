"""
Entity: Permit Package

A construction/permit project tracked through the submission workflow.
Pure model, no framework or database dependency.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from permit_tracker.core.clock import utcnow


class PackageStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    READY_TO_SUBMIT = "ready_to_submit"
    SUBMITTED = "submitted"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title().replace("To ", "to ")


PERMIT_TYPES = (
    "Building Permit",
    "Demolition Permit",
    "Electrical Permit",
    "Plumbing Permit",
    "Mechanical Permit",
    "Fire Permit",
    "Sign Permit",
    "Fence Permit",
    "Zoning Permit",
    "Other",
)

# Fields a caller may set on create/update. Timestamps and id are server-owned.
PACKAGE_FIELDS = (
    "project_name",
    "address",
    "permit_type",
    "status",
    "description",
    "client_name",
    "client_email",
    "client_phone",
    "estimated_value",
    "notes",
    "created_by",
    "assigned_to",
)

REQUIRED_PACKAGE_FIELDS = ("project_name", "address", "permit_type")


@dataclass
class PermitPackage:
    """Domain entity: permit package."""
    id: int
    project_name: str
    address: str
    permit_type: str
    status: PackageStatus = PackageStatus.DRAFT
    description: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    estimated_value: int | None = None      # cents
    notes: str | None = None
    created_by: str | None = None
    assigned_to: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    submitted_at: datetime | None = None

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match on project name, address and client."""
        needle = term.lower()
        haystacks = (self.project_name, self.address, self.client_name)
        return any(h and needle in h.lower() for h in haystacks)
