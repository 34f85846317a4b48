"""
Pydantic schemas — Response models for the API.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from permit_tracker.core.entities.user import ApprovalStatus, UserRole


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    package_id: int
    document_name: str
    is_required: bool
    is_completed: bool
    file_name: str | None = None
    file_size: int | None = None
    mime_type: str | None = None
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None
    notes: str | None = None
    has_file: bool = False


class PackageResponse(BaseModel):
    id: int
    project_name: str
    address: str
    permit_type: str
    status: str
    description: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    estimated_value: int | None = None
    notes: str | None = None
    created_by: str | None = None
    assigned_to: str | None = None
    created_at: datetime
    updated_at: datetime
    submitted_at: datetime | None = None

    # derived, never stored
    completed_documents: int = 0
    total_documents: int = 0
    progress_percentage: int = 0
    documents: list[DocumentResponse] = []

    @classmethod
    def from_view(cls, view) -> "PackageResponse":
        package = view.package
        return cls(
            id=package.id,
            project_name=package.project_name,
            address=package.address,
            permit_type=package.permit_type,
            status=getattr(package.status, "value", package.status),
            description=package.description,
            client_name=package.client_name,
            client_email=package.client_email,
            client_phone=package.client_phone,
            estimated_value=package.estimated_value,
            notes=package.notes,
            created_by=package.created_by,
            assigned_to=package.assigned_to,
            created_at=package.created_at,
            updated_at=package.updated_at,
            submitted_at=package.submitted_at,
            completed_documents=view.progress.completed_documents,
            total_documents=view.progress.total_documents,
            progress_percentage=view.progress.progress_percentage,
            documents=[DocumentResponse.model_validate(d) for d in view.documents],
        )


class PackageStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    draft: int
    in_progress: int
    ready_to_submit: int
    submitted: int


class PackageListResponse(BaseModel):
    packages: list[PackageResponse]
    stats: PackageStatsResponse


class StatusOptionResponse(BaseModel):
    status: str
    label: str
    allowed: bool
    reason: str | None = None


class StatusOverviewResponse(BaseModel):
    current: str
    suggested: str | None = None
    options: list[StatusOptionResponse]


class SettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    value: str
    description: str | None = None
    category: str
    is_system: bool
    updated_by: str | None = None
    updated_at: datetime


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    company: str | None = None
    phone: str | None = None
    role: UserRole
    approval_status: ApprovalStatus
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class BackupResponse(BaseModel):
    backup_file: str
    size: int
    timestamp: datetime
    pruned: int = 0


class SystemStatusResponse(BaseModel):
    version: str
    environment: str
    database: str
    upload_dir: str
    backup_dir: str
    backups: int
    stats: PackageStatsResponse
    health: dict
