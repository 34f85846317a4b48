"""
Pydantic schemas — request bodies.

Shape checks only. Business rules (required values, status legality) are
enforced by the use cases so that every entry point shares them.
"""

from pydantic import BaseModel, ConfigDict

from permit_tracker.core.entities.package import PackageStatus
from permit_tracker.core.entities.user import UserRole


class _Body(BaseModel):
    model_config = ConfigDict(extra="forbid")


class PackageCreateRequest(_Body):
    project_name: str
    address: str
    permit_type: str
    status: PackageStatus | None = None
    description: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    estimated_value: int | None = None
    notes: str | None = None
    assigned_to: str | None = None


class PackageUpdateRequest(_Body):
    project_name: str | None = None
    address: str | None = None
    permit_type: str | None = None
    status: PackageStatus | None = None
    description: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    estimated_value: int | None = None
    notes: str | None = None
    assigned_to: str | None = None


class DocumentCreateRequest(_Body):
    document_name: str
    is_required: bool = True
    notes: str | None = None


class DocumentUpdateRequest(_Body):
    document_name: str | None = None
    is_required: bool | None = None
    is_completed: bool | None = None
    notes: str | None = None


class SettingUpdateRequest(_Body):
    value: str | None = None
    description: str | None = None
    category: str | None = None


class UserRegisterRequest(_Body):
    email: str
    first_name: str
    last_name: str
    company: str | None = None
    phone: str | None = None


class UserUpdateRequest(_Body):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    phone: str | None = None
    role: UserRole | None = None


class UserRejectRequest(_Body):
    reason: str | None = None
