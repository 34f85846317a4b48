"""
Entity: User Account

A person registered with the permit desk. New registrations wait for an
administrator's approval unless the `auto_approve_users` setting is on.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from permit_tracker.core.clock import utcnow


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


DEFAULT_REJECTION_REASON = "No reason provided"

# Profile fields a registrant supplies; an administrator may also change `role`.
USER_PROFILE_FIELDS = ("email", "first_name", "last_name", "company", "phone")
REQUIRED_USER_FIELDS = ("email", "first_name", "last_name")


@dataclass
class User:
    """Domain entity: user account."""
    id: int
    email: str
    first_name: str
    last_name: str
    company: str | None = None
    phone: str | None = None
    role: UserRole = UserRole.USER
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED
