"""
Use Case: User Approval

Registration of user accounts and the administrator's approval queue.

Flow:
  1. Someone registers; the account is `pending`
     (or `approved` straight away when `auto_approve_users` is on)
  2. An administrator approves or rejects it, with an optional reason
  3. An administrator may later edit the profile or role, or reverse the decision
"""

import logging
from collections.abc import Callable
from datetime import datetime

from permit_tracker.core.clock import utcnow
from permit_tracker.core.entities.user import (
    DEFAULT_REJECTION_REASON,
    REQUIRED_USER_FIELDS,
    USER_PROFILE_FIELDS,
    ApprovalStatus,
    User,
    UserRole,
)
from permit_tracker.core.errors import ConflictError, NotFoundError, ValidationError
from permit_tracker.core.interfaces.user_repository import IUserRepository

logger = logging.getLogger(__name__)

AUTO_APPROVER = "system"


def validate_user_fields(fields: dict, *, partial: bool, allow_role: bool) -> dict:
    errors: dict[str, str] = {}
    cleaned: dict = {}
    allowed = USER_PROFILE_FIELDS + (("role",) if allow_role else ())

    for key in fields:
        if key not in allowed:
            errors[key] = "Unknown field"

    for key in REQUIRED_USER_FIELDS:
        if key not in fields:
            if not partial:
                errors[key] = "Required"
            continue
        value = fields[key]
        if not isinstance(value, str) or not value.strip():
            errors[key] = "Must be a non-empty string"
        else:
            cleaned[key] = value.strip()

    if "email" in cleaned:
        email = cleaned["email"].lower()
        local, _, domain = email.partition("@")
        if not local or "." not in domain or " " in email:
            errors["email"] = "Must be an email address"
        else:
            cleaned["email"] = email

    for key in ("company", "phone"):
        if key in fields:
            value = fields[key]
            if value is not None and not isinstance(value, str):
                errors[key] = "Must be a string"
            else:
                cleaned[key] = value

    if allow_role and fields.get("role") is not None:
        try:
            cleaned["role"] = UserRole(fields["role"]).value
        except ValueError:
            errors["role"] = "Must be one of: " + ", ".join(r.value for r in UserRole)

    if errors:
        raise ValidationError("Invalid user data", errors)
    return cleaned


class UserApprovalManager:
    """
    Use Case: user registration and approval.

    Dependency Injection: the repository, the auto-approve switch and the clock
    come through the constructor. The switch is read per registration so that
    a changed setting applies immediately.
    """

    def __init__(
        self,
        repository: IUserRepository,
        auto_approve: Callable[[], bool] = lambda: False,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._auto_approve = auto_approve
        self._clock = clock

    def register(self, fields: dict) -> User:
        cleaned = validate_user_fields(fields, partial=False, allow_role=False)
        if self._repo.get_by_email(cleaned["email"]) is not None:
            raise ConflictError("User already exists")

        now = self._clock()
        record = {
            **cleaned,
            "role": UserRole.USER.value,
            "approval_status": ApprovalStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        }
        if self._auto_approve():
            record.update({
                "approval_status": ApprovalStatus.APPROVED.value,
                "approved_by": AUTO_APPROVER,
                "approved_at": now,
            })

        user = self._repo.create_user(record)
        logger.info(f"Registered user {user.id} <{user.email}> ({user.approval_status.value})")
        return user

    def get(self, user_id: int) -> User:
        user = self._repo.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def list_users(self, approval_status: str | None = None) -> list[User]:
        if approval_status is not None:
            try:
                approval_status = ApprovalStatus(approval_status).value
            except ValueError:
                allowed = ", ".join(s.value for s in ApprovalStatus)
                raise ValidationError(
                    "Invalid filter", {"approval_status": f"Must be one of: {allowed}"}
                )
        return self._repo.list_users(approval_status)

    def list_pending(self) -> list[User]:
        return self._repo.list_users(ApprovalStatus.PENDING.value)

    def approve(self, user_id: int, approved_by: str) -> User:
        user = self._apply(user_id, {
            "approval_status": ApprovalStatus.APPROVED.value,
            "approved_by": approved_by,
            "approved_at": self._clock(),
            "rejection_reason": None,
        })
        logger.info(f"User {user_id} approved by {approved_by}")
        return user

    def reject(self, user_id: int, rejected_by: str, reason: str | None = None) -> User:
        user = self._apply(user_id, {
            "approval_status": ApprovalStatus.REJECTED.value,
            "approved_by": rejected_by,
            "approved_at": self._clock(),
            "rejection_reason": (reason or "").strip() or DEFAULT_REJECTION_REASON,
        })
        logger.info(f"User {user_id} rejected by {rejected_by}: {user.rejection_reason}")
        return user

    def update_user(self, user_id: int, fields: dict) -> User:
        """Administrator edit of profile fields and role."""
        cleaned = validate_user_fields(fields, partial=True, allow_role=True)
        if "email" in cleaned:
            other = self._repo.get_by_email(cleaned["email"])
            if other is not None and other.id != user_id:
                raise ConflictError("User already exists")
        return self._apply(user_id, cleaned)

    def _apply(self, user_id: int, fields: dict) -> User:
        fields["updated_at"] = self._clock()
        user = self._repo.update_user(user_id, fields)
        if user is None:
            raise NotFoundError("User", user_id)
        return user
