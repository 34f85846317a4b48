"""
Routes: user registration and the approval queue.

Registering is open to anyone; the account waits in the queue unless the
`auto_approve_users` setting is on. Everything else is admin-only.
"""

from fastapi import APIRouter, Depends, status

from permit_tracker.api.auth import CurrentUser, require_admin
from permit_tracker.api.container import get_users
from permit_tracker.api.schemas.requests import (
    UserRegisterRequest,
    UserRejectRequest,
    UserUpdateRequest,
)
from permit_tracker.api.schemas.responses import UserResponse
from permit_tracker.core.use_cases.manage_users import UserApprovalManager

router = APIRouter()


@router.post("/users/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(body: UserRegisterRequest, users: UserApprovalManager = Depends(get_users)):
    return UserResponse.model_validate(users.register(body.model_dump(exclude_unset=True)))


# ── Administration ──

@router.get("/users", response_model=list[UserResponse], dependencies=[Depends(require_admin)])
def list_users(approval_status: str | None = None, users: UserApprovalManager = Depends(get_users)):
    return [UserResponse.model_validate(u) for u in users.list_users(approval_status)]


@router.get("/users/pending", response_model=list[UserResponse], dependencies=[Depends(require_admin)])
def list_pending_users(users: UserApprovalManager = Depends(get_users)):
    return [UserResponse.model_validate(u) for u in users.list_pending()]


@router.get("/users/{user_id}", response_model=UserResponse, dependencies=[Depends(require_admin)])
def get_user(user_id: int, users: UserApprovalManager = Depends(get_users)):
    return UserResponse.model_validate(users.get(user_id))


@router.post("/users/{user_id}/approve", response_model=UserResponse)
def approve_user(
    user_id: int,
    users: UserApprovalManager = Depends(get_users),
    admin: CurrentUser = Depends(require_admin),
):
    return UserResponse.model_validate(users.approve(user_id, approved_by=admin.id))


@router.post("/users/{user_id}/reject", response_model=UserResponse)
def reject_user(
    user_id: int,
    body: UserRejectRequest | None = None,
    users: UserApprovalManager = Depends(get_users),
    admin: CurrentUser = Depends(require_admin),
):
    reason = body.reason if body else None
    return UserResponse.model_validate(users.reject(user_id, rejected_by=admin.id, reason=reason))


@router.put("/users/{user_id}", response_model=UserResponse, dependencies=[Depends(require_admin)])
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    users: UserApprovalManager = Depends(get_users),
):
    return UserResponse.model_validate(users.update_user(user_id, body.model_dump(exclude_unset=True)))
