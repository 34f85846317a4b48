"""
API key authentication.

One strategy only: a static key in the `X-API-Key` header. The admin key
grants the admin role, the regular key the user role. With no keys configured
every request runs as a development admin, and `X-User-Id` may name the
caller; once keys are configured the key alone decides who the caller is.
The core only ever sees the resulting `CurrentUser`.
"""

import secrets
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request, status

from permit_tracker.api.container import get_container
from permit_tracker.core.errors import PermissionDeniedError

ROLE_USER = "user"
ROLE_ADMIN = "admin"

DEV_USER_ID = "dev-admin"
ADMIN_KEY_USER_ID = "admin"
USER_KEY_USER_ID = "api"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _matches(given: str, expected: str) -> bool:
    return bool(expected) and secrets.compare_digest(given.encode(), expected.encode())


def get_current_user(
    request: Request,
    x_api_key: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> CurrentUser:
    settings = get_container(request).settings
    if not settings.api_key and not settings.admin_api_key:
        return CurrentUser(id=x_user_id or DEV_USER_ID, role=ROLE_ADMIN)

    if x_api_key:
        if _matches(x_api_key, settings.admin_api_key):
            return CurrentUser(id=ADMIN_KEY_USER_ID, role=ROLE_ADMIN)
        if _matches(x_api_key, settings.api_key):
            return CurrentUser(id=USER_KEY_USER_ID, role=ROLE_USER)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Missing or invalid API key",
    )


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise PermissionDeniedError("Administrator role required")
    return user
