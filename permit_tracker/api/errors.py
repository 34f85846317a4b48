"""
Maps domain errors onto HTTP responses.

400 invalid input, 403 missing role, 404 missing resource, 409 illegal status
change or conflicting data, 500 persistence/storage failures (details only
in the log).
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from permit_tracker.core.errors import (
    ConflictError,
    IllegalTransitionError,
    NotFoundError,
    PermissionDeniedError,
    PermitTrackerError,
    RepositoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def handle_validation(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message, "errors": exc.errors})


async def handle_request_validation(request: Request, exc: RequestValidationError):
    errors = {_field_name(tuple(e["loc"])): e["msg"] for e in exc.errors()}
    return JSONResponse(status_code=400, content={"detail": "Invalid request data", "errors": errors})


async def handle_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def handle_illegal_transition(request: Request, exc: IllegalTransitionError):
    return JSONResponse(
        status_code=409,
        content={
            "detail": exc.message,
            "current_status": exc.current,
            "target_status": exc.target,
            "reason": exc.reason,
        },
    )


async def handle_conflict(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
    return JSONResponse(status_code=403, content={"detail": exc.message})


async def handle_repository(request: Request, exc: RepositoryError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def handle_other(request: Request, exc: PermitTrackerError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(IllegalTransitionError, handle_illegal_transition)
    app.add_exception_handler(PermissionDeniedError, handle_permission_denied)
    app.add_exception_handler(ConflictError, handle_conflict)
    app.add_exception_handler(RepositoryError, handle_repository)
    app.add_exception_handler(PermitTrackerError, handle_other)
