"""
Routes: health, system status and on-demand backups.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from permit_tracker.api.auth import CurrentUser, get_current_user, require_admin
from permit_tracker.api.container import Container, get_container
from permit_tracker.api.schemas.responses import (
    BackupResponse,
    PackageStatsResponse,
    SystemStatusResponse,
)
from permit_tracker.config.settings import APP_VERSION

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health(container: Container = Depends(get_container)):
    """Database, storage and disk checks. 503 when anything is unhealthy."""
    result = container.health.check_health()
    body = result.to_dict()
    body["status"] = "healthy" if result.healthy else "unhealthy"
    return JSONResponse(
        status_code=200 if result.healthy else 503,
        content=jsonable_encoder(body),
    )


@router.get("/system/status", response_model=SystemStatusResponse)
def system_status(
    container: Container = Depends(get_container),
    user: CurrentUser = Depends(get_current_user),
):
    health_status = container.health.last_check or container.health.check_health()
    return SystemStatusResponse(
        version=APP_VERSION,
        environment=container.settings.env,
        database=container.database.display_url,
        upload_dir=str(container.file_storage.root),
        backup_dir=str(container.backup.directory),
        backups=len(container.backup.list_backups()),
        stats=PackageStatsResponse.model_validate(container.packages.stats()),
        health=jsonable_encoder(health_status.to_dict()),
    )


@router.post("/system/backup", response_model=BackupResponse)
def create_backup(
    container: Container = Depends(get_container),
    admin: CurrentUser = Depends(require_admin),
):
    logger.info(f"Manual backup requested by {admin.id}")
    result = container.backup.create_backup()
    return BackupResponse(
        backup_file=result.backup_file,
        size=result.size,
        timestamp=result.timestamp,
        pruned=result.pruned,
    )
