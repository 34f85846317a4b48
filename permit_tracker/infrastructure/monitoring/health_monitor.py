"""
Health monitor.

Checks database connectivity, that the upload and backup directories are
writable, and disk usage. Unhealthy when any check fails or the disk is more
than 90% full.
"""

import logging
import platform
import shutil
import time
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from permit_tracker.core.clock import utcnow
from permit_tracker.infrastructure.db.database import Database

logger = logging.getLogger(__name__)

DISK_ALERT_PERCENTAGE = 90


@dataclass
class DatabaseHealth:
    connected: bool
    response_time_ms: float = 0.0
    error: str | None = None


@dataclass
class DiskSpace:
    total_gb: int = 0
    free_gb: int = 0
    used_gb: int = 0
    percentage: int = 0


@dataclass
class StorageHealth:
    uploads_writable: bool
    backups_writable: bool
    disk_space: DiskSpace = field(default_factory=DiskSpace)


@dataclass
class SystemHealth:
    uptime_seconds: float
    python_version: str


@dataclass
class HealthStatus:
    database: DatabaseHealth
    storage: StorageHealth
    system: SystemHealth
    last_check: datetime = field(default_factory=utcnow)

    @property
    def healthy(self) -> bool:
        return (
            self.database.connected
            and self.storage.uploads_writable
            and self.storage.backups_writable
            and self.storage.disk_space.percentage < DISK_ALERT_PERCENTAGE
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["healthy"] = self.healthy
        return data


class HealthMonitor:
    def __init__(self, database: Database, upload_dir: str | Path, backup_dir: str | Path):
        self._db = database
        self._upload_dir = Path(upload_dir)
        self._backup_dir = Path(backup_dir)
        self._started = time.monotonic()
        self._last: HealthStatus | None = None

    def check_health(self) -> HealthStatus:
        status = HealthStatus(
            database=self._check_database(),
            storage=StorageHealth(
                uploads_writable=self._is_writable(self._upload_dir),
                backups_writable=self._is_writable(self._backup_dir),
                disk_space=self._disk_space(),
            ),
            system=SystemHealth(
                uptime_seconds=round(time.monotonic() - self._started, 1),
                python_version=platform.python_version(),
            ),
        )
        if not status.healthy:
            logger.warning(f"Health check failed: {status.to_dict()}")
        self._last = status
        return status

    @property
    def last_check(self) -> HealthStatus | None:
        return self._last

    def _check_database(self) -> DatabaseHealth:
        try:
            return DatabaseHealth(connected=True, response_time_ms=self._db.ping())
        except SQLAlchemyError as e:
            return DatabaseHealth(connected=False, error=str(e))

    @staticmethod
    def _is_writable(directory: Path) -> bool:
        marker = directory / ".health-check"
        try:
            directory.mkdir(parents=True, exist_ok=True)
            marker.write_text("ok")
            marker.unlink()
            return True
        except OSError:
            return False

    def _disk_space(self) -> DiskSpace:
        try:
            usage = shutil.disk_usage(self._upload_dir if self._upload_dir.exists() else ".")
        except OSError:
            return DiskSpace()
        gb = 1024 ** 3
        return DiskSpace(
            total_gb=round(usage.total / gb),
            free_gb=round(usage.free / gb),
            used_gb=round(usage.used / gb),
            percentage=round(usage.used / usage.total * 100) if usage.total else 0,
        )
