"""
Database backups.

SQLite databases are copied with the sqlite3 online backup API; PostgreSQL
ones are dumped with `pg_dump`. Old backups beyond the retention window are
pruned after each run.
"""

import logging
import os
import sqlite3
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from sqlalchemy.engine import make_url

from permit_tracker.core.clock import utcnow
from permit_tracker.core.errors import PermitTrackerError
from permit_tracker.infrastructure.db.database import Database

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "permits_backup_"


class BackupError(PermitTrackerError):
    """A backup could not be written."""


@dataclass
class BackupResult:
    backup_file: str
    size: int
    timestamp: datetime
    pruned: int = 0


class DatabaseBackup:
    def __init__(
        self,
        database: Database,
        backup_dir: str | Path,
        retention_days: int = 30,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._db = database
        self._dir = Path(backup_dir)
        self._retention = timedelta(days=retention_days)
        self._clock = clock

    @property
    def directory(self) -> Path:
        return self._dir

    def create_backup(self) -> BackupResult:
        now = self._clock()
        self._dir.mkdir(parents=True, exist_ok=True)
        stamp = now.strftime("%Y-%m-%dT%H-%M-%S-%f")

        if self._db.is_sqlite:
            target = self._dir / f"{BACKUP_PREFIX}{stamp}.db"
            self._backup_sqlite(target)
        else:
            target = self._dir / f"{BACKUP_PREFIX}{stamp}.sql"
            self._backup_pg_dump(target)

        size = target.stat().st_size
        pruned = self.prune_old_backups()
        logger.info(f"Backup written to {target} ({size} bytes), pruned {pruned} old backups")
        return BackupResult(backup_file=str(target), size=size, timestamp=now, pruned=pruned)

    def prune_old_backups(self) -> int:
        """Delete backups older than the retention window."""
        if not self._dir.exists():
            return 0
        cutoff = (self._clock() - self._retention).timestamp()
        removed = 0
        for path in self._dir.glob(f"{BACKUP_PREFIX}*"):
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        return removed

    def list_backups(self) -> list[Path]:
        if not self._dir.exists():
            return []
        return sorted(self._dir.glob(f"{BACKUP_PREFIX}*"), reverse=True)

    def _backup_sqlite(self, target: Path) -> None:
        raw = self._db.engine.raw_connection()
        try:
            source = raw.driver_connection
            dest = sqlite3.connect(str(target))
            try:
                source.backup(dest)
            finally:
                dest.close()
        except sqlite3.Error as e:
            raise BackupError(f"SQLite backup failed: {e}") from e
        finally:
            raw.close()

    def _backup_pg_dump(self, target: Path) -> None:
        url = make_url(self._db.url)
        env = {**os.environ, "PGPASSWORD": url.password or ""}
        cmd = [
            "pg_dump",
            "-h", url.host or "localhost",
            "-p", str(url.port or 5432),
            "-U", url.username or "",
            "-d", url.database or "",
            "-f", str(target),
        ]
        try:
            subprocess.run(cmd, env=env, check=True, capture_output=True)
        except FileNotFoundError as e:
            raise BackupError("pg_dump is not installed or not on PATH") from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode(errors="replace").strip()
            raise BackupError(f"pg_dump failed: {stderr}") from e
