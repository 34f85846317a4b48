"""
One-off database backup.

SQLite files are copied with the online backup API, PostgreSQL databases are
dumped with pg_dump. Backups older than the retention window are pruned.

Usage:
    python -m scripts.backup_database [--backup-dir backups] [--retention-days 30] [--list]
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from permit_tracker.config.settings import get_settings
from permit_tracker.infrastructure.db.backup import BackupError, DatabaseBackup
from permit_tracker.infrastructure.db.database import Database


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Back up the permit tracker database")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy database URL")
    parser.add_argument("--backup-dir", default=settings.backup_dir, help="Backup directory")
    parser.add_argument("--retention-days", type=int, default=settings.backup_retention_days,
                        help="Delete backups older than this many days")
    parser.add_argument("--list", action="store_true", help="List existing backups and exit")
    args = parser.parse_args()

    database = Database(args.database_url)
    backup = DatabaseBackup(database, args.backup_dir, retention_days=args.retention_days)

    if args.list:
        for path in backup.list_backups():
            print(f"  {path.name}  {path.stat().st_size / (1024 * 1024):.2f} MB")
        return

    print(f"Backing up {database.display_url} ...")
    try:
        result = backup.create_backup()
    except BackupError as e:
        print(f"Backup failed: {e}")
        sys.exit(1)
    finally:
        database.dispose()

    print(f"  → Saved to: {result.backup_file}")
    print(f"  → Size: {result.size / (1024 * 1024):.2f} MB")
    if result.pruned:
        print(f"  → Pruned {result.pruned} backups older than {args.retention_days} days")


if __name__ == "__main__":
    main()
