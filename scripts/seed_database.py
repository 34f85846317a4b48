"""
Seed the database with sample permit packages.

Creates the tables, inserts the default system settings and three sample
Building Permit packages at different stages. Does nothing when packages
already exist.

Usage:
    python -m scripts.seed_database [--database-url sqlite:///permit_tracker.db]
"""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from permit_tracker.config.settings import get_settings
from permit_tracker.core.entities.package import PackageStatus
from permit_tracker.core.use_cases.manage_documents import DocumentChecklistManager
from permit_tracker.core.use_cases.manage_packages import PackageLifecycleManager
from permit_tracker.core.use_cases.manage_settings import SettingsManager
from permit_tracker.infrastructure.db.database import Database
from permit_tracker.infrastructure.db.repository import (
    SqlAlchemyPackageRepository,
    SqlAlchemySettingsRepository,
)
from permit_tracker.infrastructure.storage.local_storage import LocalFileStorage

SEED_USER = "seed-script"

SAMPLE_PACKAGES = [
    {
        "fields": {
            "project_name": "Downtown Office Complex - Phase 1",
            "address": "123 Main Street, Downtown",
            "permit_type": "Building Permit",
            "description": "New construction of 5-story office building",
            "client_name": "ABC Development Corp",
            "client_email": "contact@abcdev.com",
            "client_phone": "(555) 123-4567",
            "estimated_value": 250_000_000,     # $2.5M
        },
        "status": PackageStatus.IN_PROGRESS,
        "completed": "half",
    },
    {
        "fields": {
            "project_name": "Residential Renovation - Smith Property",
            "address": "456 Oak Avenue, Suburb",
            "permit_type": "Building Permit",
            "description": "Kitchen and bathroom renovation",
            "client_name": "John Smith",
            "client_email": "john.smith@email.com",
            "client_phone": "(555) 987-6543",
            "estimated_value": 7_500_000,       # $75K
        },
        "status": PackageStatus.READY_TO_SUBMIT,
        "completed": "all",
    },
    {
        "fields": {
            "project_name": "Industrial Warehouse Expansion",
            "address": "789 Industrial Blvd, Industrial District",
            "permit_type": "Building Permit",
            "description": "Warehouse expansion and loading dock addition",
            "client_name": "Industrial Solutions LLC",
            "client_email": "permits@industrialsolutions.com",
            "client_phone": "(555) 456-7890",
            "estimated_value": 150_000_000,     # $1.5M
        },
        "status": PackageStatus.DRAFT,
        "completed": 2,
    },
]


def seed(database: Database, upload_dir: str) -> int:
    """Insert settings and sample packages. Returns the number of packages created."""
    database.init_db()
    package_repo = SqlAlchemyPackageRepository(database)
    packages = PackageLifecycleManager(package_repo)
    documents = DocumentChecklistManager(package_repo, LocalFileStorage(upload_dir))

    SettingsManager(SqlAlchemySettingsRepository(database)).seed_defaults(updated_by=SEED_USER)

    if packages.stats().total > 0:
        print("  → Database already has packages, skipping")
        return 0

    for sample in SAMPLE_PACKAGES:
        view = packages.create(sample["fields"], created_by=SEED_USER)

        total = len(view.documents)
        if sample["completed"] == "all":
            to_complete = total
        elif sample["completed"] == "half":
            to_complete = total // 2
        else:
            to_complete = min(sample["completed"], total)
        for doc in view.documents[:to_complete]:
            documents.toggle_completion(doc.id, True)

        if sample["status"] is not PackageStatus.DRAFT:
            view = packages.transition(view.package.id, sample["status"])

        print(f"  → #{view.package.id} {view.package.project_name} "
              f"[{view.package.status.value}] {view.progress.progress_percentage}%")

    return len(SAMPLE_PACKAGES)


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed the permit tracker database")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy database URL")
    parser.add_argument("--upload-dir", default=settings.upload_dir, help="Upload directory")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    database = Database(args.database_url)
    print(f"Seeding {database.display_url} ...")
    try:
        created = seed(database, args.upload_dir)
    finally:
        database.dispose()
    print(f"Done: {created} sample packages created")


if __name__ == "__main__":
    main()
