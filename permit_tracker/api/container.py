"""
Composition root.

Builds the concrete adapters once per process from configuration and wires
them into the use cases. Routes reach the use cases through the `get_*`
dependencies below; nothing else holds global state.
"""

from dataclasses import dataclass

from fastapi import Request

from permit_tracker.config.settings import Settings
from permit_tracker.core.use_cases.manage_documents import DocumentChecklistManager, UploadPolicy
from permit_tracker.core.use_cases.manage_packages import PackageLifecycleManager
from permit_tracker.core.use_cases.manage_settings import SettingsManager
from permit_tracker.core.use_cases.manage_users import UserApprovalManager
from permit_tracker.infrastructure.db.backup import DatabaseBackup
from permit_tracker.infrastructure.db.database import Database
from permit_tracker.infrastructure.db.repository import (
    SqlAlchemyPackageRepository,
    SqlAlchemySettingsRepository,
    SqlAlchemyUserRepository,
)
from permit_tracker.infrastructure.monitoring.health_monitor import HealthMonitor
from permit_tracker.infrastructure.storage.local_storage import LocalFileStorage


@dataclass
class Container:
    settings: Settings
    database: Database
    file_storage: LocalFileStorage
    packages: PackageLifecycleManager
    documents: DocumentChecklistManager
    system_settings: SettingsManager
    users: UserApprovalManager
    health: HealthMonitor
    backup: DatabaseBackup

    def startup(self) -> None:
        self.database.init_db()
        self.system_settings.seed_defaults()

    def shutdown(self) -> None:
        self.database.dispose()


def build_container(settings: Settings) -> Container:
    """Build use cases with concrete adapters."""
    database = Database(settings.database_url)
    package_repo = SqlAlchemyPackageRepository(database)
    settings_repo = SqlAlchemySettingsRepository(database)
    file_storage = LocalFileStorage(settings.upload_dir)

    system_settings = SettingsManager(settings_repo)
    static_policy = UploadPolicy(
        max_file_size=settings.max_file_size,
        allowed_extensions=list(settings.allowed_file_extensions),
    )

    return Container(
        settings=settings,
        database=database,
        file_storage=file_storage,
        packages=PackageLifecycleManager(package_repo, file_storage),
        documents=DocumentChecklistManager(
            package_repo,
            file_storage,
            upload_policy=lambda: system_settings.upload_policy(static_policy),
        ),
        system_settings=system_settings,
        users=UserApprovalManager(
            SqlAlchemyUserRepository(database),
            auto_approve=system_settings.auto_approve_users,
        ),
        health=HealthMonitor(database, settings.upload_dir, settings.backup_dir),
        backup=DatabaseBackup(
            database,
            settings.backup_dir,
            retention_days=settings.backup_retention_days,
        ),
    )


# ── FastAPI dependencies ──

def get_container(request: Request) -> Container:
    return request.app.state.container


def get_packages(request: Request) -> PackageLifecycleManager:
    return get_container(request).packages


def get_documents(request: Request) -> DocumentChecklistManager:
    return get_container(request).documents


def get_system_settings(request: Request) -> SettingsManager:
    return get_container(request).system_settings


def get_users(request: Request) -> UserApprovalManager:
    return get_container(request).users
