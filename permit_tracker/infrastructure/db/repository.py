"""
SQLAlchemy repositories.

Handles:
  - Packages and their checklist documents (IPackageRepository)
  - Runtime settings (ISettingsRepository)
  - User accounts (IUserRepository)

Every public method is one session/transaction. SQLAlchemy failures are
logged and re-raised as RepositoryError.
"""

import logging
from contextlib import contextmanager
from collections.abc import Iterator

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from permit_tracker.core.entities.document import PackageDocument
from permit_tracker.core.entities.package import PermitPackage
from permit_tracker.core.entities.setting import SystemSetting
from permit_tracker.core.entities.user import User
from permit_tracker.core.errors import RepositoryError
from permit_tracker.core.interfaces.package_repository import IPackageRepository
from permit_tracker.core.interfaces.settings_repository import ISettingsRepository
from permit_tracker.core.interfaces.user_repository import IUserRepository
from permit_tracker.infrastructure.db.database import Database
from permit_tracker.infrastructure.db.models import (
    DocumentRecord,
    PackageRecord,
    SettingRecord,
    UserRecord,
)

logger = logging.getLogger(__name__)


class _SqlRepository:
    def __init__(self, database: Database):
        self._db = database

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self._db.session() as db:
                yield db
        except SQLAlchemyError as e:
            logger.error(f"Database error while trying to {action}: {e}")
            raise RepositoryError(f"Failed to {action}") from e

    @staticmethod
    def _assign(record, fields: dict) -> None:
        for key, value in fields.items():
            if not hasattr(type(record), key):
                raise RepositoryError(f"Unknown column '{key}' for {type(record).__name__}")
            setattr(record, key, value)


class SqlAlchemyPackageRepository(_SqlRepository, IPackageRepository):
    """Repository for permit packages and documents."""

    # ── Packages ──

    def get_package(self, package_id: int) -> PermitPackage | None:
        with self._session("fetch package") as db:
            record = db.get(PackageRecord, package_id)
            return record.to_entity() if record else None

    def list_packages(self) -> list[PermitPackage]:
        with self._session("list packages") as db:
            records = (
                db.query(PackageRecord)
                .order_by(desc(PackageRecord.created_at), desc(PackageRecord.id))
                .all()
            )
            return [r.to_entity() for r in records]

    def create_package(self, fields: dict) -> PermitPackage:
        with self._session("create package") as db:
            record = PackageRecord()
            self._assign(record, fields)
            db.add(record)
            db.flush()
            logger.debug(f"Inserted {record!r}")
            return record.to_entity()

    def update_package(self, package_id: int, fields: dict) -> PermitPackage | None:
        with self._session("update package") as db:
            record = db.get(PackageRecord, package_id)
            if record is None:
                return None
            self._assign(record, fields)
            db.flush()
            return record.to_entity()

    def delete_package(self, package_id: int) -> bool:
        with self._session("delete package") as db:
            record = db.get(PackageRecord, package_id)
            if record is None:
                return False
            # ORM cascade removes the documents too
            db.delete(record)
            return True

    def count_by_status(self) -> dict[str, int]:
        with self._session("count packages") as db:
            rows = (
                db.query(PackageRecord.status, func.count(PackageRecord.id))
                .group_by(PackageRecord.status)
                .all()
            )
            return {status: count for status, count in rows}

    # ── Documents ──

    def get_documents_for_package(self, package_id: int) -> list[PackageDocument]:
        with self._session("fetch documents") as db:
            records = (
                db.query(DocumentRecord)
                .filter_by(package_id=package_id)
                .order_by(DocumentRecord.document_name, DocumentRecord.id)
                .all()
            )
            return [r.to_entity() for r in records]

    def get_document(self, document_id: int) -> PackageDocument | None:
        with self._session("fetch document") as db:
            record = db.get(DocumentRecord, document_id)
            return record.to_entity() if record else None

    def create_document(self, fields: dict) -> PackageDocument:
        with self._session("create document") as db:
            record = DocumentRecord()
            self._assign(record, fields)
            db.add(record)
            db.flush()
            return record.to_entity()

    def update_document(self, document_id: int, fields: dict) -> PackageDocument | None:
        with self._session("update document") as db:
            record = db.get(DocumentRecord, document_id)
            if record is None:
                return None
            self._assign(record, fields)
            db.flush()
            return record.to_entity()

    def delete_document(self, document_id: int) -> bool:
        with self._session("delete document") as db:
            record = db.get(DocumentRecord, document_id)
            if record is None:
                return False
            db.delete(record)
            return True


class SqlAlchemySettingsRepository(_SqlRepository, ISettingsRepository):
    """Repository for runtime settings."""

    def get_setting(self, setting_id: int) -> SystemSetting | None:
        with self._session("fetch setting") as db:
            record = db.get(SettingRecord, setting_id)
            return record.to_entity() if record else None

    def get_by_key(self, key: str) -> SystemSetting | None:
        with self._session("fetch setting") as db:
            record = db.query(SettingRecord).filter_by(key=key).first()
            return record.to_entity() if record else None

    def list_settings(self, category: str | None = None) -> list[SystemSetting]:
        with self._session("list settings") as db:
            query = db.query(SettingRecord)
            if category:
                query = query.filter_by(category=category)
            records = query.order_by(SettingRecord.category, SettingRecord.key).all()
            return [r.to_entity() for r in records]

    def create_setting(self, fields: dict) -> SystemSetting:
        with self._session("create setting") as db:
            record = SettingRecord()
            self._assign(record, fields)
            db.add(record)
            db.flush()
            return record.to_entity()

    def update_setting(self, setting_id: int, fields: dict) -> SystemSetting | None:
        with self._session("update setting") as db:
            record = db.get(SettingRecord, setting_id)
            if record is None:
                return None
            self._assign(record, fields)
            db.flush()
            return record.to_entity()


class SqlAlchemyUserRepository(_SqlRepository, IUserRepository):
    """Repository for registered users."""

    def get_user(self, user_id: int) -> User | None:
        with self._session("fetch user") as db:
            record = db.get(UserRecord, user_id)
            return record.to_entity() if record else None

    def get_by_email(self, email: str) -> User | None:
        with self._session("fetch user") as db:
            record = (
                db.query(UserRecord)
                .filter(func.lower(UserRecord.email) == email.lower())
                .first()
            )
            return record.to_entity() if record else None

    def list_users(self, approval_status: str | None = None) -> list[User]:
        with self._session("list users") as db:
            query = db.query(UserRecord)
            if approval_status:
                query = query.filter_by(approval_status=approval_status)
            records = query.order_by(desc(UserRecord.created_at), desc(UserRecord.id)).all()
            return [r.to_entity() for r in records]

    def create_user(self, fields: dict) -> User:
        with self._session("create user") as db:
            record = UserRecord()
            self._assign(record, fields)
            db.add(record)
            db.flush()
            logger.debug(f"Inserted {record!r}")
            return record.to_entity()

    def update_user(self, user_id: int, fields: dict) -> User | None:
        with self._session("update user") as db:
            record = db.get(UserRecord, user_id)
            if record is None:
                return None
            self._assign(record, fields)
            db.flush()
            return record.to_entity()
