from datetime import datetime

import pytest

from permit_tracker.core.entities.package import PackageStatus
from permit_tracker.core.errors import ConflictError, RepositoryError
from permit_tracker.core.use_cases.manage_documents import DocumentChecklistManager
from permit_tracker.core.use_cases.manage_packages import PackageLifecycleManager
from permit_tracker.core.use_cases.manage_settings import SettingsManager
from permit_tracker.core.use_cases.manage_users import UserApprovalManager
from permit_tracker.infrastructure.db.database import Database
from permit_tracker.infrastructure.db.repository import (
    SqlAlchemyPackageRepository,
    SqlAlchemySettingsRepository,
    SqlAlchemyUserRepository,
)
from permit_tracker.infrastructure.storage.local_storage import LocalFileStorage


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'repo.db'}")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def sql_repo(database):
    return SqlAlchemyPackageRepository(database)


def _package_fields(**overrides):
    now = datetime(2024, 1, 1, 8, 0)
    return {
        "project_name": "Warehouse",
        "address": "789 Industrial Blvd",
        "permit_type": "Building Permit",
        "status": "draft",
        "created_at": now,
        "updated_at": now,
        **overrides,
    }


def test_round_trip_package_and_documents(sql_repo):
    package = sql_repo.create_package(_package_fields(estimated_value=150_000_000))
    assert package.id is not None
    assert package.status is PackageStatus.DRAFT
    assert package.estimated_value == 150_000_000

    sql_repo.create_document({"package_id": package.id, "document_name": "Site Plan", "is_required": True})
    sql_repo.create_document({"package_id": package.id, "document_name": "Building Plans", "is_required": True})
    names = [d.document_name for d in sql_repo.get_documents_for_package(package.id)]
    assert names == ["Building Plans", "Site Plan"]


def test_update_and_missing_rows(sql_repo):
    package = sql_repo.create_package(_package_fields())
    updated = sql_repo.update_package(package.id, {"status": "in_progress", "notes": "call client"})
    assert updated.status is PackageStatus.IN_PROGRESS
    assert updated.notes == "call client"

    assert sql_repo.get_package(999) is None
    assert sql_repo.update_package(999, {"notes": "x"}) is None
    assert sql_repo.delete_package(999) is False
    assert sql_repo.get_document(999) is None
    assert sql_repo.update_document(999, {"notes": "x"}) is None
    assert sql_repo.delete_document(999) is False


def test_unknown_column_is_a_repository_error(sql_repo):
    with pytest.raises(RepositoryError):
        sql_repo.create_package(_package_fields(colour="blue"))


def test_delete_package_cascades(sql_repo):
    package = sql_repo.create_package(_package_fields())
    doc = sql_repo.create_document({"package_id": package.id, "document_name": "Site Plan"})
    assert sql_repo.delete_package(package.id) is True
    assert sql_repo.get_document(doc.id) is None


def test_count_by_status(sql_repo):
    sql_repo.create_package(_package_fields())
    sql_repo.create_package(_package_fields())
    sql_repo.create_package(_package_fields(status="submitted"))
    assert sql_repo.count_by_status() == {"draft": 2, "submitted": 1}


def test_list_orders_newest_first(sql_repo):
    old = sql_repo.create_package(_package_fields(project_name="Old"))
    new = sql_repo.create_package(_package_fields(
        project_name="New", created_at=datetime(2024, 6, 1), updated_at=datetime(2024, 6, 1),
    ))
    assert [p.id for p in sql_repo.list_packages()] == [new.id, old.id]


def test_workflow_against_sqlite(database, sql_repo, tmp_path):
    packages = PackageLifecycleManager(sql_repo)
    documents = DocumentChecklistManager(sql_repo, LocalFileStorage(tmp_path / "uploads"))

    view = packages.create({"project_name": "Deck", "address": "1 Elm St", "permit_type": "Building Permit"})
    assert view.progress.total_documents == 12

    for doc in view.documents:
        documents.toggle_completion(doc.id, True)
    packages.transition(view.package.id, "ready_to_submit")
    submitted = packages.transition(view.package.id, "submitted")
    assert submitted.package.submitted_at is not None
    assert submitted.progress.progress_percentage == 100


def test_settings_repository(database):
    manager = SettingsManager(SqlAlchemySettingsRepository(database))
    assert manager.seed_defaults() == 4
    assert manager.seed_defaults() == 0
    setting = manager.get("auto_approve_users")
    assert setting.as_bool() is False
    updated = manager.update_setting(setting.id, {"value": "true"}, updated_by="admin")
    assert updated.as_bool() is True
    assert [s.key for s in manager.list_settings("security")] == ["auto_approve_users"]


def test_user_repository(database):
    users = UserApprovalManager(SqlAlchemyUserRepository(database))
    jane = users.register({"email": "Jane@Example.com", "first_name": "Jane", "last_name": "Doe"})
    assert jane.id is not None
    assert jane.approval_status == "pending"

    with pytest.raises(ConflictError):
        users.register({"email": "jane@example.com", "first_name": "J", "last_name": "D"})

    approved = users.approve(jane.id, approved_by="admin")
    assert approved.is_approved
    assert users.list_pending() == []
    assert [u.email for u in users.list_users("approved")] == ["jane@example.com"]


def test_package_delete_removes_uploaded_files(database, sql_repo, tmp_path):
    storage = LocalFileStorage(tmp_path / "uploads")
    packages = PackageLifecycleManager(sql_repo, storage)
    documents = DocumentChecklistManager(sql_repo, storage)

    view = packages.create({"project_name": "Deck", "address": "1 Elm St", "permit_type": "Building Permit"})
    documents.upload_file(view.documents[0].id, b"%PDF-1.4", "plans.pdf", "application/pdf")
    assert any((tmp_path / "uploads").iterdir())

    packages.delete(view.package.id)

    assert list((tmp_path / "uploads").iterdir()) == []
