import sys
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


REPO_ROOT = Path(__file__).resolve().parents[1]

# Prefer repo sources over any installed package.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from permit_tracker.api.main import create_app  # noqa: E402
from permit_tracker.config.settings import Settings  # noqa: E402
from permit_tracker.core.entities.document import PackageDocument  # noqa: E402
from permit_tracker.core.entities.package import PackageStatus, PermitPackage  # noqa: E402
from permit_tracker.core.entities.setting import SystemSetting  # noqa: E402
from permit_tracker.core.entities.user import ApprovalStatus, User, UserRole  # noqa: E402
from permit_tracker.core.errors import StorageError  # noqa: E402
from permit_tracker.core.interfaces.package_repository import IPackageRepository  # noqa: E402
from permit_tracker.core.interfaces.settings_repository import ISettingsRepository  # noqa: E402
from permit_tracker.core.interfaces.storage_service import IFileStorage, StoredFile  # noqa: E402
from permit_tracker.core.interfaces.user_repository import IUserRepository  # noqa: E402
from permit_tracker.core.use_cases.manage_documents import DocumentChecklistManager  # noqa: E402
from permit_tracker.core.use_cases.manage_packages import PackageLifecycleManager  # noqa: E402
from permit_tracker.core.use_cases.manage_settings import SettingsManager  # noqa: E402
from permit_tracker.core.use_cases.manage_users import UserApprovalManager  # noqa: E402


# ── In-memory adapters ──

class FakeClock:
    def __init__(self, start: datetime = datetime(2024, 3, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 60) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class InMemoryPackageRepository(IPackageRepository):
    def __init__(self):
        self.packages: dict[int, PermitPackage] = {}
        self.documents: dict[int, PackageDocument] = {}
        self._next_package_id = 1
        self._next_document_id = 1

    @staticmethod
    def _coerce(fields: dict) -> dict:
        fields = dict(fields)
        if "status" in fields:
            fields["status"] = PackageStatus(fields["status"])
        return fields

    def get_package(self, package_id):
        package = self.packages.get(package_id)
        return replace(package) if package else None

    def list_packages(self):
        ordered = sorted(self.packages.values(), key=lambda p: (p.created_at, p.id), reverse=True)
        return [replace(p) for p in ordered]

    def create_package(self, fields):
        package = PermitPackage(id=self._next_package_id, **self._coerce(fields))
        self.packages[package.id] = package
        self._next_package_id += 1
        return replace(package)

    def update_package(self, package_id, fields):
        if package_id not in self.packages:
            return None
        self.packages[package_id] = replace(self.packages[package_id], **self._coerce(fields))
        return replace(self.packages[package_id])

    def delete_package(self, package_id):
        if self.packages.pop(package_id, None) is None:
            return False
        for doc_id in [d.id for d in self.documents.values() if d.package_id == package_id]:
            del self.documents[doc_id]
        return True

    def count_by_status(self):
        counts: dict[str, int] = {}
        for package in self.packages.values():
            key = PackageStatus(package.status).value
            counts[key] = counts.get(key, 0) + 1
        return counts

    def get_documents_for_package(self, package_id):
        docs = [d for d in self.documents.values() if d.package_id == package_id]
        return [replace(d) for d in sorted(docs, key=lambda d: (d.document_name, d.id))]

    def get_document(self, document_id):
        document = self.documents.get(document_id)
        return replace(document) if document else None

    def create_document(self, fields):
        document = PackageDocument(id=self._next_document_id, **fields)
        self.documents[document.id] = document
        self._next_document_id += 1
        return replace(document)

    def update_document(self, document_id, fields):
        if document_id not in self.documents:
            return None
        self.documents[document_id] = replace(self.documents[document_id], **fields)
        return replace(self.documents[document_id])

    def delete_document(self, document_id):
        return self.documents.pop(document_id, None) is not None


class InMemorySettingsRepository(ISettingsRepository):
    def __init__(self):
        self.settings: dict[int, SystemSetting] = {}
        self._next_id = 1

    def get_setting(self, setting_id):
        return self.settings.get(setting_id)

    def get_by_key(self, key):
        return next((s for s in self.settings.values() if s.key == key), None)

    def list_settings(self, category=None):
        found = [s for s in self.settings.values() if category is None or s.category == category]
        return sorted(found, key=lambda s: (s.category, s.key))

    def create_setting(self, fields):
        setting = SystemSetting(id=self._next_id, **fields)
        self.settings[setting.id] = setting
        self._next_id += 1
        return setting

    def update_setting(self, setting_id, fields):
        if setting_id not in self.settings:
            return None
        self.settings[setting_id] = replace(self.settings[setting_id], **fields)
        return self.settings[setting_id]


class InMemoryUserRepository(IUserRepository):
    def __init__(self):
        self.users: dict[int, User] = {}
        self._next_id = 1

    @staticmethod
    def _coerce(fields: dict) -> dict:
        fields = dict(fields)
        if "role" in fields:
            fields["role"] = UserRole(fields["role"])
        if "approval_status" in fields:
            fields["approval_status"] = ApprovalStatus(fields["approval_status"])
        return fields

    def get_user(self, user_id):
        user = self.users.get(user_id)
        return replace(user) if user else None

    def get_by_email(self, email):
        return next((replace(u) for u in self.users.values() if u.email.lower() == email.lower()), None)

    def list_users(self, approval_status=None):
        found = [u for u in self.users.values() if approval_status is None or u.approval_status == approval_status]
        return [replace(u) for u in sorted(found, key=lambda u: (u.created_at, u.id), reverse=True)]

    def create_user(self, fields):
        user = User(id=self._next_id, **self._coerce(fields))
        self.users[user.id] = user
        self._next_id += 1
        return replace(user)

    def update_user(self, user_id, fields):
        if user_id not in self.users:
            return None
        self.users[user_id] = replace(self.users[user_id], **self._coerce(fields))
        return replace(self.users[user_id])


class InMemoryFileStorage(IFileStorage):
    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.fail_deletes = False
        self._counter = 0

    def save(self, data, original_name, content_type):
        self._counter += 1
        path = f"file-{self._counter}{Path(original_name).suffix.lower()}"
        self.files[path] = data
        return StoredFile(path=path, original_name=original_name, size_bytes=len(data), content_type=content_type)

    def read(self, path):
        return self.files[path]

    def delete(self, path):
        if self.fail_deletes:
            raise StorageError(f"Could not delete {path}")
        return self.files.pop(path, None) is not None

    def exists(self, path):
        return path in self.files


# ── Core fixtures ──

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repo():
    return InMemoryPackageRepository()


@pytest.fixture
def storage():
    return InMemoryFileStorage()


@pytest.fixture
def settings_repo():
    return InMemorySettingsRepository()


@pytest.fixture
def packages(repo, storage, clock):
    return PackageLifecycleManager(repo, storage, clock=clock)


@pytest.fixture
def documents(repo, storage, clock):
    return DocumentChecklistManager(repo, storage, clock=clock)


@pytest.fixture
def system_settings(settings_repo, clock):
    return SettingsManager(settings_repo, clock=clock)


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def users(user_repo, clock):
    return UserApprovalManager(user_repo, clock=clock)


@pytest.fixture
def sample_fields():
    return {
        "project_name": "Downtown Office Complex",
        "address": "123 Main Street",
        "permit_type": "Building Permit",
        "client_name": "ABC Development Corp",
        "estimated_value": 250_000_000,
    }


# ── API fixtures ──

@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        _env_file=None,
        env="test",
        debug=False,
        database_url=f"sqlite:///{tmp_path / 'permits.db'}",
        upload_dir=str(tmp_path / "uploads"),
        backup_dir=str(tmp_path / "backups"),
        api_key="",
        admin_api_key="",
    )


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture
def secured_settings(app_settings):
    return app_settings.model_copy(update={"api_key": "user-key", "admin_api_key": "admin-key"})


@pytest.fixture
def secured_client(secured_settings):
    with TestClient(create_app(secured_settings)) as test_client:
        yield test_client


@pytest.fixture
def created_package(client):
    response = client.post("/api/packages", json={
        "project_name": "Smith Renovation",
        "address": "456 Oak Avenue",
        "permit_type": "Building Permit",
    })
    assert response.status_code == 201
    return response.json()
