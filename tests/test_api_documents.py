import asyncio
import io
from pathlib import Path

import pytest
from fastapi import UploadFile

from permit_tracker.api.auth import CurrentUser
from permit_tracker.api.routes.documents import upload_file
from permit_tracker.core.errors import ValidationError
from permit_tracker.core.use_cases.manage_documents import DocumentChecklistManager, UploadPolicy


def _first_doc(package):
    return package["documents"][0]


def test_add_and_list_documents(client, created_package):
    package_id = created_package["id"]
    response = client.post(f"/api/packages/{package_id}/documents", json={
        "document_name": "Arborist Letter",
        "is_required": False,
    })
    assert response.status_code == 201
    doc = response.json()
    assert doc["document_name"] == "Arborist Letter"
    assert doc["is_completed"] is False

    docs = client.get(f"/api/packages/{package_id}/documents").json()
    assert len(docs) == 13
    assert client.get(f"/api/packages/{package_id}").json()["total_documents"] == 13

    assert client.post("/api/packages/999/documents", json={"document_name": "X"}).status_code == 404
    assert client.post(f"/api/packages/{package_id}/documents", json={}).status_code == 400


def test_toggle_completion(client, created_package):
    doc = _first_doc(created_package)
    response = client.patch(f"/api/documents/{doc['id']}", json={"is_completed": True})
    assert response.status_code == 200
    assert response.json()["is_completed"] is True
    assert response.json()["uploaded_at"] is not None

    response = client.patch(f"/api/documents/{doc['id']}", json={"is_completed": "definitely"})
    assert response.status_code == 400


def test_upload_download_and_remove_file(client, created_package, app_settings):
    doc = _first_doc(created_package)
    response = client.post(
        f"/api/documents/{doc['id']}/upload",
        files={"file": ("site plan.pdf", b"%PDF-1.4 site plan", "application/pdf")},
    )
    assert response.status_code == 200, response.text
    uploaded = response.json()
    assert uploaded["is_completed"] is True
    assert uploaded["has_file"] is True
    assert uploaded["file_name"] == "site plan.pdf"
    assert uploaded["file_size"] == len(b"%PDF-1.4 site plan")
    assert uploaded["uploaded_by"] == "dev-admin"
    assert "file_path" not in uploaded
    assert len(list(Path(app_settings.upload_dir).iterdir())) == 1

    response = client.get(f"/api/documents/{doc['id']}/download")
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 site plan"
    assert response.headers["content-type"] == "application/pdf"
    assert "attachment" in response.headers["content-disposition"]

    response = client.delete(f"/api/documents/{doc['id']}/file")
    assert response.status_code == 200
    cleared = response.json()
    assert cleared["is_completed"] is False
    assert cleared["file_name"] is None
    assert list(Path(app_settings.upload_dir).iterdir()) == []

    assert client.get(f"/api/documents/{doc['id']}/download").status_code == 404


def test_upload_rejections_leave_no_files(client, created_package, app_settings):
    doc = _first_doc(created_package)
    response = client.post(
        f"/api/documents/{doc['id']}/upload",
        files={"file": ("payload.exe", b"MZ", "application/octet-stream")},
    )
    assert response.status_code == 400
    assert "file" in response.json()["errors"]

    response = client.post(
        "/api/documents/999/upload",
        files={"file": ("plans.pdf", b"%PDF", "application/pdf")},
    )
    assert response.status_code == 404

    assert list(Path(app_settings.upload_dir).iterdir()) == []


def test_upload_limit_follows_runtime_setting(client, created_package):
    settings = client.get("/api/settings/category/uploads").json()
    max_size = next(s for s in settings if s["key"] == "max_file_size")
    assert client.put(f"/api/settings/{max_size['id']}", json={"value": "4"}).status_code == 200

    doc = _first_doc(created_package)
    response = client.post(
        f"/api/documents/{doc['id']}/upload",
        files={"file": ("plans.pdf", b"12345", "application/pdf")},
    )
    assert response.status_code == 400


def test_delete_document(client, created_package):
    doc = _first_doc(created_package)
    assert client.delete(f"/api/documents/{doc['id']}").status_code == 204
    assert client.delete(f"/api/documents/{doc['id']}").status_code == 404
    assert client.get(f"/api/packages/{created_package['id']}").json()["total_documents"] == 11


def test_upload_reads_at_most_one_byte_past_the_limit(repo, storage, packages, sample_fields):
    view = packages.create(sample_fields)
    manager = DocumentChecklistManager(repo, storage, upload_policy=lambda: UploadPolicy(max_file_size=10))
    body = io.BytesIO(b"x" * 10_000)
    upload = UploadFile(body, filename="plans.pdf")

    with pytest.raises(ValidationError) as exc:
        asyncio.run(upload_file(
            view.documents[0].id,
            file=upload,
            documents=manager,
            user=CurrentUser(id="u1", role="user"),
        ))

    assert "file" in exc.value.errors
    assert body.tell() == 11
    assert storage.files == {}


def test_oversize_upload_is_rejected_over_http(client, created_package, app_settings):
    settings = client.get("/api/settings/category/uploads").json()
    max_size = next(s for s in settings if s["key"] == "max_file_size")
    client.put(f"/api/settings/{max_size['id']}", json={"value": "1024"})

    doc = _first_doc(created_package)
    response = client.post(
        f"/api/documents/{doc['id']}/upload",
        files={"file": ("plans.pdf", b"x" * 200_000, "application/pdf")},
    )

    assert response.status_code == 400
    assert "1024" in response.json()["errors"]["file"]
    assert list(Path(app_settings.upload_dir).iterdir()) == []
