def _new_package(client, **overrides):
    body = {
        "project_name": "Deck",
        "address": "1 Elm St",
        "permit_type": "Building Permit",
        **overrides,
    }
    response = client.post("/api/packages", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _complete_all(client, package):
    for doc in package["documents"]:
        response = client.patch(f"/api/documents/{doc['id']}", json={"is_completed": True})
        assert response.status_code == 200


def test_create_package(client):
    package = _new_package(client, estimated_value=7_500_000, client_email="john@example.com")

    assert package["status"] == "draft"
    assert package["total_documents"] == 12
    assert package["completed_documents"] == 0
    assert package["progress_percentage"] == 0
    assert package["estimated_value"] == 7_500_000
    assert package["created_by"] == "dev-admin"
    assert package["submitted_at"] is None
    assert len(package["documents"]) == 12


def test_create_package_validation(client):
    response = client.post("/api/packages", json={"project_name": "Deck"})
    assert response.status_code == 400
    body = response.json()
    assert "address" in body["errors"]
    assert "permit_type" in body["errors"]

    response = client.post("/api/packages", json={"project_name": " ", "address": "1 Elm", "permit_type": "Other"})
    assert response.status_code == 400
    assert "project_name" in response.json()["errors"]

    response = client.post("/api/packages", json={
        "project_name": "Deck", "address": "1 Elm", "permit_type": "Other", "status": "archived",
    })
    assert response.status_code == 400


def test_get_and_list_packages(client):
    deck = _new_package(client)
    sign = _new_package(client, project_name="Storefront Sign", permit_type="Sign Permit", client_name="Acme")

    response = client.get(f"/api/packages/{deck['id']}")
    assert response.status_code == 200
    assert response.json()["project_name"] == "Deck"

    listing = client.get("/api/packages").json()
    assert {p["id"] for p in listing["packages"]} == {deck["id"], sign["id"]}
    assert listing["stats"] == {"total": 2, "draft": 2, "in_progress": 0, "ready_to_submit": 0, "submitted": 0}

    filtered = client.get("/api/packages", params={"permit_type": "Sign Permit"}).json()
    assert [p["id"] for p in filtered["packages"]] == [sign["id"]]
    assert filtered["stats"]["total"] == 2

    searched = client.get("/api/packages", params={"search": "acme", "status": "all"}).json()
    assert [p["id"] for p in searched["packages"]] == [sign["id"]]


def test_missing_package_is_404(client):
    assert client.get("/api/packages/999").status_code == 404
    assert client.patch("/api/packages/999", json={"notes": "x"}).status_code == 404
    assert client.delete("/api/packages/999").status_code == 404


def test_status_workflow(client):
    package = _new_package(client)
    package_id = package["id"]

    for doc in package["documents"][:6]:
        client.patch(f"/api/documents/{doc['id']}", json={"is_completed": True})
    assert client.get(f"/api/packages/{package_id}").json()["progress_percentage"] == 50

    response = client.patch(f"/api/packages/{package_id}", json={"status": "ready_to_submit"})
    assert response.status_code == 409
    body = response.json()
    assert body["current_status"] == "draft"
    assert body["target_status"] == "ready_to_submit"
    assert body["reason"] == "documents incomplete (6 remaining)"

    _complete_all(client, package)
    response = client.patch(f"/api/packages/{package_id}", json={"status": "ready_to_submit"})
    assert response.status_code == 200
    assert response.json()["status"] == "ready_to_submit"

    response = client.patch(f"/api/packages/{package_id}", json={"status": "submitted"})
    assert response.status_code == 200
    assert response.json()["submitted_at"] is not None

    response = client.patch(f"/api/packages/{package_id}", json={"status": "draft"})
    assert response.status_code == 409
    assert response.json()["reason"] == "package has already been submitted"

    stats = client.get("/api/stats").json()
    assert stats["submitted"] == 1


def test_status_options(client):
    package = _new_package(client)
    body = client.get(f"/api/packages/{package['id']}/status-options").json()
    assert body["current"] == "draft"
    assert body["suggested"] == "in_progress"
    options = {o["status"]: o for o in body["options"]}
    assert options["in_progress"]["allowed"] is True
    assert options["ready_to_submit"]["allowed"] is False
    assert options["ready_to_submit"]["label"] == "Ready to Submit"


def test_update_package_fields(client):
    package = _new_package(client)
    response = client.patch(f"/api/packages/{package['id']}", json={"assigned_to": "user-1", "notes": "rush"})
    assert response.status_code == 200
    body = response.json()
    assert body["assigned_to"] == "user-1"
    assert body["notes"] == "rush"
    assert body["project_name"] == "Deck"

    response = client.patch(f"/api/packages/{package['id']}", json={"owner": "someone"})
    assert response.status_code == 400


def test_delete_package(client):
    package = _new_package(client)
    assert client.delete(f"/api/packages/{package['id']}").status_code == 204
    assert client.get(f"/api/packages/{package['id']}").status_code == 404
    doc_id = package["documents"][0]["id"]
    assert client.patch(f"/api/documents/{doc_id}", json={"notes": "x"}).status_code == 404
