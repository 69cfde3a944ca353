"""HTTP tests for project endpoints."""

from uuid import uuid4

import pytest

pytestmark = pytest.mark.integration


async def _create_project(client, name: str = "Roadmap", **extra) -> dict:
    response = await client.post("/api/v1/projects", json={"name": name, **extra})
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_and_get_project(client):
    created = await _create_project(client, "  Roadmap  ", description="Q3 plans")

    assert created["name"] == "Roadmap"
    assert created["description"] == "Q3 plans"

    response = await client.get(f"/api/v1/projects/{created['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


async def test_list_projects(client):
    await _create_project(client, "Alpha")
    await _create_project(client, "Beta")

    response = await client.get("/api/v1/projects")

    assert response.status_code == 200
    assert sorted(p["name"] for p in response.json()) == ["Alpha", "Beta"]


async def test_duplicate_name_conflict(client):
    await _create_project(client, "Roadmap")

    response = await client.post("/api/v1/projects", json={"name": "Roadmap"})

    assert response.status_code == 409
    data = response.json()
    assert "already exists" in data["detail"]
    assert data["request_id"]


async def test_blank_name_is_request_validation_error(client):
    response = await client.post("/api/v1/projects", json={"name": "   "})
    assert response.status_code == 422


async def test_rename_conflict_excludes_self(client):
    first = await _create_project(client, "First")
    await _create_project(client, "Second")

    same = await client.patch(f"/api/v1/projects/{first['id']}", json={"name": "First"})
    clash = await client.patch(f"/api/v1/projects/{first['id']}", json={"name": "Second"})

    assert same.status_code == 200
    assert clash.status_code == 409


async def test_unknown_project_404(client):
    response = await client.get(f"/api/v1/projects/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["request_id"]


async def test_delete_project_cascades_to_features(client):
    project = await _create_project(client)
    root = await client.post(
        "/api/v1/features", json={"project_id": project["id"], "title": "Root"}
    )
    await client.post(
        "/api/v1/features",
        json={"project_id": project["id"], "title": "Child", "parent_id": root.json()["id"]},
    )

    response = await client.delete(f"/api/v1/projects/{project['id']}")
    assert response.status_code == 204

    assert (await client.get(f"/api/v1/projects/{project['id']}")).status_code == 404
    features = await client.get("/api/v1/features", params={"project_id": project["id"]})
    assert features.json() == []
