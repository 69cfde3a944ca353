"""HTTP tests for feature endpoints."""

from uuid import uuid4

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture
async def project_id(client) -> str:
    response = await client.post("/api/v1/projects", json={"name": "P1"})
    return response.json()["id"]


async def _create_feature(client, project_id: str, title: str, **extra) -> dict:
    response = await client.post(
        "/api/v1/features", json={"project_id": project_id, "title": title, **extra}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_cycle_rejected_then_cascade_delete(client, project_id):
    f1 = await _create_feature(client, project_id, "F1")
    f2 = await _create_feature(client, project_id, "F2", parent_id=f1["id"])

    cycle = await client.patch(f"/api/v1/features/{f1['id']}", json={"parent_id": f2["id"]})
    assert cycle.status_code == 400
    assert cycle.json()["detail"] == "Cannot set a parent that would create a circular reference"

    deleted = await client.delete(f"/api/v1/features/{f1['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"id": f1["id"], "deleted_count": 2}

    listing = await client.get("/api/v1/features", params={"project_id": project_id})
    assert listing.json() == []
    assert (await client.get(f"/api/v1/features/{f2['id']}")).status_code == 404


async def test_create_in_unknown_project(client):
    response = await client.post(
        "/api/v1/features", json={"project_id": str(uuid4()), "title": "Lost"}
    )
    assert response.status_code == 404


async def test_accounting_done_without_accounting_rejected(client, project_id):
    response = await client.post(
        "/api/v1/features",
        json={"project_id": project_id, "title": "Invoices", "is_accounting_done": True},
    )

    assert response.status_code == 400
    assert "does not require accounting" in response.json()["detail"]


async def test_accounting_off_clears_done(client, project_id):
    feature = await _create_feature(
        client, project_id, "Invoices", has_accounting=True, is_accounting_done=True
    )

    response = await client.patch(
        f"/api/v1/features/{feature['id']}", json={"has_accounting": False}
    )

    assert response.status_code == 200
    assert response.json()["has_accounting"] is False
    assert response.json()["is_accounting_done"] is False


async def test_partial_update_keeps_other_fields(client, project_id):
    parent = await _create_feature(client, project_id, "Parent")
    child = await _create_feature(
        client, project_id, "Child", parent_id=parent["id"], description="keep me"
    )

    response = await client.patch(f"/api/v1/features/{child['id']}", json={"is_completed": True})

    data = response.json()
    assert data["is_completed"] is True
    assert data["parent_id"] == parent["id"]
    assert data["description"] == "keep me"


async def test_null_parent_moves_to_root(client, project_id):
    parent = await _create_feature(client, project_id, "Parent")
    child = await _create_feature(client, project_id, "Child", parent_id=parent["id"])

    response = await client.patch(f"/api/v1/features/{child['id']}", json={"parent_id": None})

    assert response.status_code == 200
    assert response.json()["parent_id"] is None


async def test_too_many_images_rejected(client, project_id):
    response = await client.post(
        "/api/v1/features",
        json={
            "project_id": project_id,
            "title": "Gallery",
            "images": [f"/uploads/{i}.png" for i in range(11)],
        },
    )
    assert response.status_code == 422


async def test_tree_endpoint(client, project_id):
    parent = await _create_feature(client, project_id, "Authentication", order=0)
    login = await _create_feature(
        client, project_id, "Login", parent_id=parent["id"], is_completed=True
    )
    await _create_feature(client, project_id, "Billing", order=1)

    tree = await client.get(f"/api/v1/projects/{project_id}/features/tree")
    assert tree.status_code == 200
    data = tree.json()
    assert data["mode"] == "tree"
    assert [n["title"] for n in data["items"]] == ["Authentication", "Billing"]
    assert [n["id"] for n in data["items"][0]["children"]] == [login["id"]]

    completed = await client.get(
        f"/api/v1/projects/{project_id}/features/tree", params={"status": "completed"}
    )
    items = completed.json()["items"]
    assert [n["id"] for n in items] == [parent["id"]]
    assert [n["id"] for n in items[0]["children"]] == [login["id"]]

    found = await client.get(
        f"/api/v1/projects/{project_id}/features/tree", params={"search": "LOG"}
    )
    assert found.json()["mode"] == "flat"
    assert [n["id"] for n in found.json()["items"]] == [login["id"]]


async def test_tree_rejects_unknown_status(client, project_id):
    response = await client.get(
        f"/api/v1/projects/{project_id}/features/tree", params={"status": "archived"}
    )
    assert response.status_code == 422


async def test_reorder(client, project_id):
    a = await _create_feature(client, project_id, "A", order=0)
    b = await _create_feature(client, project_id, "B", order=1)
    c = await _create_feature(client, project_id, "C", order=2)

    response = await client.put(
        "/api/v1/features/reorder", json={"feature_ids": [c["id"], a["id"], b["id"]]}
    )
    assert response.status_code == 200
    assert response.json() == {"updated_count": 3}

    listing = await client.get("/api/v1/features", params={"project_id": project_id})
    assert [f["title"] for f in listing.json()] == ["C", "A", "B"]


async def test_reorder_unknown_id_changes_nothing(client, project_id):
    a = await _create_feature(client, project_id, "A", order=0)
    b = await _create_feature(client, project_id, "B", order=1)

    response = await client.put(
        "/api/v1/features/reorder", json={"feature_ids": [b["id"], str(uuid4()), a["id"]]}
    )
    assert response.status_code == 400

    listing = await client.get("/api/v1/features", params={"project_id": project_id})
    assert [f["title"] for f in listing.json()] == ["A", "B"]


async def test_reorder_requires_ids(client):
    response = await client.put("/api/v1/features/reorder", json={"feature_ids": []})
    assert response.status_code == 422
