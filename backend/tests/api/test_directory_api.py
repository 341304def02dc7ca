"""Directory API endpoint tests."""

from httpx import AsyncClient


async def test_status_without_grant(client: AsyncClient):
    response = await client.get("/api/directory")

    assert response.status_code == 200
    assert response.json() == {
        "supported": True,
        "has_access": False,
        "initialized": True,
        "path": None,
    }


async def test_select_directory(client: AsyncClient, project_dir):
    response = await client.post("/api/directory", json={"path": str(project_dir)})

    assert response.status_code == 200
    data = response.json()
    assert data["granted"] is True
    assert data["status"]["has_access"] is True
    assert data["status"]["path"] == str(project_dir.resolve())


async def test_select_missing_directory_refused(client: AsyncClient, tmp_path):
    response = await client.post(
        "/api/directory", json={"path": str(tmp_path / "workspace" / "missing")}
    )

    assert response.status_code == 200
    assert response.json()["granted"] is False
    assert response.json()["status"]["has_access"] is False


async def test_select_outside_workspace_refused(client: AsyncClient, tmp_path):
    outside = tmp_path / "outside"
    outside.mkdir()

    response = await client.post("/api/directory", json={"path": str(outside)})

    assert response.json()["granted"] is False


async def test_clear_directory_resets_state(client: AsyncClient, services, project_dir):
    await client.post("/api/directory", json={"path": str(project_dir)})
    await client.put(
        "/api/files", json={"path": "product/product-overview.md", "content": "# Acme"}
    )

    response = await client.delete("/api/directory")

    assert response.status_code == 204
    assert services.access.has_access() is False
    assert services.project_state.get_state().has_product_overview is False
