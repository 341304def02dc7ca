"""Completion state API endpoint tests."""

from httpx import AsyncClient


async def test_initial_state(client: AsyncClient):
    response = await client.get("/api/state")

    assert response.status_code == 200
    data = response.json()
    assert data["has_product_overview"] is False
    assert data["sections"] == {}
    assert data["project_name"] is None


async def test_export_readiness(client: AsyncClient, services):
    not_ready = (await client.get("/api/state/export-readiness")).json()
    assert not_ready == {
        "ready": False,
        "sections_with_screen_designs": [],
        "has_export_zip": False,
    }

    services.project_state.mark_product_overview_complete("Acme")
    services.project_state.mark_product_roadmap_complete()
    services.project_state.add_section_screen_design("inbox")

    ready = (await client.get("/api/state/export-readiness")).json()
    assert ready["ready"] is True
    assert ready["sections_with_screen_designs"] == ["inbox"]


async def test_clear_state_keeps_directory(client: AsyncClient, services, project_dir):
    await client.post("/api/directory", json={"path": str(project_dir)})
    services.project_state.mark_shell_complete()

    response = await client.delete("/api/state")

    assert response.status_code == 204
    assert (await client.get("/api/state")).json()["has_shell"] is False
    assert services.access.has_access() is True
