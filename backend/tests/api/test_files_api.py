"""Files API endpoint tests."""

import pytest
from httpx import AsyncClient


@pytest.fixture
async def granted(client: AsyncClient, project_dir):
    response = await client.post("/api/directory", json={"path": str(project_dir)})
    assert response.json()["granted"] is True
    return project_dir


async def test_save_file_in_place(client: AsyncClient, granted):
    response = await client.put(
        "/api/files",
        json={"path": "product/product-overview.md", "content": "# Acme\n\n## Description\nX"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["saved_path"] == "product/product-overview.md"
    assert data["download_id"] is None
    assert (granted / "product" / "product-overview.md").read_text().startswith("# Acme")


async def test_save_updates_state(client: AsyncClient, granted):
    await client.put("/api/files", json={"path": "product/product-roadmap.md", "content": "x"})

    state = (await client.get("/api/state")).json()

    assert state["has_product_roadmap"] is True


async def test_save_without_access_downloads(client: AsyncClient):
    response = await client.put(
        "/api/files",
        json={
            "path": "product/design-system/colors.json",
            "content": "{}",
            "mime_type": "application/json",
        },
    )

    data = response.json()
    assert data["success"] is True
    assert data["message"].startswith("File downloaded as colors.json")
    assert data["download_id"]


async def test_read_file(client: AsyncClient, granted):
    (granted / "product").mkdir()
    (granted / "product" / "product-roadmap.md").write_text("# Roadmap")

    response = await client.get("/api/files", params={"path": "product/product-roadmap.md"})

    assert response.status_code == 200
    assert response.json() == {"path": "product/product-roadmap.md", "content": "# Roadmap"}


async def test_read_missing_file_returns_404(client: AsyncClient, granted):
    response = await client.get("/api/files", params={"path": "product/missing.md"})

    assert response.status_code == 404


async def test_list_files(client: AsyncClient, granted):
    components = granted / "src" / "shell" / "components"
    components.mkdir(parents=True)
    (components / "AppShell.tsx").write_text("")
    (components / "MainNav.tsx").write_text("")

    response = await client.get("/api/files/list", params={"dir": "src/shell/components"})

    assert response.json() == {
        "dir": "src/shell/components",
        "files": ["AppShell.tsx", "MainNav.tsx"],
    }


async def test_batch_save_preserves_order(client: AsyncClient, granted):
    response = await client.put(
        "/api/files/batch",
        json=[
            {"path": "product/sections/inbox/spec.md", "content": "# Inbox"},
            {"path": "product/sections/inbox/types.ts", "content": "export {}"},
        ],
    )

    assert [r["saved_path"] for r in response.json()] == [
        "product/sections/inbox/spec.md",
        "product/sections/inbox/types.ts",
    ]
    section = (await client.get("/api/state")).json()["sections"]["inbox"]
    assert section["has_spec"] is True
    assert section["has_types"] is True


async def test_empty_path_rejected(client: AsyncClient):
    response = await client.put("/api/files", json={"path": "", "content": "x"})

    assert response.status_code == 422
