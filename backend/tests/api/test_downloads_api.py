"""Downloads API endpoint tests."""

from httpx import AsyncClient


async def test_fallback_download_served_once(client: AsyncClient):
    saved = await client.put(
        "/api/files",
        json={"path": "product/product-overview.md", "content": "# Acme"},
    )
    download_id = saved.json()["download_id"]

    listing = await client.get("/api/downloads")
    assert [d["id"] for d in listing.json()] == [download_id]
    assert listing.json()[0]["filename"] == "product-overview.md"

    response = await client.get(f"/api/downloads/{download_id}")
    assert response.status_code == 200
    assert response.text == "# Acme"
    assert response.headers["content-type"].startswith("text/markdown")
    assert (
        response.headers["content-disposition"]
        == 'attachment; filename="product-overview.md"'
    )

    again = await client.get(f"/api/downloads/{download_id}")
    assert again.status_code == 404


async def test_unknown_download_returns_404(client: AsyncClient):
    response = await client.get("/api/downloads/does-not-exist")

    assert response.status_code == 404


async def test_non_ascii_file_name_served(client: AsyncClient):
    saved = await client.put("/api/files", json={"path": "product/日本.md", "content": "# 日本"})
    download_id = saved.json()["download_id"]

    response = await client.get(f"/api/downloads/{download_id}")

    assert response.status_code == 200
    assert response.text == "# 日本"
    assert (
        response.headers["content-disposition"]
        == "attachment; filename*=utf-8''%E6%97%A5%E6%9C%AC.md"
    )
    assert (await client.get("/api/downloads")).json() == []


async def test_quote_in_file_name_is_escaped(client: AsyncClient):
    saved = await client.put("/api/files", json={"path": 'notes/a"b.md', "content": "x"})

    response = await client.get(f"/api/downloads/{saved.json()['download_id']}")

    assert response.headers["content-disposition"] == "attachment; filename*=utf-8''a%22b.md"
