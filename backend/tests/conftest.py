"""Shared pytest fixtures for all tests.

These fixtures properly clean up resources to prevent file descriptor leaks.
"""

import gc
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from unslop.config import Config
from unslop.project_state.service import ProjectStateService
from unslop.services import Services
from unslop.storage.access import DirectoryAccessManager
from unslop.storage.handle_store import DirectoryHandleStore


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Clean up resources after each test to prevent file descriptor leaks.

    This runs automatically after every test to help garbage collect
    any lingering SQLite connections.
    """
    yield
    # Force garbage collection to release file handles
    gc.collect()


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """An empty directory the user can pick as the project root."""
    path = tmp_path / "workspace" / "my-product"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def project_state(tmp_path):
    """A loaded ProjectStateService backed by a temporary database."""
    service = ProjectStateService(tmp_path / "data" / "project_state.db")
    service.load()
    yield service
    service.close()
    gc.collect()


@pytest.fixture
def handle_store(tmp_path):
    store = DirectoryHandleStore(tmp_path / "data" / "handles.db")
    yield store
    store.close()
    gc.collect()


@pytest.fixture
def access(handle_store, project_state, tmp_path):
    """A DirectoryAccessManager restricted to tmp_path/workspace."""
    manager = DirectoryAccessManager(
        handle_store,
        project_state,
        base_path=tmp_path / "workspace",
    )
    manager.initialize()
    return manager


@pytest.fixture
def granted_access(access, project_dir):
    """An access manager that already holds a grant for project_dir."""
    assert access.request_access(picker=lambda mode: project_dir)
    return access


@pytest.fixture
def settings(tmp_path) -> Config:
    """Settings with every local database under tmp_path/data."""
    return Config(
        data_dir=tmp_path / "data",
        workspace_base_path=tmp_path / "workspace",
    )


@pytest.fixture
def services(settings):
    """Started application services, closed after the test."""
    instance = Services.create(settings)
    instance.start()
    yield instance
    instance.close()
    gc.collect()


@pytest.fixture
async def client(services):
    """Async test client with the test services attached to the app.

    ASGITransport does not run the lifespan, so the services are attached
    to app.state directly.
    """
    from unslop.main import app

    app.state.services = services
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client
    finally:
        app.state.services = None


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (for tests that manage their own connection)."""
    return tmp_path / "test.db"
