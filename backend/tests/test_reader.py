"""Runtime file reader tests."""

import pytest

from unslop.storage.cache import ReadCache
from unslop.storage.reader import RuntimeFileReader


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def reader(granted_access, clock):
    return RuntimeFileReader(granted_access, ReadCache(clock=clock))


def write(project_dir, path: str, content: str) -> None:
    target = project_dir / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)


class TestReadFile:
    """Tests for read_file()."""

    def test_reads_nested_file(self, reader, project_dir):
        write(project_dir, "product/product-overview.md", "# Acme")

        assert reader.read_file("product/product-overview.md") == "# Acme"

    def test_missing_file_and_missing_directory_both_none(self, reader, project_dir):
        (project_dir / "product").mkdir()

        assert reader.read_file("product/missing.md") is None
        assert reader.read_file("nowhere/missing.md") is None

    def test_directory_at_file_path_reads_none(self, reader, project_dir):
        (project_dir / "product" / "spec.md").mkdir(parents=True)

        assert reader.read_file("product/spec.md") is None

    def test_without_access_returns_none(self, access, project_dir):
        write(project_dir, "a.md", "content")
        reader = RuntimeFileReader(access, ReadCache())

        assert reader.read_file("a.md") is None

    def test_cached_content_returned_within_ttl(self, reader, project_dir, clock):
        write(project_dir, "a.md", "first")
        assert reader.read_file("a.md") == "first"

        write(project_dir, "a.md", "second")
        clock.now += 4999

        assert reader.read_file("a.md") == "first"

    def test_fresh_content_after_ttl(self, reader, project_dir, clock):
        write(project_dir, "a.md", "first")
        reader.read_file("a.md")

        write(project_dir, "a.md", "second")
        clock.now += 5001

        assert reader.read_file("a.md") == "second"

    def test_clear_cache_forces_reread(self, reader, project_dir):
        write(project_dir, "a.md", "first")
        reader.read_file("a.md")
        write(project_dir, "a.md", "second")

        reader.clear_cache("a.md")

        assert reader.read_file("a.md") == "second"

    def test_undecodable_file_reads_none(self, reader, project_dir):
        (project_dir / "binary.md").write_bytes(b"\xff\xfe\x00bad")

        assert reader.read_file("binary.md") is None


class TestReadJsonFile:
    """Tests for read_json_file()."""

    def test_decodes_json(self, reader, project_dir):
        write(project_dir, "product/design-system/colors.json", '{"primary": "lime"}')

        assert reader.read_json_file("product/design-system/colors.json") == {"primary": "lime"}

    def test_malformed_json_reads_none(self, reader, project_dir):
        write(project_dir, "broken.json", "{not json")

        assert reader.read_json_file("broken.json") is None

    def test_empty_file_reads_none(self, reader, project_dir):
        write(project_dir, "empty.json", "")

        assert reader.read_json_file("empty.json") is None


def test_file_exists(reader, project_dir):
    write(project_dir, "product/product-roadmap.md", "# Roadmap")

    assert reader.file_exists("product/product-roadmap.md") is True
    assert reader.file_exists("product/missing.md") is False


class TestListFiles:
    """Tests for list_files()."""

    def test_lists_only_files(self, reader, project_dir):
        write(project_dir, "src/shell/components/AppShell.tsx", "")
        write(project_dir, "src/shell/components/MainNav.tsx", "")
        (project_dir / "src" / "shell" / "components" / "nested").mkdir()

        assert reader.list_files("src/shell/components") == ["AppShell.tsx", "MainNav.tsx"]

    def test_ignores_empty_segments(self, reader, project_dir):
        write(project_dir, "src/index.ts", "")

        assert reader.list_files("/src/") == ["index.ts"]

    def test_missing_directory_is_empty(self, reader):
        assert reader.list_files("src/missing") == []

    def test_without_access_is_empty(self, access):
        assert RuntimeFileReader(access, ReadCache()).list_files("src") == []
