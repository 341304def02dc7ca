"""Download outbox tests."""

import pytest

from unslop.storage.downloads import DownloadOutbox


def test_push_and_get():
    outbox = DownloadOutbox()

    download = outbox.push("colors.json", '{"primary": "lime"}', "application/json")

    assert outbox.get(download.id) == download
    assert len(outbox) == 1


def test_ids_are_unique():
    outbox = DownloadOutbox()

    first = outbox.push("a.md", "a", "text/markdown")
    second = outbox.push("a.md", "a", "text/markdown")

    assert first.id != second.id
    assert len(outbox) == 2


def test_pop_removes():
    outbox = DownloadOutbox()
    download = outbox.push("a.md", "a", "text/markdown")

    assert outbox.pop(download.id) == download
    assert outbox.pop(download.id) is None
    assert outbox.get(download.id) is None


def test_oldest_evicted_beyond_limit():
    outbox = DownloadOutbox(max_pending=2)
    first = outbox.push("1.md", "1", "text/markdown")
    outbox.push("2.md", "2", "text/markdown")
    outbox.push("3.md", "3", "text/markdown")

    assert outbox.get(first.id) is None
    assert [d.filename for d in outbox.list()] == ["2.md", "3.md"]


def test_empty_filename_rejected():
    with pytest.raises(ValueError):
        DownloadOutbox().push("", "content", "text/markdown")
