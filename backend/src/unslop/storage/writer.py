"""Writes planning files into the granted directory.

Writes never fail outright: without a directory grant, or when the write
itself fails, the content is handed to the download outbox so the user can
place the file by hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from unslop.project_state.tracker import CompletionTracker
from unslop.storage.access import DirectoryAccessManager
from unslop.storage.downloads import DownloadOutbox
from unslop.storage.handles import DirectoryHandle

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "text/markdown"


@dataclass(frozen=True)
class SaveResult:
    """Outcome of one write attempt."""

    success: bool
    message: str
    saved_path: Optional[str] = None
    download_id: Optional[str] = None


@dataclass(frozen=True)
class SaveFileRequest:
    path: str  # Relative to the project root, e.g. "product/product-overview.md"
    content: str
    mime_type: str = DEFAULT_MIME_TYPE


class FileSystemWriter:
    """Saves files under the granted directory with a download fallback."""

    def __init__(
        self,
        access: DirectoryAccessManager,
        outbox: DownloadOutbox,
        tracker: Optional[CompletionTracker] = None,
    ) -> None:
        self._access = access
        self._outbox = outbox
        self._tracker = tracker

    def save_file(
        self, path: str, content: str, mime_type: str = DEFAULT_MIME_TYPE
    ) -> SaveResult:
        """Write content to path, creating parent directories as needed.

        An existing file is overwritten. After an in-place write the
        completion index is updated; failures there are only logged.
        """
        root = self._access.get_handle() if self._access.has_access() else None
        if root is None:
            return self._download(path, content, mime_type)

        try:
            self._write(root, path, content)
        except Exception as e:
            logger.error(f"Failed to save file {path}: {e}")
            return self._download(path, content, mime_type)

        self._update_index(path, content)

        return SaveResult(
            success=True,
            message=f"File saved successfully to {path}",
            saved_path=path,
        )

    def save_files(self, files: Iterable[SaveFileRequest]) -> list[SaveResult]:
        """Save files one after another; results are in input order."""
        return [self.save_file(f.path, f.content, f.mime_type) for f in files]

    def _write(self, root: DirectoryHandle, path: str, content: str) -> None:
        *dir_names, file_name = path.split("/")

        current = root
        for dir_name in dir_names:
            current = current.get_directory_handle(dir_name, create=True)

        file_handle = current.get_file_handle(file_name, create=True)
        writable = file_handle.create_writable()
        writable.write(content)
        writable.close()

    def _update_index(self, path: str, content: str) -> None:
        if self._tracker is None:
            return
        try:
            self._tracker.record(path, content)
        except Exception as e:
            logger.warning(f"Saved {path} but failed to update project state: {e}")

    def _download(self, path: str, content: str, mime_type: str) -> SaveResult:
        file_name = path.split("/")[-1]
        try:
            download = self._outbox.push(file_name, content, mime_type)
        except Exception as e:
            return SaveResult(success=False, message=f"Failed to download file: {e}")

        return SaveResult(
            success=True,
            message=f"File downloaded as {file_name}. Please save it to {path}",
            saved_path=path,
            download_id=download.id,
        )
