"""Reads planning files from the granted directory."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from unslop.storage.access import DirectoryAccessManager
from unslop.storage.cache import ReadCache
from unslop.storage.handles import DirectoryHandle

logger = logging.getLogger(__name__)

# Raised while walking a path that does not lead to the requested entry
_MISSING = (FileNotFoundError, NotADirectoryError, IsADirectoryError, ValueError)


class RuntimeFileReader:
    """Read-through access to files under the granted directory.

    A missing directory and a missing file look the same to callers: both
    read as None. There is no fallback to any other source here.
    """

    def __init__(self, access: DirectoryAccessManager, cache: ReadCache) -> None:
        self._access = access
        self._cache = cache

    def read_file(self, path: str) -> Optional[str]:
        """Return the text of the file at the slash-separated path, or None."""
        cached = self._cache.get(path)
        if cached is not None:
            return cached

        if not self._access.has_access():
            return None

        root = self._access.get_handle()
        if root is None:
            return None

        *dir_names, file_name = path.split("/")

        try:
            current: DirectoryHandle = root
            for dir_name in dir_names:
                current = current.get_directory_handle(dir_name)
            content = current.get_file_handle(file_name).read_text()
        except UnicodeDecodeError as e:
            logger.warning(f"Failed to read file {path}: {e}")
            return None
        except _MISSING:
            return None
        except OSError as e:
            logger.warning(f"Failed to read file {path}: {e}")
            return None

        self._cache.set(path, content)
        return content

    def read_json_file(self, path: str) -> Optional[Any]:
        """Read and decode a JSON file. Malformed JSON reads as None."""
        content = self.read_file(path)
        if not content:
            return None

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse JSON file {path}: {e}")
            return None

    def file_exists(self, path: str) -> bool:
        """Same cost as read_file: the file is read and cached."""
        return self.read_file(path) is not None

    def list_files(self, dir_path: str) -> list[str]:
        """Names of the regular files directly inside dir_path.

        Subdirectories are not listed or descended into. Any failure to
        resolve the directory gives an empty list.
        """
        if not self._access.has_access():
            return []

        root = self._access.get_handle()
        if root is None:
            return []

        try:
            current: DirectoryHandle = root
            for dir_name in (part for part in dir_path.split("/") if part):
                current = current.get_directory_handle(dir_name)
            return [name for name, entry in current.entries() if entry.kind == "file"]
        except _MISSING:
            return []
        except OSError as e:
            logger.warning(f"Failed to list files in {dir_path}: {e}")
            return []

    def clear_cache(self, path: Optional[str] = None) -> None:
        self._cache.clear(path)
