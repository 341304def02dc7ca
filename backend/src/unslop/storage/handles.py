"""Directory and file handles over the local filesystem.

A handle is a capability for one directory or file inside a directory the
user granted. Navigation happens one path segment at a time, so a handle can
never be used to reach outside the tree it was created from.
"""

from __future__ import annotations

import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Union

logger = logging.getLogger(__name__)

READWRITE = "readwrite"
READ = "read"


class PermissionState(str, Enum):
    """Result of a permission query on a directory handle."""

    GRANTED = "granted"
    DENIED = "denied"


def _check_name(name: str) -> None:
    """Reject names that are not a single path segment."""
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise ValueError(f"Invalid entry name: {name!r}")


class WritableFileStream:
    """Buffered writer that replaces the file contents on close().

    Nothing touches the target file until close(), which swaps in a
    temporary file from the same directory. An abandoned stream leaves the
    previous contents in place.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._chunks: list[str] = []
        self._closed = False

    def write(self, content: str) -> None:
        if self._closed:
            raise ValueError("Cannot write to a closed stream")
        self._chunks.append(content)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write("".join(self._chunks))
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def __enter__(self) -> "WritableFileStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()


class FileHandle:
    """Handle to a single file."""

    kind = "file"

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def name(self) -> str:
        return self.path.name

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def create_writable(self) -> WritableFileStream:
        return WritableFileStream(self.path)

    def __repr__(self) -> str:
        return f"FileHandle({str(self.path)!r})"


class DirectoryHandle:
    """Handle to a directory the user has granted access to."""

    kind = "directory"

    def __init__(
        self,
        path: Path,
        base_path: Optional[Path] = None,
        mode: str = READWRITE,
    ) -> None:
        """Create a handle.

        Args:
            path: Directory this handle refers to.
            base_path: If set, the handle is only granted while its directory
                resolves to somewhere under base_path.
            mode: Requested access mode, "read" or "readwrite".
        """
        self.path = path
        self.base_path = base_path
        self.mode = mode

    @property
    def name(self) -> str:
        return self.path.name

    def get_directory_handle(self, name: str, create: bool = False) -> "DirectoryHandle":
        """Return the child directory called name.

        Raises:
            FileNotFoundError: If it doesn't exist and create is False.
            NotADirectoryError: If name exists but is a file.
            ValueError: If name is not a single path segment.
        """
        _check_name(name)
        child = self.path / name
        if child.exists():
            if not child.is_dir():
                raise NotADirectoryError(f"{child} is not a directory")
        elif create:
            child.mkdir(exist_ok=True)
        else:
            raise FileNotFoundError(f"No such directory: {child}")
        return DirectoryHandle(child, base_path=self.base_path, mode=self.mode)

    def get_file_handle(self, name: str, create: bool = False) -> FileHandle:
        """Return the child file called name.

        Raises:
            FileNotFoundError: If it doesn't exist and create is False.
            IsADirectoryError: If name exists but is a directory.
            ValueError: If name is not a single path segment.
        """
        _check_name(name)
        child = self.path / name
        if child.exists():
            if child.is_dir():
                raise IsADirectoryError(f"{child} is a directory")
        elif create:
            child.touch()
        else:
            raise FileNotFoundError(f"No such file: {child}")
        return FileHandle(child)

    def entries(self) -> Iterator[tuple[str, Union["DirectoryHandle", FileHandle]]]:
        """Yield (name, handle) for each direct child, sorted by name."""
        for child in sorted(self.path.iterdir()):
            if child.is_dir():
                yield child.name, DirectoryHandle(child, base_path=self.base_path, mode=self.mode)
            elif child.is_file():
                yield child.name, FileHandle(child)

    def query_permission(self, mode: str = READWRITE) -> PermissionState:
        """Check whether the directory is still usable in the given mode."""
        try:
            resolved = self.path.resolve()
        except (OSError, RuntimeError):
            return PermissionState.DENIED

        if not resolved.is_dir():
            return PermissionState.DENIED

        if self.base_path is not None:
            try:
                resolved.relative_to(self.base_path.resolve())
            except ValueError:
                return PermissionState.DENIED

        flags = os.R_OK | os.X_OK
        if mode == READWRITE:
            flags |= os.W_OK
        return PermissionState.GRANTED if os.access(resolved, flags) else PermissionState.DENIED

    def request_permission(self, mode: str = READWRITE) -> PermissionState:
        """Ask again for access to an already known directory.

        No picker is shown; the directory is re-checked as it is now, which
        succeeds when e.g. a removable volume has been mounted again.
        """
        state = self.query_permission(mode)
        if state is not PermissionState.GRANTED:
            logger.info(f"Permission for {self.path} ({mode}) is {state.value}")
        return state

    def to_record(self) -> dict[str, Any]:
        """Serialize for the handle store."""
        return {"path": str(self.path), "mode": self.mode}

    @classmethod
    def from_record(
        cls, record: dict[str, Any], base_path: Optional[Path] = None
    ) -> "DirectoryHandle":
        return cls(Path(record["path"]), base_path=base_path, mode=record.get("mode", READWRITE))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectoryHandle):
            return NotImplemented
        return self.path == other.path and self.mode == other.mode

    def __hash__(self) -> int:
        return hash((self.path, self.mode))

    def __repr__(self) -> str:
        return f"DirectoryHandle({str(self.path)!r}, mode={self.mode!r})"
