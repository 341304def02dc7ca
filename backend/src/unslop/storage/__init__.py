"""Local directory persistence: grants, reads, writes."""

from unslop.storage.access import DirectoryAccessManager, DirectoryPicker, PickerCancelled
from unslop.storage.cache import CachedFile, ReadCache
from unslop.storage.downloads import DownloadOutbox, PendingDownload
from unslop.storage.handle_store import DirectoryHandleStore
from unslop.storage.handles import DirectoryHandle, FileHandle, PermissionState
from unslop.storage.reader import RuntimeFileReader
from unslop.storage.writer import FileSystemWriter, SaveFileRequest, SaveResult

__all__ = [
    "CachedFile",
    "DirectoryAccessManager",
    "DirectoryHandle",
    "DirectoryHandleStore",
    "DirectoryPicker",
    "DownloadOutbox",
    "FileHandle",
    "FileSystemWriter",
    "PendingDownload",
    "PermissionState",
    "PickerCancelled",
    "ReadCache",
    "RuntimeFileReader",
    "SaveFileRequest",
    "SaveResult",
]
