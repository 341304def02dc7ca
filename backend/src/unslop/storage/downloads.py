"""Pending client-side downloads.

When a file cannot be written into the user's directory it is queued here
instead, and the client fetches it as an attachment.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingDownload:
    """A file waiting to be downloaded by the client."""

    filename: str
    content: str
    mime_type: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class DownloadOutbox:
    """Bounded queue of pending downloads, oldest evicted first."""

    def __init__(self, max_pending: int = 50) -> None:
        self.max_pending = max_pending
        self._pending: OrderedDict[str, PendingDownload] = OrderedDict()

    def push(self, filename: str, content: str, mime_type: str) -> PendingDownload:
        """Queue content for download under filename.

        Raises:
            ValueError: If filename is empty.
        """
        if not filename:
            raise ValueError("Download needs a file name")

        download = PendingDownload(filename=filename, content=content, mime_type=mime_type)
        self._pending[download.id] = download

        while len(self._pending) > self.max_pending:
            _, dropped = self._pending.popitem(last=False)
            logger.warning(f"Dropped unclaimed download {dropped.filename}")

        return download

    def get(self, download_id: str) -> Optional[PendingDownload]:
        return self._pending.get(download_id)

    def pop(self, download_id: str) -> Optional[PendingDownload]:
        return self._pending.pop(download_id, None)

    def list(self) -> list[PendingDownload]:
        """Pending downloads, oldest first."""
        return list(self._pending.values())

    def __len__(self) -> int:
        return len(self._pending)
