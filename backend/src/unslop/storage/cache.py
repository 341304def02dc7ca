"""Short-lived in-memory cache of file contents."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

DEFAULT_TTL_MS = 5000


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(frozen=True)
class CachedFile:
    """Content read from path at timestamp (milliseconds)."""

    path: str
    content: str
    timestamp: float


class ReadCache:
    """Path-keyed cache whose entries expire ttl_ms after being read.

    Entries are only ever invalidated by age or by clear(); writing a file
    does not evict it.
    """

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: dict[str, CachedFile] = {}

    def get(self, path: str) -> Optional[str]:
        """Return cached content if it is younger than the TTL."""
        entry = self._entries.get(path)
        if entry is not None and self._clock() - entry.timestamp < self.ttl_ms:
            return entry.content
        return None

    def set(self, path: str, content: str) -> None:
        self._entries[path] = CachedFile(path=path, content=content, timestamp=self._clock())

    def clear(self, path: Optional[str] = None) -> None:
        """Drop one entry, or every entry when path is None."""
        if path is None:
            self._entries.clear()
        else:
            self._entries.pop(path, None)

    def __len__(self) -> int:
        return len(self._entries)
