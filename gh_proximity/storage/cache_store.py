"""
gh_proximity/storage/cache_store.py - In-memory store behind the cache service.

One entry per username; every upsert replaces the previous entry whole.
A lock serializes writers, so concurrent upserts for the same username
resolve to the last write with no partial state.
"""

import logging
import threading
from typing import Optional

from gh_proximity.exceptions import CacheError
from gh_proximity.models import RepoDescriptor

logger = logging.getLogger(__name__)


class CacheStore:
    """Thread-safe username → RepoDescriptor list mapping."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[RepoDescriptor, ...]] = {}
        self._lock = threading.Lock()

    def get(self, username: str) -> Optional[list[RepoDescriptor]]:
        with self._lock:
            entry = self._entries.get(username)
        return list(entry) if entry is not None else None

    def all(self) -> list[tuple[str, list[RepoDescriptor]]]:
        """Every entry as (username, repos), in first-insert order."""
        with self._lock:
            items = list(self._entries.items())
        return [(username, list(repos)) for username, repos in items]

    def upsert(self, username: str, repos: list[RepoDescriptor]) -> None:
        if not username:
            raise CacheError("username must be a non-empty string")
        with self._lock:
            self._entries[username] = tuple(repos)
        logger.debug("Upserted %d repos for %s", len(repos), username)

    def delete(self, username: str) -> bool:
        """Remove one entry. Returns True if it existed."""
        with self._lock:
            existed = self._entries.pop(username, None) is not None
        return existed

    def clear(self) -> int:
        """Remove every entry. Returns how many were removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache cleared (%d entries)", count)
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ── Gateway interface (lookup/store), for in-process use ─────────────────

    def lookup(self, username: str) -> Optional[list[RepoDescriptor]]:
        return self.get(username)

    def store(self, username: str, repos: list[RepoDescriptor]) -> bool:
        self.upsert(username, repos)
        return True
