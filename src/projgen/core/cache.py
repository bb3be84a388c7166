"""
Local cache for remote lookups (e.g. latest released versions).

Each entry is a JSON file under ``<root>/entries/``:

    {"key": "...", "created_at": 1700000000.0, "ttl": 86400, "data": {...}}

An ``offline`` marker file in the root switches the cache to offline mode,
in which callers must not go to the network and serve cached data only.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import CacheError

logger = logging.getLogger(__name__)

DEFAULT_TTL = 24 * 60 * 60


@dataclass(frozen=True)
class CacheStats:
    """Summary of the cache contents."""

    location: str
    entries: int
    expired: int
    corrupt: int
    size_bytes: int
    offline: bool


class LocalCacheManager:
    """Directory-backed cache manager."""

    def __init__(self, root: Path, clock: Any = time.time):
        self.root = root
        self.entries_dir = root / "entries"
        self._clock = clock

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:32]
        return self.entries_dir / f"{digest}.json"

    def _read(self, path: Path) -> dict[str, Any] | None:
        """Parse an entry file; None if it is corrupt."""
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        if not isinstance(entry, dict) or not {"key", "created_at", "ttl", "data"} <= entry.keys():
            return None
        return entry

    def _is_expired(self, entry: dict[str, Any]) -> bool:
        return self._clock() - float(entry["created_at"]) > float(entry["ttl"])

    def _entry_files(self) -> list[Path]:
        if not self.entries_dir.exists():
            return []
        return sorted(self.entries_dir.glob("*.json"))

    def put(self, key: str, data: Any, ttl: int = DEFAULT_TTL) -> None:
        entry = {"key": key, "created_at": self._clock(), "ttl": ttl, "data": data}
        try:
            self.entries_dir.mkdir(parents=True, exist_ok=True)
            self._path(key).write_text(json.dumps(entry), encoding="utf-8")
        except OSError as e:
            raise CacheError(f"Failed to write cache entry '{key}': {e}") from e

    def get(self, key: str, allow_expired: bool = False) -> Any | None:
        """Cached data for ``key``; expired entries count as missing unless allowed."""
        path = self._path(key)
        if not path.exists():
            return None
        entry = self._read(path)
        if entry is None or entry["key"] != key:
            return None
        if self._is_expired(entry) and not allow_expired:
            return None
        return entry["data"]

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError as e:
            raise CacheError(f"Failed to remove {path}: {e}") from e

    def stats(self) -> CacheStats:
        entries = expired = corrupt = size = 0
        for path in self._entry_files():
            try:
                size += path.stat().st_size
            except OSError as e:
                raise CacheError(f"Failed to read {path}: {e}") from e
            entry = self._read(path)
            if entry is None:
                corrupt += 1
                continue
            entries += 1
            if self._is_expired(entry):
                expired += 1
        return CacheStats(
            location=str(self.root),
            entries=entries,
            expired=expired,
            corrupt=corrupt,
            size_bytes=size,
            offline=self.is_offline(),
        )

    def clear(self) -> int:
        """Remove every entry. Returns the number of files removed."""
        removed = 0
        for path in self._entry_files():
            self._remove(path)
            removed += 1
        logger.info("Cleared %d cache entries", removed)
        return removed

    def clean(self) -> int:
        """Remove expired entries. Returns the number removed."""
        removed = 0
        for path in self._entry_files():
            entry = self._read(path)
            if entry is not None and self._is_expired(entry):
                self._remove(path)
                removed += 1
        logger.info("Removed %d expired cache entries", removed)
        return removed

    def validate(self) -> list[str]:
        """Names of corrupt entry files."""
        return [path.name for path in self._entry_files() if self._read(path) is None]

    def repair(self) -> int:
        """Remove corrupt entries. Returns the number removed."""
        corrupt = self.validate()
        for name in corrupt:
            self._remove(self.entries_dir / name)
        if corrupt:
            logger.info("Removed %d corrupt cache entries", len(corrupt))
        return len(corrupt)

    def is_offline(self) -> bool:
        return (self.root / "offline").exists()

    def set_offline(self, enabled: bool) -> None:
        marker = self.root / "offline"
        try:
            if enabled:
                self.root.mkdir(parents=True, exist_ok=True)
                marker.touch()
            elif marker.exists():
                marker.unlink()
        except OSError as e:
            raise CacheError(f"Failed to update offline mode: {e}") from e
