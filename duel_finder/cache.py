"""Player id caching, persisted between runs."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from duel_finder import CacheEntry

logger = logging.getLogger(__name__)

CACHE_DURATION_MS = 604_800_000  # one week
CACHE_FILENAME = "player_ids.json"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Store kept in memory only."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object on disk, rewritten on every set."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            self._data = {}
            if self.path.exists():
                try:
                    self._data = json.loads(self.path.read_text(encoding="utf-8"))
                except ValueError:
                    logger.warning("Ignoring unreadable cache file %s", self.path)
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")


def open_store(cache_dir: Path) -> JsonFileStore:
    return JsonFileStore(cache_dir / CACHE_FILENAME)


def _now_ms() -> int:
    return int(time.time() * 1000)


class PlayerIdCache:
    """Maps lowercase player names to ids for up to ``duration_ms``."""

    def __init__(
        self,
        store: KeyValueStore,
        duration_ms: int = CACHE_DURATION_MS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.store = store
        self.duration_ms = duration_ms
        self.clock = clock

    @staticmethod
    def key(name: str) -> str:
        return f"playerId-{name.lower()}"

    def entry(self, name: str) -> CacheEntry | None:
        raw = self.store.get(self.key(name))
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return CacheEntry(id=int(data["id"]), timestamp=int(data["timestamp"]))
        except (ValueError, KeyError, TypeError):
            logger.warning("Ignoring malformed cache entry for %s", name)
            return None

    def lookup(self, name: str) -> int | None:
        """Return the cached id if the entry is younger than the cache duration."""
        entry = self.entry(name)
        if entry is None:
            return None
        if self.clock() - entry.timestamp < self.duration_ms:
            return entry.id
        return None

    def remember(self, name: str, player_id: int) -> CacheEntry:
        entry = CacheEntry(id=player_id, timestamp=self.clock())
        self.store.set(
            self.key(name),
            json.dumps({"id": entry.id, "timestamp": entry.timestamp}),
        )
        return entry
