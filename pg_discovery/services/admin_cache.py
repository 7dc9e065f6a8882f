"""Admin data cache — per-property TTL cache for the owner console lists.

Entries live in four namespaces (rooms, enquiries, guests, safety audits),
keyed by property id. An entry is fresh while ``now - timestamp < ttl``;
stale entries are evicted lazily on ``get``. The clock and the storage
backend are injected so tests can drive time and persistence directly.

On disk each namespace is stored as an array of ``[key, entry]`` pairs and
turned back into a mapping on load.
"""

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60
NAMESPACES = ("rooms", "enquiries", "guests", "safety_audits")

Clock = Callable[[], float]
Snapshot = dict[str, dict[str, dict[str, Any]]]


class CacheStorage(Protocol):
    def load(self) -> Snapshot: ...

    def save(self, snapshot: Snapshot) -> None: ...


class MemoryStorage:
    """No persistence; the cache lives only as long as the process."""

    def load(self) -> Snapshot:
        return {}

    def save(self, snapshot: Snapshot) -> None:
        return None


class JsonFileStorage:
    """Persist the cache to a JSON file as ``{namespace: [[key, entry], ...]}``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Snapshot:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return {namespace: {key: entry for key, entry in pairs} for namespace, pairs in raw.items()}
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Ignoring unreadable admin cache file %s: %s", self.path, exc)
            return {}

    def save(self, snapshot: Snapshot) -> None:
        serialised = {namespace: [[key, entry] for key, entry in entries.items()] for namespace, entries in snapshot.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(serialised, default=str), encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to persist admin cache to %s: %s", self.path, exc)


class AdminDataCache:
    """TTL cache of owner-console lists, one entry per (namespace, property id)."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Clock = time.time,
        storage: CacheStorage | None = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._storage = storage or MemoryStorage()
        self._entries: Snapshot = {namespace: {} for namespace in NAMESPACES}
        for namespace, entries in self._storage.load().items():
            if namespace in self._entries and isinstance(entries, dict):
                self._entries[namespace].update(entries)

    def _bucket(self, namespace: str) -> dict[str, dict[str, Any]]:
        if namespace not in self._entries:
            raise KeyError(f"Unknown cache namespace '{namespace}'")
        return self._entries[namespace]

    def _persist(self) -> None:
        self._storage.save(self._entries)

    def _is_fresh(self, entry: dict[str, Any]) -> bool:
        return self._clock() - entry["timestamp"] < self.ttl_seconds

    def set(self, namespace: str, key: Any, value: Any) -> None:
        self._bucket(namespace)[str(key)] = {"data": value, "timestamp": self._clock()}
        self._persist()

    def get(self, namespace: str, key: Any) -> Any | None:
        """Return the cached value, or ``None`` (evicting it) if missing or stale."""
        bucket = self._bucket(namespace)
        entry = bucket.get(str(key))
        if entry is None:
            return None
        if not self._is_fresh(entry):
            logger.debug("Admin cache expired: %s/%s", namespace, key)
            del bucket[str(key)]
            self._persist()
            return None
        logger.debug("Admin cache hit: %s/%s", namespace, key)
        return entry["data"]

    def is_valid(self, namespace: str, key: Any) -> bool:
        """Freshness check without eviction."""
        entry = self._bucket(namespace).get(str(key))
        return entry is not None and self._is_fresh(entry)

    def clear(self, namespace: str, key: Any | None = None) -> None:
        """Drop one entry, or the whole namespace when ``key`` is omitted."""
        bucket = self._bucket(namespace)
        if key is None:
            bucket.clear()
        else:
            bucket.pop(str(key), None)
        self._persist()

    def invalidate(self, pg_id: Any) -> None:
        """Drop every namespace's entry for one property."""
        for namespace in NAMESPACES:
            self._entries[namespace].pop(str(pg_id), None)
        self._persist()

    def set_expiration(self, seconds: float) -> None:
        self.ttl_seconds = seconds


def build_admin_cache(ttl_seconds: float, cache_file: str = "") -> AdminDataCache:
    """Cache configured from settings: file-backed when a path is given."""
    storage: CacheStorage = JsonFileStorage(cache_file) if cache_file else MemoryStorage()
    return AdminDataCache(ttl_seconds=ttl_seconds, storage=storage)
