# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable
from json import JSONDecodeError
from pathlib import Path
from typing import Protocol, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pyolt.lib.db.file_lock import FileLock
from pyolt.lib.types import CacheKey, CachePayload, TimestampSec, TtlSeconds

Clock = Callable[[], float]


class CacheEntry(BaseModel):
    """One cached payload with its absolute expiry time (epoch seconds)."""
    model_config = ConfigDict(frozen=True)

    key: CacheKey               = Field(..., description="Scope key, e.g. 'onus:olt-1:0/1'")
    value: CachePayload         = Field(..., description="Serialized JSON payload")
    expires_at: TimestampSec    = Field(..., description="Absolute expiry, epoch seconds")

    def is_expired(self, now: float) -> bool:
        """An entry observed strictly after its expiry is absent."""
        return now > self.expires_at


class ResponseCache(Protocol):
    """Key/value store with per-entry TTL used by the OLT services."""

    def get(self, key: CacheKey) -> CachePayload | None: ...

    def set(self, key: CacheKey, value: CachePayload, ttl: TtlSeconds) -> None: ...

    def invalidate(self, key: CacheKey) -> None: ...


class MemoryResponseCache:
    """
    Thread-Safe In-Process TTL Cache.

    Expired entries are deleted lazily when read. Writes are last-write-wins
    per key. The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(self, clock: Clock = time.time) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> CachePayload | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                self.logger.debug("Cache entry expired: %s", key)
                return None
            return entry.value

    def set(self, key: CacheKey, value: CachePayload, ttl: TtlSeconds) -> None:
        entry = CacheEntry(key=key, value=value, expires_at=TimestampSec(self._clock() + ttl))
        with self._lock:
            self._entries[key] = entry

    def invalidate(self, key: CacheKey) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class JsonFileResponseCache:
    """
    TTL Cache Persisted To A JSON File.

    Survives process restarts and can be shared by several worker processes.
    Every operation re-reads the file under a sidecar ``FileLock`` (shared
    for reads, exclusive for writes) and rewrites it atomically through a
    temporary file.

    JSON layout::

        {
          "<key>": {"key": "<key>", "value": "<json>", "expires_at": 1721760000.0},
          ...
        }
    """

    def __init__(self, db_path: Path, clock: Clock = time.time) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.db_path = Path(db_path)
        self._clock = clock
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def get(self, key: CacheKey) -> CachePayload | None:
        with FileLock(self.db_path, shared=True):
            entries = self._load()
        entry = entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._delete_if_expired(key)
            return None
        return entry.value

    def set(self, key: CacheKey, value: CachePayload, ttl: TtlSeconds) -> None:
        entry = CacheEntry(key=key, value=value, expires_at=TimestampSec(self._clock() + ttl))
        with FileLock(self.db_path):
            entries = self._load()
            entries[key] = entry
            self._atomic_write(entries)

    def invalidate(self, key: CacheKey) -> None:
        with FileLock(self.db_path):
            entries = self._load()
            if entries.pop(key, None) is not None:
                self._atomic_write(entries)

    def purge_expired(self) -> int:
        """
        Remove Every Expired Entry From The File.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        with FileLock(self.db_path):
            entries = self._load()
            live = {k: e for k, e in entries.items() if not e.is_expired(now)}
            removed = len(entries) - len(live)
            if removed:
                self._atomic_write(live)
        if removed:
            self.logger.info("Purged %d expired cache entries from %s", removed, self.db_path)
        return removed

    def _delete_if_expired(self, key: CacheKey) -> None:
        with FileLock(self.db_path):
            entries = self._load()
            entry = entries.get(key)
            # Another writer may have refreshed the key since the shared read
            if entry is not None and entry.is_expired(self._clock()):
                del entries[key]
                self._atomic_write(entries)

    def _load(self) -> dict[CacheKey, CacheEntry]:
        if not self.db_path.exists():
            return {}
        try:
            raw = json.loads(self.db_path.read_text(encoding="utf-8") or "{}")
        except (ValueError, JSONDecodeError):
            self.logger.warning("Corrupt cache file %s; treating as empty", self.db_path)
            return {}

        if not isinstance(raw, dict):
            self.logger.warning("Unexpected cache file layout in %s; treating as empty", self.db_path)
            return {}

        entries: dict[CacheKey, CacheEntry] = {}
        for key, record in raw.items():
            try:
                entries[cast(CacheKey, key)] = CacheEntry.model_validate(record)
            except ValidationError as err:
                self.logger.warning("Dropping unreadable cache entry '%s': %s", key, err)
        return entries

    def _atomic_write(self, entries: dict[CacheKey, CacheEntry]) -> None:
        data = {key: entry.model_dump() for key, entry in entries.items()}
        temp_path = self.db_path.with_name(f"{self.db_path.name}.tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        temp_path.replace(self.db_path)
