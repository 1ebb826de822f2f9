# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import json
import logging
import threading
from collections import deque
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from json import JSONDecodeError
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pyolt.lib.db.file_lock import FileLock
from pyolt.lib.types import DeviceId, OnuIdStr
from pyolt.olt.parser.model.records import OnuSummaryModel

DEFAULT_HISTORY_LIMIT: int          = 100
DEFAULT_MAX_ENTRIES_PER_DEVICE: int = 10000

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OnuLogEntry(BaseModel):
    """Point-in-time snapshot of one ONU taken when its port was read."""
    model_config = ConfigDict(frozen=True)

    id: int                 = Field(..., ge=1, description="Store-Assigned Sequence Number")
    device_id: DeviceId     = Field(..., description="Device The ONU Belongs To")
    onu_id: OnuIdStr        = Field(..., description="Canonical ONU Id, e.g. '0/1:8'")
    name: str               = Field("", description="Operator Assigned Name")
    status: str             = Field("", description="Status At Recording Time")
    temperature: float      = Field(0.0, description="Module Temperature In Degrees C")
    tx_power: float         = Field(0.0, description="Transmit Power In dBm")
    rx_power: float         = Field(0.0, description="Receive Power In dBm")
    recorded_at: datetime   = Field(..., description="Recording Time (UTC)")

    @classmethod
    def from_summary(cls, entry_id: int, device_id: str, onu: OnuSummaryModel,
                     recorded_at: datetime) -> OnuLogEntry:
        return cls(
            id          = entry_id,
            device_id   = DeviceId(device_id),
            onu_id      = onu.onu_id,
            name        = onu.name,
            status      = onu.status,
            temperature = onu.metrics.temperature,
            tx_power    = onu.metrics.tx_power,
            rx_power    = onu.metrics.rx_power,
            recorded_at = recorded_at,
        )


class OnuHistoryStore(Protocol):
    """Append-only ONU snapshot log, read back newest first per device."""

    def record(self, device_id: str, onus: Sequence[OnuSummaryModel]) -> int: ...

    def recent(self, device_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> list[OnuLogEntry]: ...


class MemoryOnuHistory:
    """
    In-Process ONU History.

    Keeps at most ``max_entries`` snapshots per device; the oldest are
    dropped first.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES_PER_DEVICE, clock: Clock = utc_now) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._max_entries = max(max_entries, 1)
        self._clock = clock
        self._logs: dict[str, deque[OnuLogEntry]] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def record(self, device_id: str, onus: Sequence[OnuSummaryModel]) -> int:
        """Append one snapshot per ONU and return how many were written."""
        now = self._clock()
        with self._lock:
            log = self._logs.setdefault(device_id, deque(maxlen=self._max_entries))
            for onu in onus:
                log.append(OnuLogEntry.from_summary(self._next_id, device_id, onu, now))
                self._next_id += 1
        return len(onus)

    def recent(self, device_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> list[OnuLogEntry]:
        with self._lock:
            log = list(self._logs.get(device_id, ()))
        log.reverse()
        return log[:max(limit, 0)]


class JsonFileOnuHistory:
    """
    ONU History Persisted To A JSON File.

    Shares the locking scheme of the JSON response cache: a sidecar
    ``FileLock`` (shared for reads, exclusive for writes) and atomic
    rewrites through a temporary file.

    JSON layout::

        {
          "next_id": 42,
          "devices": {
            "<device_id>": [{"id": 1, "onu_id": "0/1:1", ...}, ...]
          }
        }
    """

    def __init__(self, db_path: Path, max_entries: int = DEFAULT_MAX_ENTRIES_PER_DEVICE,
                 clock: Clock = utc_now) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.db_path = Path(db_path)
        self._max_entries = max(max_entries, 1)
        self._clock = clock
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, device_id: str, onus: Sequence[OnuSummaryModel]) -> int:
        if not onus:
            return 0
        now = self._clock()
        with FileLock(self.db_path):
            next_id, devices = self._load()
            log = devices.setdefault(device_id, [])
            for onu in onus:
                log.append(OnuLogEntry.from_summary(next_id, device_id, onu, now))
                next_id += 1
            del log[:-self._max_entries]
            self._atomic_write(next_id, devices)
        return len(onus)

    def recent(self, device_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> list[OnuLogEntry]:
        with FileLock(self.db_path, shared=True):
            _, devices = self._load()
        log = devices.get(device_id, [])
        log.reverse()
        return log[:max(limit, 0)]

    def _load(self) -> tuple[int, dict[str, list[OnuLogEntry]]]:
        if not self.db_path.exists():
            return 1, {}
        try:
            raw = json.loads(self.db_path.read_text(encoding="utf-8") or "{}")
        except (ValueError, JSONDecodeError):
            self.logger.warning("Corrupt history file %s; starting over", self.db_path)
            return 1, {}

        raw_devices = raw.get("devices") if isinstance(raw, dict) else None
        if not isinstance(raw_devices, dict):
            self.logger.warning("Unexpected history file layout in %s; starting over", self.db_path)
            return 1, {}

        devices: dict[str, list[OnuLogEntry]] = {}
        highest = 0
        for device_id, records in raw_devices.items():
            if not isinstance(records, list):
                continue
            log: list[OnuLogEntry] = []
            for record in records:
                try:
                    entry = OnuLogEntry.model_validate(record)
                except ValidationError as err:
                    self.logger.warning("Dropping unreadable history entry for '%s': %s", device_id, err)
                    continue
                log.append(entry)
                highest = max(highest, entry.id)
            devices[device_id] = log

        next_id = raw.get("next_id")
        if not isinstance(next_id, int) or next_id <= highest:
            next_id = highest + 1
        return next_id, devices

    def _atomic_write(self, next_id: int, devices: dict[str, list[OnuLogEntry]]) -> None:
        data = {
            "next_id": next_id,
            "devices": {device_id: [entry.model_dump(mode="json") for entry in log]
                        for device_id, log in devices.items()},
        }
        temp_path = self.db_path.with_name(f"{self.db_path.name}.tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        temp_path.replace(self.db_path)
