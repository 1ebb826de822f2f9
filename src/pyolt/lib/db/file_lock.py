# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import fcntl
import logging
import time
from pathlib import Path
from types import TracebackType
from typing import TextIO


class FileLock:
    """
    Advisory ``flock`` on a ``<file>.lock`` sidecar, shared or exclusive.

    Readers of the JSON cache take a shared lock so they can overlap; writers
    take an exclusive one. Acquisition polls without blocking and gives up
    with ``TimeoutError`` once ``timeout`` seconds have passed.
    """
    DEFAULT_TIMEOUT: float          = 10.0
    DEFAULT_POLL_INTERVAL: float    = 0.02

    def __init__(self, target_path: Path, *, shared: bool = False,
                 timeout: float = DEFAULT_TIMEOUT,
                 poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.lock_path = target_path.with_name(f"{target_path.name}.lock")
        self._mode = fcntl.LOCK_SH if shared else fcntl.LOCK_EX
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._handle: TextIO | None = None

    @property
    def locked(self) -> bool:
        return self._handle is not None

    def acquire(self) -> None:
        if self._handle is not None:
            raise RuntimeError(f"Lock {self.lock_path} is already held by this instance")

        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        handle = self.lock_path.open("a+", encoding="utf-8")
        deadline = time.monotonic() + self._timeout

        while True:
            try:
                fcntl.flock(handle.fileno(), self._mode | fcntl.LOCK_NB)
                self._handle = handle
                return
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    handle.close()
                    raise TimeoutError(f"Timed out acquiring lock for {self.lock_path}") from None
                time.sleep(self._poll_interval)

    def release(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        except OSError as err:
            self.logger.debug("Failed to release lock %s: %s", self.lock_path, err)
        finally:
            handle.close()

    def __enter__(self) -> FileLock:
        self.acquire()
        return self

    def __exit__(self, exc_type: type[BaseException] | None,
                 exc: BaseException | None, exc_tb: TracebackType | None) -> None:
        self.release()
