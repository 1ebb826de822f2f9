# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Generic, TypeVar, cast

from pyolt.lib.exceptions import PoolClosedError, TaskAbortedError
from pyolt.lib.types import StringEnum

T = TypeVar("T")
R = TypeVar("R")

Task = Callable[[], None]


class PoolState(StringEnum):
    OPEN    = "open"
    CLOSED  = "closed"


class WorkerPool:
    """
    Fixed Set Of Daemon Threads Draining A Bounded Task Queue.

    The queue holds ``2 * workers`` tasks; ``submit`` blocks while it is full,
    which throttles producers to the pace of the device. ``wait`` blocks until
    every accepted task has finished. A task that raises is logged and counted
    as finished; its worker keeps running.

    Example:
        with WorkerPool(8) as pool:
            for pon in pons:
                pool.submit(lambda pon=pon: fetch(pon))
            pool.wait()
    """

    DEFAULT_WORKERS: int = 10

    def __init__(self, workers: int = DEFAULT_WORKERS, name: str = "olt-worker") -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.workers = workers if workers > 0 else self.DEFAULT_WORKERS

        self._queue: queue.Queue[Task | None] = queue.Queue(maxsize=self.workers * 2)
        self._state = PoolState.OPEN
        self._submit_lock = threading.Lock()
        self._idle = threading.Condition()
        self._pending = 0

        self._threads = [
            threading.Thread(target=self._run, name=f"{name}-{i}", daemon=True)
            for i in range(self.workers)
        ]
        for thread in self._threads:
            thread.start()

    @property
    def state(self) -> PoolState:
        return self._state

    def submit(self, task: Task) -> None:
        """
        Queue A Task, Blocking While The Queue Is Full.

        Raises:
            PoolClosedError: If the pool has been closed.
        """
        # Held across put() so close() cannot queue its stop markers ahead of an accepted task
        with self._submit_lock:
            if self._state is PoolState.CLOSED:
                raise PoolClosedError("worker pool is closed")
            with self._idle:
                self._pending += 1
            self._queue.put(task)

    def wait(self) -> None:
        """Block until every accepted task has completed."""
        with self._idle:
            while self._pending > 0:
                self._idle.wait()

    def close(self, wait: bool = False) -> None:
        """
        Stop Accepting Tasks.

        Tasks already queued still run. With ``wait=True`` the call also joins
        the worker threads. Closing twice is a no-op.
        """
        with self._submit_lock:
            if self._state is PoolState.CLOSED:
                return
            self._state = PoolState.CLOSED
            for _ in self._threads:
                self._queue.put(None)

        if wait:
            for thread in self._threads:
                thread.join()

    def _run(self) -> None:
        while True:
            task = self._queue.get()
            if task is None:
                return
            try:
                task()
            except Exception:
                self.logger.exception("Worker task failed")
            finally:
                with self._idle:
                    self._pending -= 1
                    if self._pending == 0:
                        self._idle.notify_all()

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, exc_type: type[BaseException] | None,
                 exc: BaseException | None, exc_tb: TracebackType | None) -> None:
        self.close()


@dataclass(frozen=True)
class BatchResult(Generic[R]):
    """Outcome of one batch item; exactly one of ``value`` or ``error`` is meaningful."""
    index: int
    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchProcessor:
    """
    Apply A Function To Every Item Concurrently, Keeping Input Order.

    Results land in pre-allocated slots, one per input. A failing item records
    its exception in its own slot and never affects its siblings. A task that
    dies on a non-``Exception`` (``SystemExit`` and the like) leaves a
    ``TaskAbortedError`` in its slot.
    """

    def __init__(self, pool: WorkerPool) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._pool = pool

    def process(self, items: Sequence[T], fn: Callable[[T], R]) -> list[BatchResult[R]]:
        """
        Run ``fn`` Over ``items`` And Return One Result Per Item, In Order.

        Raises:
            PoolClosedError: If the underlying pool is already closed.
        """
        slots: list[BatchResult[R] | None] = [None] * len(items)
        slot_lock = threading.Lock()

        def make_task(index: int, item: T) -> Task:
            def task() -> None:
                try:
                    result = BatchResult(index=index, value=fn(item))
                except Exception as exc:
                    result = BatchResult(index=index, error=exc)
                with slot_lock:
                    slots[index] = result
            return task

        for index, item in enumerate(items):
            self._pool.submit(make_task(index, item))
        self._pool.wait()

        for index, slot in enumerate(slots):
            if slot is None:
                self.logger.warning("Batch item %d finished without a result", index)
                slots[index] = BatchResult(index=index, error=TaskAbortedError(f"batch item {index} was aborted"))

        return cast(list[BatchResult[R]], slots)
