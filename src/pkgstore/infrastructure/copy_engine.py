"""Bulk parallel file copy via a fixed-size pool of worker threads.

Each :func:`copy_files` call builds a fresh pool, splits the actions into
one contiguous chunk per worker, and waits for every worker to report
back over a message queue. The first failure reported by any worker
fails the whole call; files already copied are left on disk. Workers
are stopped once the call settles, whatever the outcome.

``shutil.copy`` releases the GIL during the copy syscalls, so workers
copy in true parallel.
"""

from __future__ import annotations

import logging
import math
import os
import queue
import shutil
import threading
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from pkgstore.domain.actions import CopyAction, WorkBatch
from pkgstore.domain.errors import CopyError

logger = logging.getLogger(__name__)

# Effectively unbounded; the CPU cap applies first on any real machine.
DEFAULT_WORKERS_LIMIT = 999


def pool_size_for(workers_limit: int = DEFAULT_WORKERS_LIMIT) -> int:
    """Return ``min(workers_limit, ceil(cpus / 2))``, at least one."""
    cpus = os.cpu_count() or 1
    return max(1, min(workers_limit, math.ceil(cpus / 2)))


def partition(actions: Sequence[CopyAction], pool_size: int) -> list[WorkBatch]:
    """Split *actions* into *pool_size* contiguous chunks of ``ceil(n / pool_size)``.

    Trailing chunks are empty when there are fewer actions than workers.
    """
    size = math.ceil(len(actions) / pool_size)
    return [tuple(actions[i * size : (i + 1) * size]) for i in range(pool_size)]


# ---------------------------------------------------------------------------
# Worker
# ---------------------------------------------------------------------------


class WorkerStatus(StrEnum):
    """Whether a worker is currently running a batch."""

    IDLE = "idle"
    ACTIVE = "active"


@dataclass
class WorkerState:
    """Per-worker run state, owned by the pool and handed to one worker.

    A batch posted while the worker is active waits in *backlog* and is
    started, oldest first, when the active batch completes.
    """

    status: WorkerStatus = WorkerStatus.IDLE
    backlog: deque[WorkBatch] = field(default_factory=deque)
    lock: threading.Lock = field(default_factory=threading.Lock)


@dataclass(frozen=True)
class WorkerMessage:
    """Report posted by a worker: one per batch, success or first failure."""

    worker_id: int
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CopyWorker:
    """A single pool thread fed with batches through its inbox."""

    def __init__(
        self,
        worker_id: int,
        state: WorkerState,
        outbox: queue.Queue[WorkerMessage],
        stop: threading.Event,
    ) -> None:
        self.worker_id = worker_id
        self._state = state
        self._outbox = outbox
        self._stop = stop
        self._inbox: queue.Queue[WorkBatch | None] = queue.Queue()
        self._thread = threading.Thread(
            target=self._run,
            name=f"pkgstore-copy-{worker_id}",
            daemon=True,
        )

    @property
    def state(self) -> WorkerState:
        return self._state

    def start(self) -> None:
        self._thread.start()

    def post(self, batch: WorkBatch) -> None:
        """Start *batch* now if idle, otherwise queue it behind the active one."""
        with self._state.lock:
            if self._state.status is WorkerStatus.ACTIVE:
                self._state.backlog.append(batch)
                return
            self._state.status = WorkerStatus.ACTIVE
        self._inbox.put(batch)

    def terminate(self) -> None:
        """Stop after the current copy and wait for the thread to exit."""
        self._stop.set()
        self._inbox.put(None)
        if self._thread.is_alive():
            self._thread.join()

    def _run(self) -> None:
        while True:
            batch = self._inbox.get()
            if batch is None:
                return
            self._process(batch)
            self._advance()

    def _process(self, batch: WorkBatch) -> None:
        """Copy *batch* in order; post one completion or the first error.

        Copies within a batch are sequential. Parallelism comes from the
        pool running one batch per worker thread.
        """
        for action in batch:
            if self._stop.is_set():
                return
            try:
                shutil.copy(action.src, action.dest)
            except Exception as exc:
                # Every batch posts exactly one message, whatever the failure.
                self._outbox.put(WorkerMessage(self.worker_id, error=exc))
                return
        self._outbox.put(WorkerMessage(self.worker_id))

    def _advance(self) -> None:
        """Start the next backlog batch, or go idle."""
        with self._state.lock:
            if not self._state.backlog:
                self._state.status = WorkerStatus.IDLE
                return
            batch = self._state.backlog.popleft()
        self._inbox.put(batch)


# ---------------------------------------------------------------------------
# Pool controller
# ---------------------------------------------------------------------------


class CopyPool:
    """Single-use pool of :class:`CopyWorker` threads.

    Usage::

        CopyPool(pool_size_for(limit)).run(actions)
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            msg = f"Pool size must be at least 1, got {size}"
            raise ValueError(msg)
        self.size = size
        self.workers: list[CopyWorker] = []
        self._outbox: queue.Queue[WorkerMessage] = queue.Queue()
        self._stop = threading.Event()
        self._used = False

    def run(self, actions: Sequence[CopyAction]) -> None:
        """Copy every action; raise :class:`CopyError` on the first failure.

        Raises:
            RuntimeError: If the pool has already run.
        """
        if self._used:
            msg = "CopyPool is single-use; create a new pool for each run"
            raise RuntimeError(msg)
        self._used = True
        if not actions:
            return
        batches = [batch for batch in partition(actions, self.size) if batch]
        for worker_id in range(len(batches)):
            worker = CopyWorker(worker_id, WorkerState(), self._outbox, self._stop)
            worker.start()
            self.workers.append(worker)

        logger.debug("Copying %d files with %d workers", len(actions), len(self.workers))
        try:
            for worker, batch in zip(self.workers, batches, strict=True):
                worker.post(batch)
            self._wait(len(batches))
        finally:
            self.terminate()

    def terminate(self) -> None:
        for worker in self.workers:
            worker.terminate()

    def _wait(self, expected: int) -> None:
        pending = expected
        while pending:
            message = self._outbox.get()
            if message.error is not None:
                err = message.error
                filename = getattr(err, "filename", None)
                raise CopyError(
                    f"Copy failed in worker {message.worker_id}: {err}",
                    detail={
                        "worker": message.worker_id,
                        "path": str(filename) if filename else None,
                    },
                ) from err
            pending -= 1


def copy_files(
    actions: Sequence[CopyAction],
    *,
    workers_limit: int = DEFAULT_WORKERS_LIMIT,
) -> None:
    """Copy all *actions* in parallel; return once every copy has completed.

    Raises:
        CopyError: On the first I/O failure from any worker.
    """
    CopyPool(pool_size_for(workers_limit)).run(actions)
