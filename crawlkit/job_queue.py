from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Deque, Optional

from .models import Job

logger = logging.getLogger(__name__)


class JobQueue:
    """Bounded worker pool consuming a FIFO of jobs.

    - Starts paused: pushed jobs wait until resume().
    - At most ``concurrency`` jobs run at once on the thread pool.
    - The drain callback fires once, when nothing is pending or active.
    - kill() drops pending jobs; jobs already running are left to finish.
    """

    def __init__(self, worker: Callable[[Job], None], concurrency: int = 1) -> None:
        self._worker = worker
        self._concurrency = max(1, int(concurrency))
        self._executor = ThreadPoolExecutor(
            max_workers=self._concurrency, thread_name_prefix="crawlkit-worker"
        )

        self._lock = threading.Lock()
        self._cv = threading.Condition(self._lock)

        self._pending: Deque[Job] = deque()
        self._active = 0
        self._paused = True
        self._resumed = False
        self._killed = False
        self._drain: Optional[Callable[[], None]] = None
        self._drained = False

    def push(self, job: Job) -> bool:
        """Queue a job. Returns False if the queue was already killed."""
        with self._cv:
            if self._killed:
                logger.debug("queue killed, dropping %s", job.id)
                return False
            self._pending.append(job)
            self._dispatch()
        return True

    def on_drain(self, fn: Callable[[], None]) -> None:
        with self._cv:
            self._drain = fn
            self._drained = False

    def pause(self) -> None:
        with self._cv:
            self._paused = True

    def resume(self) -> None:
        with self._cv:
            self._paused = False
            self._resumed = True
            self._dispatch()
            drain = self._take_drain()
        if drain:
            drain()

    def kill(self) -> None:
        with self._cv:
            if self._killed:
                return
            self._killed = True
            dropped = len(self._pending)
            self._pending.clear()
            self._cv.notify_all()
        if dropped:
            logger.info("queue killed, %d pending job(s) dropped", dropped)
        self._executor.shutdown(wait=False, cancel_futures=False)

    def idle(self) -> bool:
        with self._cv:
            return not self._pending and self._active == 0

    def _dispatch(self) -> None:
        # Lock held by caller.
        while (
            not self._paused
            and not self._killed
            and self._pending
            and self._active < self._concurrency
        ):
            job = self._pending.popleft()
            self._active += 1
            self._executor.submit(self._run, job)

    def _take_drain(self) -> Optional[Callable[[], None]]:
        # Lock held by caller.
        if (
            self._drain is None
            or self._drained
            or self._paused
            or self._killed
            or not self._resumed
            or self._pending
            or self._active
        ):
            return None
        self._drained = True
        return self._drain

    def _run(self, job: Job) -> None:
        try:
            self._worker(job)
        except Exception:  # noqa: BLE001
            logger.exception("unexpected error while processing %s", job.id)
        finally:
            with self._cv:
                self._active = max(0, self._active - 1)
                self._dispatch()
                drain = self._take_drain()
                self._cv.notify_all()
        if drain:
            try:
                drain()
            except Exception:  # noqa: BLE001
                logger.exception("drain callback failed")

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def active(self) -> int:
        return self._active

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def killed(self) -> bool:
        return self._killed
