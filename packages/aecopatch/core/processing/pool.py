"""Fork-join worker pool for recursive fan-out.

Directory walks fan out from inside worker threads: every directory level
submits its entries to the same pool and blocks until they finish. A plain
bounded executor deadlocks under that pattern once every worker is waiting on
queued children. Here a thread that waits in ``map_ordered`` runs its own
batch's unclaimed tasks itself, so progress never depends on a free worker.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from concurrent.futures import Future
import logging
import os
import threading
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class _Task(Generic[T, R]):
    """One unit of work and the future holding its outcome."""

    __slots__ = ("fn", "item", "future", "claimed")

    def __init__(self, fn: Callable[[T], R], item: T) -> None:
        self.fn = fn
        self.item = item
        self.future: Future[R] = Future()
        self.claimed = False

    def run(self) -> None:
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self.fn(self.item)
        except BaseException as exc:
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


class WorkerPool:
    """
    Thread pool for nested, order-preserving parallel maps.

    Tasks are claimed exactly once, either by a worker thread (oldest first)
    or by the thread waiting on their batch. Threads start lazily on first use.

    Example:
        >>> with WorkerPool(max_workers=4) as pool:
        ...     pool.map_ordered(len, ["a", "bb", "ccc"])
        [1, 2, 3]
    """

    def __init__(
        self,
        max_workers: int | None = None,
        thread_name_prefix: str = "aecopatch-worker",
    ) -> None:
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.max_workers = max_workers
        self._thread_name_prefix = thread_name_prefix
        self._queue: deque[_Task] = deque()
        self._cond = threading.Condition()
        self._threads: list[threading.Thread] = []
        self._shutdown = False

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _ensure_workers(self) -> None:
        # Caller holds self._cond
        while len(self._threads) < self.max_workers:
            thread = threading.Thread(
                target=self._worker,
                name=f"{self._thread_name_prefix}-{len(self._threads)}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

    def _claim_next(self) -> _Task | None:
        # Caller holds self._cond; drops tasks already claimed by their waiter
        while self._queue:
            task = self._queue.popleft()
            if not task.claimed:
                task.claimed = True
                return task
        return None

    def _worker(self) -> None:
        while True:
            with self._cond:
                task = self._claim_next()
                while task is None and not self._shutdown:
                    self._cond.wait()
                    task = self._claim_next()
                if task is None:
                    return

            task.run()

            with self._cond:
                self._cond.notify_all()

    def _help_until_done(self, tasks: list[_Task]) -> None:
        # Claims within one batch happen in list order, so claimed and done
        # tasks can be tracked with forward-only cursors.
        claim_index = 0
        done_index = 0
        while True:
            with self._cond:
                while True:
                    while claim_index < len(tasks) and tasks[claim_index].claimed:
                        claim_index += 1
                    if claim_index < len(tasks):
                        task = tasks[claim_index]
                        task.claimed = True
                        break

                    while done_index < len(tasks) and tasks[done_index].future.done():
                        done_index += 1
                    if done_index == len(tasks):
                        return
                    self._cond.wait()

            task.run()

            with self._cond:
                self._cond.notify_all()

    def map_ordered(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        """Apply ``fn`` to every item in parallel and return results in input order.

        Blocks until every task has settled. If any task raised, the exception
        of the earliest failing item is re-raised and the other results are
        discarded.

        Args:
            fn: Function to apply; called from pool threads or the caller's thread
            items: Inputs, each owned by exactly one task

        Returns:
            Results positioned like their inputs

        Raises:
            RuntimeError: If the pool has been shut down
            BaseException: The first failure by input position
        """
        tasks = [_Task(fn, item) for item in items]
        if not tasks:
            return []

        with self._cond:
            if self._shutdown:
                raise RuntimeError("cannot schedule work on a pool that has been shut down")
            self._ensure_workers()
            self._queue.extend(tasks)
            self._cond.notify_all()

        self._help_until_done(tasks)

        return [task.future.result() for task in tasks]

    def shutdown(self) -> None:
        """Stop worker threads once the queue is drained."""
        with self._cond:
            self._shutdown = True
            self._cond.notify_all()
            threads = list(self._threads)

        for thread in threads:
            if thread is not threading.current_thread():
                thread.join()

        logger.debug("Worker pool shut down (%d threads)", len(threads))
