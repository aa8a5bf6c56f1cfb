"""Transaction helpers: per-key serialization and bounded retry on stale snapshots."""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from guildhall.errors import StaleSnapshotError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyedLock:
    """
    One mutex per key (hero id, world id). Work on the same key runs one at a
    time; different keys never block each other. Idle locks are dropped.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock, waiters = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, waiters + 1)

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                _, waiters = self._locks[key]
                if waiters <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, waiters - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


def run_with_retries(operation: Callable[[], T], attempts: int, label: str) -> T:
    """
    Run a read-compute-commit `operation`, re-running it from a fresh read
    when the commit finds the snapshot stale. After `attempts` conflicts a
    StaleSnapshotError carrying only the generic retry message is raised;
    the row detail stays in the log.
    """
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except StaleSnapshotError as e:
            logger.warning("Attempt %d/%d for %s hit a stale snapshot: %s", attempt, attempts, label, e)
            if attempt == attempts:
                logger.error("Giving up on %s after %d stale snapshots", label, attempts)
                raise StaleSnapshotError() from e

    raise StaleSnapshotError()
