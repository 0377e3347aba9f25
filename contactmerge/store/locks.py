"""Per-record write serialization."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class RecordLockRegistry:
    """Hands out one lock per record id.

    At most one mutation runs against a given record at a time; a second
    request for the same id blocks until the first releases it. Locks for
    several ids are always taken in sorted order so two multi-record
    operations cannot deadlock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, record_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(record_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[record_id] = lock
            return lock

    @contextmanager
    def hold(self, *record_ids: str) -> Iterator[None]:
        """Hold the write locks of every given record id."""
        locks = [self._lock_for(record_id) for record_id in sorted(set(record_ids))]
        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def is_locked(self, record_id: str) -> bool:
        """True while a mutation holds the record's lock."""
        return self._lock_for(record_id).locked()
