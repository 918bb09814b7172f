"""
Concurrency management for the shared registry.
"""

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional

from ..core.exceptions import ConcurrencyError


class LockType(Enum):
    """Types of locks available."""
    READ = "read"
    WRITE = "write"


@dataclass
class LockStats:
    """Counters describing lock usage."""
    read_acquisitions: int = 0
    write_acquisitions: int = 0
    timeouts: int = 0


class ConcurrencyManager:
    """
    Readers/writer lock guarding registry state.

    Any number of readers may hold the lock together; a writer holds it alone.
    Waiting writers block new readers so a stream of queries cannot starve a
    mutation. The lock is not reentrant.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        self._default_timeout = default_timeout
        self._condition = threading.Condition(threading.Lock())
        self._active_readers = 0
        self._active_writer = False
        self._waiting_writers = 0
        self._stats = LockStats()

    def acquire_lock(self, lock_type: LockType, timeout: Optional[float] = None) -> None:
        """Block until the lock is held, or raise ConcurrencyError on timeout."""
        if timeout is None:
            timeout = self._default_timeout
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._condition:
            if lock_type == LockType.WRITE:
                self._waiting_writers += 1
                try:
                    while self._active_writer or self._active_readers:
                        self._wait(deadline, lock_type)
                finally:
                    self._waiting_writers -= 1
                    if not self._waiting_writers:
                        self._condition.notify_all()
                self._active_writer = True
                self._stats.write_acquisitions += 1
            else:
                while self._active_writer or self._waiting_writers:
                    self._wait(deadline, lock_type)
                self._active_readers += 1
                self._stats.read_acquisitions += 1

    def release_lock(self, lock_type: LockType) -> None:
        """Release a lock previously acquired with the same type."""
        with self._condition:
            if lock_type == LockType.WRITE:
                if not self._active_writer:
                    raise ConcurrencyError("Write lock released without being held")
                self._active_writer = False
            else:
                if self._active_readers == 0:
                    raise ConcurrencyError("Read lock released without being held")
                self._active_readers -= 1
            self._condition.notify_all()

    def _wait(self, deadline: Optional[float], lock_type: LockType) -> None:
        if deadline is None:
            self._condition.wait()
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0 or not self._condition.wait(remaining):
            self._stats.timeouts += 1
            raise ConcurrencyError(f"Timed out acquiring {lock_type.value} lock", "lock_timeout")

    @contextmanager
    def lock(self, lock_type: LockType, timeout: Optional[float] = None) -> Iterator[None]:
        """Context manager for acquiring and releasing locks."""
        self.acquire_lock(lock_type, timeout)
        try:
            yield
        finally:
            self.release_lock(lock_type)

    def read_lock(self, timeout: Optional[float] = None):
        return self.lock(LockType.READ, timeout)

    def write_lock(self, timeout: Optional[float] = None):
        return self.lock(LockType.WRITE, timeout)

    def get_statistics(self) -> Dict[str, int]:
        """Get lock statistics."""
        with self._condition:
            return {
                'active_readers': self._active_readers,
                'active_writer': int(self._active_writer),
                'waiting_writers': self._waiting_writers,
                'read_acquisitions': self._stats.read_acquisitions,
                'write_acquisitions': self._stats.write_acquisitions,
                'timeouts': self._stats.timeouts,
            }
