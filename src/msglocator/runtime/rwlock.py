"""Readers-writer lock guarding the message store.

Message lookups are frequent and short; load commits are rare and must be
exclusive. This lock allows:
- Any number of concurrent readers (get/get_formatted lookups)
- One exclusive writer (a load commit)
- Writer preference, so a steady stream of lookups cannot starve a commit
- Reentrant reads on the same thread
- Optional acquisition timeout (raises TimeoutError)

Limitations:
    A thread holding the read lock cannot take the write lock, and a thread
    holding the write lock cannot take either lock again. Both raise
    RuntimeError instead of deadlocking. Store commits never need nesting.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ["RWLock"]


class RWLock:
    """Readers-writer lock with writer preference.

    Example:
        >>> lock = RWLock()
        >>> with lock.read():
        ...     pass  # shared
        >>> with lock.write():
        ...     pass  # exclusive
    """

    __slots__ = (
        "_active_readers",
        "_active_writer",
        "_condition",
        "_reader_threads",
        "_waiting_writers",
    )

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._active_readers: int = 0
        # Thread id of the writer, if any
        self._active_writer: int | None = None
        self._waiting_writers: int = 0
        # Thread id -> reentrant read depth
        self._reader_threads: dict[int, int] = {}

    @contextmanager
    def read(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock in shared mode for the duration of the block.

        Args:
            timeout: Seconds to wait; None waits indefinitely, 0.0 does not block.

        Raises:
            RuntimeError: If this thread holds the write lock.
            TimeoutError: If the lock was not acquired in time.
            ValueError: If timeout is negative.
        """
        self._acquire_read(timeout)
        try:
            yield
        finally:
            self._release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock exclusively for the duration of the block.

        Args:
            timeout: Seconds to wait; None waits indefinitely, 0.0 does not block.

        Raises:
            RuntimeError: If this thread already holds the read or write lock.
            TimeoutError: If the lock was not acquired in time.
            ValueError: If timeout is negative.
        """
        self._acquire_write(timeout)
        try:
            yield
        finally:
            self._release_write()

    @staticmethod
    def _deadline(timeout: float | None) -> float | None:
        if timeout is None:
            return None
        if timeout < 0:
            msg = f"Timeout must be non-negative, got {timeout}"
            raise ValueError(msg)
        return time.monotonic() + timeout

    def _wait(self, deadline: float | None, what: str) -> None:
        """Wait on the condition until notified or the deadline passes."""
        if deadline is None:
            self._condition.wait()
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            msg = f"Timed out waiting for {what} lock"
            raise TimeoutError(msg)
        self._condition.wait(timeout=remaining)

    def _acquire_read(self, timeout: float | None = None) -> None:
        deadline = self._deadline(timeout)
        me = threading.get_ident()

        with self._condition:
            if me in self._reader_threads:
                self._reader_threads[me] += 1
                return

            if self._active_writer == me:
                msg = (
                    "Cannot acquire read lock while holding write lock. "
                    "Release the write lock first."
                )
                raise RuntimeError(msg)

            # Waiting writers block new readers (writer preference)
            while self._active_writer is not None or self._waiting_writers > 0:
                self._wait(deadline, "read")

            self._active_readers += 1
            self._reader_threads[me] = 1

    def _release_read(self) -> None:
        me = threading.get_ident()

        with self._condition:
            if me not in self._reader_threads:
                msg = "Thread does not hold read lock"
                raise RuntimeError(msg)

            self._reader_threads[me] -= 1
            if self._reader_threads[me] == 0:
                del self._reader_threads[me]
                self._active_readers -= 1
                if self._active_readers == 0:
                    self._condition.notify_all()

    def _acquire_write(self, timeout: float | None = None) -> None:
        deadline = self._deadline(timeout)
        me = threading.get_ident()

        with self._condition:
            if me in self._reader_threads:
                msg = (
                    "Cannot upgrade read lock to write lock. "
                    "Release the read lock first."
                )
                raise RuntimeError(msg)
            if self._active_writer == me:
                msg = "Cannot acquire write lock: already holding write lock."
                raise RuntimeError(msg)

            self._waiting_writers += 1
            try:
                while self._active_readers > 0 or self._active_writer is not None:
                    self._wait(deadline, "write")
                self._active_writer = me
            finally:
                # Runs on timeout too: readers spinning on _waiting_writers
                # need a wakeup once this writer stops waiting.
                self._waiting_writers -= 1
                self._condition.notify_all()

    def _release_write(self) -> None:
        me = threading.get_ident()

        with self._condition:
            if self._active_writer != me:
                msg = "Thread does not hold write lock"
                raise RuntimeError(msg)
            self._active_writer = None
            self._condition.notify_all()

    @property
    def reader_count(self) -> int:
        """Number of distinct threads currently holding the read lock."""
        with self._condition:
            return self._active_readers

    @property
    def writer_active(self) -> bool:
        """True if any thread currently holds the write lock."""
        with self._condition:
            return self._active_writer is not None
