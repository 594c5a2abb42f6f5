"""Tests for the RWLock guarding MessageStore.

Tests verify:
- Multiple concurrent readers
- Exclusive writer access
- Writer preference (prevents starvation)
- Reentrant read locks
- Upgrade, downgrade and write reentry rejection
- Acquisition timeouts
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from msglocator.runtime.rwlock import RWLock


class TestRWLockBasics:
    """Test basic RWLock functionality."""

    def test_single_reader(self) -> None:
        """Single reader can acquire lock."""
        lock = RWLock()

        with lock.read():
            assert lock.reader_count == 1

        assert lock.reader_count == 0

    def test_single_writer(self) -> None:
        """Single writer can acquire lock."""
        lock = RWLock()

        with lock.write():
            assert lock.writer_active

        assert not lock.writer_active

    def test_multiple_reads_concurrent(self) -> None:
        """Multiple readers hold the lock at the same time."""
        lock = RWLock()
        inside = threading.Barrier(3, timeout=2)

        def reader() -> None:
            with lock.read():
                # Deadlocks (BrokenBarrierError) unless all three are inside
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert lock.reader_count == 0

    def test_write_blocks_readers(self) -> None:
        """Writers block readers from acquiring lock."""
        lock = RWLock()
        writer_active = threading.Event()
        events: list[str] = []

        def writer() -> None:
            with lock.write():
                writer_active.set()
                time.sleep(0.05)
                events.append("writer-done")

        def reader() -> None:
            writer_active.wait()
            with lock.read():
                events.append("reader")

        writer_thread = threading.Thread(target=writer)
        reader_thread = threading.Thread(target=reader)
        writer_thread.start()
        reader_thread.start()
        writer_thread.join()
        reader_thread.join()

        assert events == ["writer-done", "reader"]


class TestRWLockReentrancy:
    """Test reentrant read lock behavior and lock acquisition prohibitions."""

    def test_same_thread_multiple_read_locks(self) -> None:
        """Same thread can acquire read lock multiple times (reentrant)."""
        lock = RWLock()

        with lock.read(), lock.read(), lock.read():
            # Reentry does not count as another reader
            assert lock.reader_count == 1

        assert lock.reader_count == 0

    def test_read_to_write_upgrade_rejected(self) -> None:
        """Read-to-write lock upgrade raises RuntimeError."""
        lock = RWLock()

        with lock.read(), pytest.raises(
            RuntimeError,
            match="Cannot upgrade read lock to write lock",
        ), lock.write():
            pass

    def test_write_to_write_reentry_rejected(self) -> None:
        """Write-to-write reentry raises RuntimeError."""
        lock = RWLock()

        with lock.write(), pytest.raises(
            RuntimeError,
            match="already holding write lock",
        ), lock.write():
            pass

    def test_write_to_read_downgrade_rejected(self) -> None:
        """Write-to-read downgrade raises RuntimeError."""
        lock = RWLock()

        with lock.write(), pytest.raises(
            RuntimeError,
            match="Cannot acquire read lock while holding write lock",
        ), lock.read():
            pass

    def test_lock_usable_after_rejection(self) -> None:
        """A rejected upgrade leaves the lock consistent."""
        lock = RWLock()

        with lock.read(), pytest.raises(RuntimeError), lock.write():
            pass

        with lock.write():
            assert lock.writer_active
        assert lock.reader_count == 0


class TestRWLockWriterPreference:
    """Test writer preference to prevent starvation."""

    def test_waiting_writer_blocks_new_readers(self) -> None:
        """Waiting writers prevent new readers (writer preference)."""
        lock = RWLock()
        reader1_acquired = threading.Event()
        release_reader1 = threading.Event()
        order: list[str] = []

        def reader1() -> None:
            with lock.read():
                reader1_acquired.set()
                release_reader1.wait()

        def writer() -> None:
            with lock.write():
                order.append("writer")

        def reader2() -> None:
            with lock.read():
                order.append("reader2")

        thread_reader1 = threading.Thread(target=reader1)
        thread_reader1.start()
        reader1_acquired.wait()

        thread_writer = threading.Thread(target=writer)
        thread_writer.start()
        time.sleep(0.02)  # writer is now waiting

        thread_reader2 = threading.Thread(target=reader2)
        thread_reader2.start()
        time.sleep(0.02)
        assert thread_reader2.is_alive()

        release_reader1.set()
        for thread in (thread_reader1, thread_writer, thread_reader2):
            thread.join()

        assert order == ["writer", "reader2"]


class TestRWLockTimeout:
    """Test acquisition timeouts."""

    def test_write_times_out_while_read_held(self) -> None:
        """Writer gives up after its timeout while another thread reads."""
        lock = RWLock()
        holding = threading.Event()
        release = threading.Event()

        def reader() -> None:
            with lock.read():
                holding.set()
                release.wait()

        thread = threading.Thread(target=reader)
        thread.start()
        holding.wait()
        try:
            with pytest.raises(TimeoutError, match="write"), lock.write(timeout=0.01):
                pass
        finally:
            release.set()
            thread.join()

    def test_timed_out_writer_does_not_block_readers(self) -> None:
        """A writer that timed out no longer counts as waiting."""
        lock = RWLock()
        holding = threading.Event()
        release = threading.Event()

        def reader() -> None:
            with lock.read():
                holding.set()
                release.wait()

        thread = threading.Thread(target=reader)
        thread.start()
        holding.wait()
        try:
            with pytest.raises(TimeoutError), lock.write(timeout=0.01):
                pass
            with lock.read(timeout=0.5):
                assert lock.reader_count == 2
        finally:
            release.set()
            thread.join()

    def test_negative_timeout_rejected(self) -> None:
        """Negative timeouts raise ValueError."""
        lock = RWLock()

        with pytest.raises(ValueError, match="non-negative"), lock.read(timeout=-1):
            pass


class TestRWLockConcurrency:
    """Test thread safety under load."""

    def test_writes_are_exclusive(self) -> None:
        """Concurrent read-modify-write under the write lock loses no updates."""
        lock = RWLock()
        counter = {"value": 0}

        def increment() -> None:
            for _ in range(200):
                with lock.write():
                    current = counter["value"]
                    counter["value"] = current + 1

        def read() -> int:
            total = 0
            for _ in range(200):
                with lock.read():
                    total += counter["value"] >= 0
            return total

        with ThreadPoolExecutor(max_workers=8) as pool:
            writers = [pool.submit(increment) for _ in range(4)]
            readers = [pool.submit(read) for _ in range(4)]
            for future in writers + readers:
                future.result()

        assert counter["value"] == 800
