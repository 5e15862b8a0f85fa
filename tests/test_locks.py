from __future__ import annotations

import threading
import time

import pytest

from easydb.errors import LockRecursionError
from easydb.locks import SharedExclusiveLock

TIMEOUT = 5.0


def _wait_for(predicate, timeout: float = TIMEOUT) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def _start(target) -> threading.Thread:
    t = threading.Thread(target=target, daemon=True)
    t.start()
    return t


def test_readers_share_the_lock():
    lock = SharedExclusiveLock()
    barrier = threading.Barrier(3, timeout=TIMEOUT)

    def reader():
        with lock.shared():
            barrier.wait()  # only passes if all readers are inside together

    threads = [_start(reader) for _ in range(3)]
    for t in threads:
        t.join(TIMEOUT)
    assert not barrier.broken
    assert lock.reader_count == 0


def test_writer_waits_for_readers():
    lock = SharedExclusiveLock()
    acquired = threading.Event()

    def writer():
        with lock.exclusive():
            acquired.set()

    lock.acquire_shared()
    t = _start(writer)
    assert _wait_for(lambda: lock.waiting_writers == 1)
    assert not acquired.wait(0.1)

    lock.release_shared()
    assert acquired.wait(TIMEOUT)
    t.join(TIMEOUT)
    assert not lock.write_locked


def test_readers_wait_for_writer():
    lock = SharedExclusiveLock()
    acquired = threading.Event()

    def reader():
        with lock.shared():
            acquired.set()

    lock.acquire_exclusive()
    t = _start(reader)
    assert not acquired.wait(0.1)

    lock.release_exclusive()
    assert acquired.wait(TIMEOUT)
    t.join(TIMEOUT)


def test_waiting_writer_blocks_new_readers():
    lock = SharedExclusiveLock()
    order: list[str] = []

    def writer():
        with lock.exclusive():
            order.append("writer")

    def late_reader():
        with lock.shared():
            order.append("reader")

    lock.acquire_shared()
    w = _start(writer)
    assert _wait_for(lambda: lock.waiting_writers == 1)

    r = _start(late_reader)
    time.sleep(0.1)
    assert order == []

    lock.release_shared()
    w.join(TIMEOUT)
    r.join(TIMEOUT)
    assert order == ["writer", "reader"]


def test_writers_are_mutually_exclusive():
    lock = SharedExclusiveLock()
    inside = 0
    max_inside = 0
    guard = threading.Lock()

    def writer():
        nonlocal inside, max_inside
        for _ in range(50):
            with lock.exclusive():
                with guard:
                    inside += 1
                    max_inside = max(max_inside, inside)
                time.sleep(0.0005)
                with guard:
                    inside -= 1

    threads = [_start(writer) for _ in range(4)]
    for t in threads:
        t.join(TIMEOUT * 4)
    assert max_inside == 1


def test_recursion_is_rejected():
    lock = SharedExclusiveLock()

    with lock.shared():
        with pytest.raises(LockRecursionError):
            lock.acquire_shared()
        with pytest.raises(LockRecursionError):
            lock.acquire_exclusive()

    with lock.exclusive():
        with pytest.raises(LockRecursionError):
            lock.acquire_shared()
        with pytest.raises(LockRecursionError):
            lock.acquire_exclusive()

    # still usable afterwards
    with lock.exclusive():
        pass
    assert lock.reader_count == 0
    assert not lock.write_locked


def test_release_without_holding_raises():
    lock = SharedExclusiveLock()
    with pytest.raises(RuntimeError):
        lock.release_shared()
    with pytest.raises(RuntimeError):
        lock.release_exclusive()
