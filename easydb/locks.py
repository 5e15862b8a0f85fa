from __future__ import annotations

import contextlib
import threading
from typing import Iterator

from .errors import LockRecursionError


class SharedExclusiveLock:
    """
    Reader/writer lock for one store instance.

    - Any number of threads may hold it shared at once.
    - One thread may hold it exclusive, with no shared holders.
    - A waiting writer blocks new readers, so writers cannot starve.
    - Not reentrant: acquiring again from a holding thread raises.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._waiting_writers = 0

    def acquire_shared(self) -> None:
        me = threading.get_ident()
        with self._cond:
            self._check_not_held(me)
            while self._writer is not None or self._waiting_writers:
                self._cond.wait()
            self._readers[me] = 1

    def release_shared(self) -> None:
        me = threading.get_ident()
        with self._cond:
            if self._readers.pop(me, None) is None:
                raise RuntimeError("release_shared() called by a thread not holding the lock")
            if not self._readers:
                self._cond.notify_all()

    def acquire_exclusive(self) -> None:
        me = threading.get_ident()
        with self._cond:
            self._check_not_held(me)
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers:
                    self._cond.wait()
            except BaseException:
                # readers may be parked behind this writer
                self._waiting_writers -= 1
                self._cond.notify_all()
                raise
            self._waiting_writers -= 1
            self._writer = me

    def release_exclusive(self) -> None:
        me = threading.get_ident()
        with self._cond:
            if self._writer != me:
                raise RuntimeError("release_exclusive() called by a thread not holding the lock")
            self._writer = None
            self._cond.notify_all()

    @contextlib.contextmanager
    def shared(self) -> Iterator[None]:
        self.acquire_shared()
        try:
            yield
        finally:
            self.release_shared()

    @contextlib.contextmanager
    def exclusive(self) -> Iterator[None]:
        self.acquire_exclusive()
        try:
            yield
        finally:
            self.release_exclusive()

    @property
    def reader_count(self) -> int:
        with self._cond:
            return len(self._readers)

    @property
    def waiting_writers(self) -> int:
        with self._cond:
            return self._waiting_writers

    @property
    def write_locked(self) -> bool:
        with self._cond:
            return self._writer is not None

    def _check_not_held(self, me: int) -> None:
        if self._writer == me or me in self._readers:
            raise LockRecursionError("SharedExclusiveLock does not support recursive acquisition")
