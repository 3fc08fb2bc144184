"""Keyed mutual exclusion with bounded waits."""

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import structlog

from events.domain.errors import LockTimeoutError

logger = structlog.get_logger(__name__)


@dataclass
class _Slot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class KeyedLock:
    """A table of locks, one per key, created on demand.

    Holders of different keys never contend. A slot is dropped once nobody
    holds or waits on it, so the table only grows with live contention.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout
        self._guard = threading.Lock()
        self._slots: dict[Hashable, _Slot] = {}

    @contextmanager
    def hold(self, key: Hashable, timeout: float | None = None) -> Iterator[None]:
        """Hold the lock for ``key``.

        Raises:
            LockTimeoutError: If the lock is not acquired within ``timeout``.
        """
        wait = self.timeout if timeout is None else timeout
        slot = self._checkout(key)
        try:
            if not slot.lock.acquire(timeout=wait):
                logger.warning("lock_timeout", key=str(key), timeout=wait)
                raise LockTimeoutError(str(key), wait)
            try:
                yield
            finally:
                slot.lock.release()
        finally:
            self._checkin(key, slot)

    def __len__(self) -> int:
        with self._guard:
            return len(self._slots)

    def _checkout(self, key: Hashable) -> _Slot:
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = self._slots[key] = _Slot()
            slot.holders += 1
            return slot

    def _checkin(self, key: Hashable, slot: _Slot) -> None:
        with self._guard:
            slot.holders -= 1
            if slot.holders == 0:
                del self._slots[key]
