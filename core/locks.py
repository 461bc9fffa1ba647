"""
In-process keyed locking.

KeyedLock hands out one mutex per key, so callers working on different keys
never wait on each other while callers sharing a key are serialized.
"""

import threading
from contextlib import contextmanager


class LockTimeout(TimeoutError):
    """
    Raised when a keyed lock could not be acquired in time.
    """

    def __init__(self, key, timeout):
        super().__init__(f"Timed out after {timeout}s waiting for lock {key!r}")
        self.key = key
        self.timeout = timeout


class KeyedLock:
    """
    A registry of reference-counted locks.

    Entries are created on first use and dropped once the last holder or
    waiter leaves, so the registry only ever holds keys that are in use.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of holders + waiters]
        self._entries = {}

    @contextmanager
    def hold(self, key, timeout=None):
        """
        Context manager that holds the lock for `key`.

        Args:
            key: Any hashable value.
            timeout: Seconds to wait. None waits forever.

        Raises:
            LockTimeout: if the lock was not acquired within `timeout`.
        """
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = [threading.Lock(), 0]
            entry[1] += 1

        acquired = entry[0].acquire(timeout=-1 if timeout is None else timeout)
        try:
            if not acquired:
                raise LockTimeout(key, timeout)
            yield
        finally:
            if acquired:
                entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self):
        with self._guard:
            return len(self._entries)
