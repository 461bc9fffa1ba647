"""
Unit tests for the in-process keyed lock.
"""

import threading

import pytest

from core.locks import KeyedLock, LockTimeout


class TestKeyedLock:
    def test_registry_is_emptied_after_release(self):
        locks = KeyedLock()

        with locks.hold(("u", 1)):
            assert len(locks) == 1

        assert len(locks) == 0

    def test_registry_is_emptied_after_exception(self):
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            with locks.hold("k"):
                raise RuntimeError("boom")

        assert len(locks) == 0

    def test_same_key_times_out_while_held(self):
        locks = KeyedLock()
        held = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold("k"):
                held.set()
                release.wait(5)

        thread = threading.Thread(target=holder)
        thread.start()
        held.wait(5)

        try:
            with pytest.raises(LockTimeout) as exc:
                with locks.hold("k", timeout=0.05):
                    pass
            assert exc.value.key == "k"
        finally:
            release.set()
            thread.join()

        assert len(locks) == 0

    def test_different_keys_do_not_block(self):
        locks = KeyedLock()

        with locks.hold(("user", 1)):
            # Would time out if the keys shared a mutex
            with locks.hold(("user", 2), timeout=0.05):
                assert len(locks) == 2
