import gc
import threading
import time

import pytest

from freelance_booking.core import calendar_lock as calendar_lock_module
from freelance_booking.core.calendar_lock import (
    CALENDAR_BUSY_MESSAGE,
    calendar_lock,
    reset_calendar_locks,
)
from freelance_booking.core.exceptions import SlotUnavailableException


class _FakeRedis:
    """In-memory stand-in for the handful of Redis calls the lock makes."""

    def __init__(self, always_taken: bool = False, ping_error: Exception = None):
        self.store = {}
        self.always_taken = always_taken
        self.ping_error = ping_error
        self.set_calls = []
        self.eval_calls = []

    def ping(self) -> bool:
        if self.ping_error is not None:
            raise self.ping_error
        return True

    def set(self, key, value, nx=False, ex=None):
        self.set_calls.append((key, value, nx, ex))
        if self.always_taken or (nx and key in self.store):
            return None
        self.store[key] = value
        return True

    def eval(self, script, numkeys, key, token):
        self.eval_calls.append((key, token))
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


@pytest.fixture
def fake_redis(monkeypatch):
    def _install(**kwargs) -> _FakeRedis:
        fake = _FakeRedis(**kwargs)
        monkeypatch.setattr(calendar_lock_module.settings, "redis_url", "redis://fake:6379/0")
        monkeypatch.setattr(calendar_lock_module.Redis, "from_url", lambda *a, **kw: fake)
        reset_calendar_locks()
        return fake

    return _install


def test_lock_serializes_same_freelancer() -> None:
    entered = threading.Event()
    release = threading.Event()
    errors = []

    def holder() -> None:
        with calendar_lock("f1"):
            entered.set()
            release.wait(2)

    thread = threading.Thread(target=holder)
    thread.start()
    assert entered.wait(2)
    try:
        with pytest.raises(SlotUnavailableException) as exc_info:
            with calendar_lock("f1", timeout_s=0.1):
                errors.append("entered while held")
        assert exc_info.value.message == CALENDAR_BUSY_MESSAGE
    finally:
        release.set()
        thread.join(2)

    assert errors == []
    # Free again once the holder leaves
    with calendar_lock("f1", timeout_s=0.1):
        pass


def test_different_freelancers_do_not_block_each_other() -> None:
    with calendar_lock("f1"):
        with calendar_lock("f2", timeout_s=0.1):
            pass


def test_waiter_gets_lock_after_release() -> None:
    order = []

    def worker(name: str, hold: float) -> None:
        with calendar_lock("f1", timeout_s=2):
            order.append(f"{name}-in")
            time.sleep(hold)
            order.append(f"{name}-out")

    first = threading.Thread(target=worker, args=("a", 0.2))
    first.start()
    time.sleep(0.05)
    second = threading.Thread(target=worker, args=("b", 0))
    second.start()
    first.join(3)
    second.join(3)

    assert order == ["a-in", "a-out", "b-in", "b-out"]


def test_idle_local_locks_are_released_from_cache() -> None:
    with calendar_lock("freelancer-idle", timeout_s=1):
        assert "freelancer-idle" in calendar_lock_module._LOCAL_LOCKS

    gc.collect()
    assert "freelancer-idle" not in calendar_lock_module._LOCAL_LOCKS


def test_waiters_share_one_local_lock() -> None:
    first = calendar_lock_module._local_lock("freelancer-shared")
    assert calendar_lock_module._local_lock("freelancer-shared") is first

def test_redis_key_is_set_and_released(fake_redis) -> None:
    fake = fake_redis()

    with calendar_lock("f1", ttl_s=30):
        assert "calendar:f1:mutex" in fake.store
        key, token, nx, ex = fake.set_calls[0]
        assert (key, nx, ex) == ("calendar:f1:mutex", True, 30)

    assert fake.store == {}
    assert fake.eval_calls == [("calendar:f1:mutex", token)]


def test_redis_key_held_elsewhere_times_out(fake_redis) -> None:
    fake_redis(always_taken=True)

    with pytest.raises(SlotUnavailableException) as exc_info:
        with calendar_lock("f1", timeout_s=0.1):
            pytest.fail("lock should not be granted")
    assert exc_info.value.message == CALENDAR_BUSY_MESSAGE

    # The process-local lock was released on the way out
    assert calendar_lock_module._local_lock("f1").acquire(blocking=False)
    calendar_lock_module._local_lock("f1").release()


def test_unreachable_redis_fails_open(fake_redis) -> None:
    fake_redis(ping_error=ConnectionError("connection refused"))
    ran = []

    with calendar_lock("f1", timeout_s=0.1):
        ran.append(True)

    assert ran == [True]


def test_body_exception_still_releases(fake_redis) -> None:
    fake = fake_redis()

    with pytest.raises(RuntimeError):
        with calendar_lock("f1"):
            raise RuntimeError("boom")

    assert fake.store == {}
    with calendar_lock("f1", timeout_s=0.1):
        pass
