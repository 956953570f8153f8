"""
Per-freelancer calendar mutex.

Serializes the check-then-insert booking path for one freelancer. A
process-local lock is always taken; when REDIS_URL is configured a Redis
``SET NX EX`` key extends the exclusion across worker processes. Redis
being unreachable fails open to the local lock, leaving the storage-level
exclusion constraint as the remaining guard.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Iterator, Optional
import weakref

from redis import Redis

from ..monitoring.prometheus_metrics import prometheus_metrics
from .config import settings
from .exceptions import SlotUnavailableException
from .ulid_helper import generate_ulid

logger = logging.getLogger(__name__)

CALENDAR_BUSY_MESSAGE = "Freelancer calendar is busy, please try again"

_POLL_INTERVAL_S = 0.05

# Deletes the key only if it still holds our token
_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""

# Entries drop out once no caller holds the lock
_LOCAL_LOCKS: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_LOCAL_LOCKS_GUARD = threading.Lock()

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()


def _lock_key(freelancer_id: str) -> str:
    return f"calendar:{freelancer_id}:mutex"


def _local_lock(freelancer_id: str) -> threading.Lock:
    with _LOCAL_LOCKS_GUARD:
        lock = _LOCAL_LOCKS.get(freelancer_id)
        if lock is None:
            lock = threading.Lock()
            _LOCAL_LOCKS[freelancer_id] = lock
        return lock


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS
    if not settings.redis_url:
        return None
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=settings.calendar_lock_timeout_seconds,
            )
            client.ping()
        except Exception as exc:
            logger.warning("calendar_lock_redis_unavailable: %s", exc)
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def _acquire_distributed(freelancer_id: str, deadline: float, ttl_s: int) -> Optional[str]:
    """
    Acquire the Redis key before ``deadline``.

    Returns the owner token, or None when Redis is not in use. Raises
    SlotUnavailableException when the key stays held past the deadline.
    """
    client = _get_sync_redis()
    if client is None:
        if settings.redis_url:
            prometheus_metrics.record_calendar_lock("acquire", "redis_unavailable")
        return None

    token = generate_ulid()
    key = _lock_key(freelancer_id)
    while True:
        try:
            if client.set(key, token, nx=True, ex=ttl_s):
                prometheus_metrics.record_calendar_lock("acquire", "success")
                return token
        except Exception as exc:
            prometheus_metrics.record_calendar_lock("acquire", "error")
            logger.warning(
                "calendar_lock_acquire_failed",
                extra={
                    "freelancer_id": freelancer_id,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            return None
        if time.monotonic() >= deadline:
            prometheus_metrics.record_calendar_lock("acquire", "blocked")
            logger.warning("calendar_lock_blocked", extra={"freelancer_id": freelancer_id})
            raise SlotUnavailableException(CALENDAR_BUSY_MESSAGE)
        time.sleep(_POLL_INTERVAL_S)


def _release_distributed(freelancer_id: str, token: str) -> None:
    client = _get_sync_redis()
    if client is None:
        return
    try:
        released = client.eval(_RELEASE_SCRIPT, 1, _lock_key(freelancer_id), token)
        prometheus_metrics.record_calendar_lock("release", "success" if released else "not_found")
    except Exception as exc:
        prometheus_metrics.record_calendar_lock("release", "error")
        logger.warning(
            "calendar_lock_release_failed",
            extra={
                "freelancer_id": freelancer_id,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )


@contextmanager
def calendar_lock(
    freelancer_id: str,
    timeout_s: Optional[float] = None,
    ttl_s: Optional[int] = None,
) -> Iterator[None]:
    """Hold the freelancer's calendar exclusively for the duration of the block."""
    timeout = settings.calendar_lock_timeout_seconds if timeout_s is None else timeout_s
    ttl = settings.calendar_lock_ttl_seconds if ttl_s is None else ttl_s
    deadline = time.monotonic() + timeout

    local = _local_lock(freelancer_id)
    if not local.acquire(timeout=timeout):
        prometheus_metrics.record_calendar_lock("acquire", "timeout")
        logger.warning("calendar_lock_local_timeout", extra={"freelancer_id": freelancer_id})
        raise SlotUnavailableException(CALENDAR_BUSY_MESSAGE)
    try:
        token = _acquire_distributed(freelancer_id, deadline, ttl)
        try:
            yield
        finally:
            if token is not None:
                _release_distributed(freelancer_id, token)
    finally:
        local.release()


def reset_calendar_locks() -> None:
    """Drop cached lock state (used when settings change, e.g. in tests)."""
    global _SYNC_REDIS
    with _LOCAL_LOCKS_GUARD:
        _LOCAL_LOCKS.clear()
    with _SYNC_REDIS_LOCK:
        _SYNC_REDIS = None
