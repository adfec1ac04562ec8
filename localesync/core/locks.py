"""
Per-record mutual exclusion for translation writes.

Merges into the same (entity, locale) record are serialized; different
records never wait on each other. Uses a Redis lock when Redis is
reachable so that separate worker processes agree, otherwise a
process-local lock keyed the same way.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import redis

from localesync.core.config import settings
from localesync.core.exceptions import RecordLockTimeout
from localesync.core.redis import RedisConnection, redis_connection

logger = logging.getLogger(__name__)

LOCK_PREFIX = "localesync:lock"

_local_locks: Dict[str, threading.Lock] = {}
_local_locks_guard = threading.Lock()


def lock_key(translatable_type: str, translatable_id: str, locale: str) -> str:
    """Build lock key: localesync:lock:Type:id:locale"""
    return f"{LOCK_PREFIX}:{translatable_type}:{translatable_id}:{locale}"


def _local_lock(key: str) -> threading.Lock:
    with _local_locks_guard:
        lock = _local_locks.get(key)
        if lock is None:
            lock = _local_locks[key] = threading.Lock()
        return lock


@contextmanager
def record_lock(
    translatable_type: str,
    translatable_id: str,
    locale: str,
    connection: Optional[RedisConnection] = None,
    timeout: Optional[float] = None,
    blocking_timeout: Optional[float] = None,
) -> Iterator[None]:
    """
    Hold the lock for one translation record.
    
    Args:
        translatable_type: Entity type name
        translatable_id: Entity id
        locale: Locale code
        connection: Redis connection (defaults to the global one)
        timeout: Lock expiry in seconds
        blocking_timeout: Max seconds to wait for the lock
    
    Raises:
        RecordLockTimeout: lock not acquired within blocking_timeout
    """
    key = lock_key(translatable_type, translatable_id, locale)
    timeout = timeout if timeout is not None else settings.LOCK_TIMEOUT
    blocking_timeout = blocking_timeout if blocking_timeout is not None else settings.LOCK_BLOCKING_TIMEOUT
    client = (connection or redis_connection).client
    
    if client is not None:
        lock = client.lock(key, timeout=timeout, blocking_timeout=blocking_timeout)
        if not lock.acquire():
            raise RecordLockTimeout(f"Could not acquire {key} within {blocking_timeout}s")
        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                # Expired while held; the write itself already finished
                logger.warning(f"Lock {key} expired before release")
        return
    
    lock = _local_lock(key)
    if not lock.acquire(timeout=blocking_timeout):
        raise RecordLockTimeout(f"Could not acquire {key} within {blocking_timeout}s")
    try:
        yield
    finally:
        lock.release()
