import logging
import threading
import time
import weakref
from contextlib import contextmanager
from django.conf import settings
from redis.exceptions import LockError, RedisError
from infrastructure.database.redis.redis import redis_client
from kyc.core.exceptions.kyc_exceptions import TradingLimitLockException

logger = logging.getLogger(__name__)

# Entries disappear once no caller holds the lock.
local_locks = weakref.WeakValueDictionary()
_registry_lock = threading.Lock()


def _local_lock(lock_key: str) -> threading.Lock:
    with _registry_lock:
        lock = local_locks.get(lock_key)
        if lock is None:
            lock = threading.Lock()
            local_locks[lock_key] = lock
        return lock


def _acquire_redis_lock(client, lock_key: str, user_id: str, config: dict):
    redis_lock = client.lock(lock_key, timeout=config["LOCK_TIMEOUT"])
    attempts = 0
    try:
        while not redis_lock.acquire(blocking=False):
            attempts += 1
            if attempts >= config["LOCK_RETRY_ATTEMPTS"]:
                raise TradingLimitLockException(
                    f"Could not acquire Redis lock: {lock_key} after {attempts} attempts"
                )
            logger.warning(f"Trading limits lock busy for user {user_id}, retry {attempts}")
            time.sleep(config["LOCK_RETRY_DELAY"])
    except RedisError as e:
        logger.error(f"Redis lock {lock_key} unavailable: {str(e)}")
        raise TradingLimitLockException(f"Could not acquire Redis lock: {lock_key}")
    return redis_lock


@contextmanager
def trading_limits_lock(user_id: str, client=None):
    """Serialize volume updates for one user across threads and, when Redis is configured, across processes."""
    config = settings.KYC_TRADING
    client = client if client is not None else redis_client
    lock_key = f"lock:trading_limits:{user_id}"
    local_lock = _local_lock(lock_key)

    if not local_lock.acquire(blocking=True, timeout=config["APP_LOCK_TIMEOUT"]):
        raise TradingLimitLockException("Could not acquire application lock")

    try:
        redis_lock = _acquire_redis_lock(client, lock_key, user_id, config) if client is not None else None
        try:
            yield
        finally:
            if redis_lock is not None:
                try:
                    redis_lock.release()
                except LockError as e:
                    logger.warning(f"Redis lock {lock_key} expired before release: {str(e)}")
    finally:
        local_lock.release()
