import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import ConflictError, InternalError
from storefront.utils.retry import LockBusy, lock_retry, redis_retry
from storefront.utils.settings import REDIS_URL, USER_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete, runs atomically inside redis
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-user mutual exclusion around read-modify-write sequences
    (cart mutations, checkout, address update).

    - SET user:{id}:lock <token> NX EX ttl
    - release only when the stored token is ours (lua)
    """

    def __init__(self, url: str | None = None, ttl: int = USER_LOCK_TTL_SECONDS, client=None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(user_id: int) -> str:
        return f"user:{user_id}:lock"

    @redis_retry()
    def _try_acquire(self, key: str, token: str) -> bool:
        return bool(self.redis.set(name=key, value=token, nx=True, ex=self.ttl))

    @lock_retry()
    def acquire_user_lock(self, user_id: int, token: str) -> None:
        key = self._key(user_id)
        if not self._try_acquire(key, token):
            raise LockBusy(key)
        logger.debug(f"Acquired lock {key}")

    @redis_retry()
    def release_user_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        logger.debug(f"Released lock {key}")
        return bool(res)

    @contextmanager
    def user_lock(self, user_id: int):
        token = uuid.uuid4().hex
        try:
            self.acquire_user_lock(user_id, token)
        except LockBusy:
            logger.warning(f"Lock for user {user_id} still busy, giving up")
            raise ConflictError()
        except RedisError as e:
            logger.error(f"Redis unavailable while locking user {user_id}: {e}")
            raise InternalError()

        try:
            yield
        finally:
            try:
                self.release_user_lock(user_id, token)
            except RedisError as e:
                # key expires on its own after ttl
                logger.error(f"Failed to release lock for user {user_id}: {e}")
