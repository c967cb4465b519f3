# storefront/utils/retry.py
import redis
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type


class LockBusy(Exception):
    """Raised while another request holds the lock."""


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def lock_retry(attempts: int = 5):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(LockBusy),
    )
