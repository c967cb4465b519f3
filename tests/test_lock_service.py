from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.domain.errors import ConflictError, InternalError
from storefront.services.lock_service import LockService


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.set.return_value = True
    client.eval.return_value = 1
    return client


def test_lock_is_set_and_released_with_same_token(redis_client):
    service = LockService(client=redis_client, ttl=7)

    with service.user_lock(3):
        _, kwargs = redis_client.set.call_args
        assert kwargs["name"] == "user:3:lock"
        assert kwargs["nx"] is True
        assert kwargs["ex"] == 7
        redis_client.eval.assert_not_called()

    args, _ = redis_client.eval.call_args
    assert args[1:3] == (1, "user:3:lock")
    assert args[3] == kwargs["value"]


def test_lock_is_released_when_body_raises(redis_client):
    service = LockService(client=redis_client)

    with pytest.raises(RuntimeError):
        with service.user_lock(3):
            raise RuntimeError("boom")

    redis_client.eval.assert_called_once()


def test_busy_lock_retries_then_conflicts(redis_client):
    redis_client.set.return_value = None
    service = LockService(client=redis_client)

    with pytest.raises(ConflictError):
        with service.user_lock(3):
            pass

    assert redis_client.set.call_count == 5
    redis_client.eval.assert_not_called()


def test_busy_lock_acquired_on_retry(redis_client):
    redis_client.set.side_effect = [None, True]
    service = LockService(client=redis_client)

    with service.user_lock(3):
        pass

    assert redis_client.set.call_count == 2


def test_redis_down_is_internal(redis_client):
    redis_client.set.side_effect = RedisConnectionError("down")
    service = LockService(client=redis_client)

    with pytest.raises(InternalError):
        with service.user_lock(3):
            pass

    assert redis_client.set.call_count == 3
