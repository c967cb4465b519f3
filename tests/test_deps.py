from storefront.api.deps import get_lock_service
from storefront.services.lock_service import LockService


def test_lock_service_is_shared_across_requests():
    first = get_lock_service()

    assert isinstance(first, LockService)
    assert get_lock_service() is first
