from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_lock_service, get_store_config
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ForbiddenError
from storefront.domain.schemas import AddressIn, AddressOut, UserRead
from storefront.services.lock_service import LockService
from storefront.services.user_service import UserService
from storefront.utils.settings import StoreConfig

router = APIRouter(prefix="/v1/users", tags=["users"])


def _check_owner(user_id: int, current: UserModel) -> None:
    if current.id != user_id:
        raise ForbiddenError()


@router.get("/{user_id}", response_model=UserRead | AddressOut)
def get_user(
    user_id: int,
    q: str | None = Query(None),
    current: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: StoreConfig = Depends(get_store_config),
):
    _check_owner(user_id, current)
    service = UserService(db, config)

    if q == "address":
        user = service.get_user_address_by_id(user_id)
        return AddressOut(address=user.address)

    return UserRead.model_validate(current)


@router.put("/{user_id}", response_model=AddressOut)
def set_address(
    user_id: int,
    payload: AddressIn,
    current: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: StoreConfig = Depends(get_store_config),
    lock_service: LockService = Depends(get_lock_service),
):
    _check_owner(user_id, current)
    address = UserService(db, config).set_address(current, payload.address, lock_service)
    return AddressOut(address=address)
