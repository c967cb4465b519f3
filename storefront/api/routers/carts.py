#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_lock_service, get_store_config
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CartItemIn, CartItemUpdateIn, CartOut
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.utils.settings import StoreConfig

router = APIRouter(prefix="/v1/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    config: StoreConfig = Depends(get_store_config),
) -> CartService:
    return CartService(db=db, lock_service=lock_service, config=config)


@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    return svc.get_cart_by_user(user)


@router.post("", response_model=CartOut, status_code=201)
def add_product(
    payload: CartItemIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    return svc.add_product_to_cart(user, payload.product_id, payload.quantity)


@router.put("", response_model=CartOut)
def update_product(
    payload: CartItemUpdateIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    if payload.quantity == 0:
        svc.delete_product_from_cart(user, payload.product_id)
        return Response(status_code=204)
    return svc.update_product_in_cart(user, payload.product_id, payload.quantity)


@router.put("/checkout", status_code=204)
def checkout(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    svc.checkout(user)
    return Response(status_code=204)
