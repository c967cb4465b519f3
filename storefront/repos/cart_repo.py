# storefront/repos/cart_repo.py
from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_item(self, cart: CartModel, product_id: int) -> CartItemModel | None:
        return cart.find_item(product_id)

    def add_cart_item(self, cart: CartModel, item: CartItemModel) -> None:
        cart.items.append(item)

    def delete_cart_item(self, cart: CartModel, item: CartItemModel) -> None:
        # delete-orphan cascade removes the row on flush
        cart.items.remove(item)

    def clear_cart_items(self, cart: CartModel) -> None:
        cart.items.clear()

    def update_cart_version(self, cart_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        # UPDATE carts SET ... WHERE id = :id AND version = :old_version
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, cart: CartModel) -> CartModel:
        self.db.refresh(cart)
        return cart
