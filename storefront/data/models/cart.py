#storefront/data/models/cart.py
from decimal import Decimal

from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # one cart per user
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    payment_option = Column(String, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    @property
    def total(self) -> Decimal:
        return sum((i.cost * i.quantity for i in self.items), Decimal("0.00"))

    def find_item(self, product_id: int):
        return next((i for i in self.items if i.product_id == product_id), None)
