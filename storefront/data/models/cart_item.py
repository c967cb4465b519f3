from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)

    # product snapshot, copied when the item is added
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    cost = Column(Numeric(10, 2), nullable=False)
    rating = Column(Integer, nullable=False, default=0)
    image = Column(String, nullable=False, default="")

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="u_cart_product"),)

    @classmethod
    def from_product(cls, product, quantity: int) -> "CartItemModel":
        return cls(
            product_id=product.id,
            quantity=quantity,
            name=product.name,
            category=product.category,
            cost=product.cost,
            rating=product.rating,
            image=product.image,
        )
