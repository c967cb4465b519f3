from sqlalchemy import Column, Integer, String, Numeric

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    cost = Column(Numeric(10, 2), nullable=False)
    rating = Column(Integer, nullable=False, default=0)
    image = Column(String, nullable=False, default="")
