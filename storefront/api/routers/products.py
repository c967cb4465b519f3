from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductOut
from storefront.repos.product_repo import ProductRepo

router = APIRouter(prefix="/v1/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return ProductRepo(db).list_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = ProductRepo(db).get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product
