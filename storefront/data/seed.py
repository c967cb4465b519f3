# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models.product import ProductModel
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"name": "UNIFACTOR Mens Running Shoes", "category": "Fashion", "cost": Decimal("50"), "rating": 5},
    {"name": "YONEX Smash Badminton Racquet", "category": "Sports", "cost": Decimal("100"), "rating": 5},
    {"name": "Tan Leatherette Weekender Duffle", "category": "Fashion", "cost": Decimal("150"), "rating": 4},
    {"name": "The Minimalist Slim Leather Watch", "category": "Electronics", "cost": Decimal("60"), "rating": 5},
]


def seed(db=None):
    own_session = db is None
    db = db or SessionLocal()
    try:
        repo = ProductRepo(db)
        # not forcing: only seed if empty
        if repo.list_products():
            return
        repo.add_products([ProductModel(**p) for p in PRODUCTS])
        logger.info(f"Seeded {len(PRODUCTS)} products")
    finally:
        if own_session:
            db.close()
