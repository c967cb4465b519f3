import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from contextlib import contextmanager
from decimal import Decimal

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api.deps import get_lock_service, get_store_config
from storefront.data.database import Base, get_db
from storefront.data.models.product import ProductModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError
from storefront.main import create_app
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_service import CartService
from storefront.services.token_service import TokenService
from storefront.utils.settings import StoreConfig

TEST_PASSWORD = "password1"


class InProcessLockService:
    """Stands in for the redis-backed lock; refuses re-entry for the same user."""

    def __init__(self):
        self.held = set()
        self.acquired = []

    @contextmanager
    def user_lock(self, user_id: int):
        if user_id in self.held:
            raise ConflictError()
        self.held.add(user_id)
        self.acquired.append(user_id)
        try:
            yield
        finally:
            self.held.discard(user_id)


@pytest.fixture
def config():
    return StoreConfig(
        default_wallet_money=Decimal("500"),
        default_address="ADDRESS_NOT_SET",
        default_payment_option="PAYMENT_OPTION_DEFAULT",
        jwt_secret="test-secret",
        access_expiration_minutes=240,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return InProcessLockService()


@pytest.fixture
def products(db):
    return ProductRepo(db).add_products(
        [
            ProductModel(name="Badminton Racquet", category="Sports", cost=Decimal("100"), rating=5, image=""),
            ProductModel(name="Running Shoes", category="Fashion", cost=Decimal("50"), rating=4, image=""),
            ProductModel(name="Leather Watch", category="Electronics", cost=Decimal("60"), rating=5, image=""),
        ]
    )


@pytest.fixture
def make_user(db, config):
    counter = iter(range(1, 1000))

    def _make_user(wallet_money="500", address=None, email=None):
        n = next(counter)
        user = UserModel(
            name=f"user{n}",
            email=email or f"user{n}@gmail.com",
            password=bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode(),
            wallet_money=Decimal(wallet_money),
            address=address or config.default_address,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def cart_service(db, lock_service, config):
    return CartService(db=db, lock_service=lock_service, config=config)


@pytest.fixture
def token_service(config):
    return TokenService(config)


@pytest.fixture
def client(db, lock_service, config):
    app = create_app(with_lifespan=False)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_store_config] = lambda: config
    return TestClient(app)


@pytest.fixture
def auth_headers(token_service):
    def _auth_headers(user):
        token = token_service.generate_auth_tokens(user)["access"]["token"]
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
