from datetime import datetime, timezone

import bcrypt
from sqlalchemy import Column, Integer, String, DateTime, Numeric

from storefront.data.database import Base
from storefront.utils.settings import DEFAULT_ADDRESS, DEFAULT_WALLET_MONEY


def _utcnow():
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)  # bcrypt hash

    wallet_money = Column(Numeric(12, 2), nullable=False, default=DEFAULT_WALLET_MONEY)
    address = Column(String, nullable=False, default=DEFAULT_ADDRESS)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def is_password_match(self, password: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), self.password.encode("utf-8"))

    def has_set_non_default_address(self, default_address: str = DEFAULT_ADDRESS) -> bool:
        return self.address != default_address
