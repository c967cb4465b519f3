# storefront/domain/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

from storefront.utils.settings import ALLOWED_EMAIL_TLDS

_HAS_LETTER = re.compile(r"[a-zA-Z]")
_HAS_DIGIT = re.compile(r"\d")


def check_email(value: str) -> str:
    value = value.lower()
    domain = value.rsplit("@", 1)[-1]
    if "." not in domain or domain.rsplit(".", 1)[-1] not in ALLOWED_EMAIL_TLDS:
        raise ValueError(f"email must end with one of: {', '.join(ALLOWED_EMAIL_TLDS)}")
    return value


def check_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("password must be at least 8 characters")
    if not _HAS_LETTER.search(value) or not _HAS_DIGIT.search(value):
        raise ValueError("password must contain at least 1 letter and 1 number")
    return value


Email = Annotated[EmailStr, AfterValidator(check_email)]
Password = Annotated[str, AfterValidator(check_password)]


class LoginIn(BaseModel):
    """Schema for logging in."""

    email: Email
    password: Password


class RegisterIn(LoginIn):
    """Schema for registration."""

    name: str = Field(..., min_length=1)


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    wallet_money: Decimal = Field(serialization_alias="walletMoney")
    address: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AccessToken(BaseModel):
    token: str
    expires: datetime


class AuthTokens(BaseModel):
    access: AccessToken


class AuthOut(BaseModel):
    user: UserRead
    tokens: AuthTokens


class AddressIn(BaseModel):
    address: str = Field(..., min_length=20)


class AddressOut(BaseModel):
    address: str


class ProductOut(BaseModel):
    id: int
    name: str
    category: str
    cost: Decimal
    rating: int
    image: str

    model_config = ConfigDict(from_attributes=True)


class CartItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0, alias="productId")
    quantity: int = Field(..., gt=0)

    model_config = ConfigDict(populate_by_name=True)


class CartItemUpdateIn(CartItemIn):
    """Schema for changing a quantity; 0 removes the product."""

    quantity: int = Field(..., ge=0)


class CartItemOut(BaseModel):
    product_id: int = Field(serialization_alias="productId")
    name: str
    category: str
    cost: Decimal
    rating: int
    image: str
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    id: int
    user_id: int = Field(serialization_alias="userId")
    payment_option: str = Field(serialization_alias="paymentOption")
    items: List[CartItemOut] = Field(serialization_alias="cartItems")
    total: Decimal

    model_config = ConfigDict(from_attributes=True)
