# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class ItemUpdateIn(BaseModel):
    """Schema dla zmiany ilosci; 0 usuwa produkt z koszyka."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0)


class ProductOut(BaseModel):
    id: int
    name: str
    category: str | None = None
    cost: Decimal
    rating: float | None = None
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    product_id: int
    name: str
    cost: Decimal
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    email: str
    version: int
    items: List[CartItemOut]
    total: Decimal


class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=8)


class UserLogin(BaseModel):
    email: str
    password: str


class AddressIn(BaseModel):
    address: str = Field(..., min_length=20, max_length=200)


class UserRead(BaseModel):
    """Schema dla użytkownika (response)."""

    id: int
    name: str
    email: str
    wallet_money: Decimal
    address: str

    model_config = ConfigDict(from_attributes=True)


class AddressOut(BaseModel):
    address: str


class AccessToken(BaseModel):
    token: str
    expires: datetime


class AuthTokens(BaseModel):
    access: AccessToken


class AuthOut(BaseModel):
    user: UserRead
    tokens: AuthTokens
