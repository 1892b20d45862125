# storefront/schemas.py
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field

from .validation import MAX_INT


# User
class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


class UserOut(UserBase):
    id: uuid.UUID

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# Product
class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0)
    description: str = Field(min_length=1)
    stock: int = Field(ge=0, le=MAX_INT)


class ProductUpdate(BaseModel):
    # partial update: only fields that were sent are applied
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = Field(default=None, ge=0, le=MAX_INT)


class ProductOut(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    price: float
    stock: int
    is_active: bool

    class Config:
        from_attributes = True


# Cart
class CartAddRequest(BaseModel):
    product_id: uuid.UUID = Field(validation_alias=AliasChoices("productId", "product_id"))
    quantity: int = Field(ge=1, le=MAX_INT)


class CartQuantityUpdate(BaseModel):
    quantity: int = Field(ge=1, le=MAX_INT)


class CartItemOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    product: Optional[ProductOut] = None

    class Config:
        from_attributes = True


class Message(BaseModel):
    message: str
