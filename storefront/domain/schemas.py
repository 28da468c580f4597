# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, computed_field
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus


# =====================================================
# AUTH
# =====================================================
class RegisterIn(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    token: str
    user: UserOut


# =====================================================
# PRODUCTS
# =====================================================
class ProductCreate(BaseModel):
    """Schema dla tworzenia produktu (admin)."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    stock_quantity: int = Field(..., ge=0)
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(None, max_length=500)


class ProductUpdate(BaseModel):
    """Czesciowa aktualizacja - zmieniane sa tylko przeslane pola."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, gt=0, max_digits=18, decimal_places=2)
    stock_quantity: int | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    stock_quantity: int
    category: str | None = None
    image_url: str | None = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ProductFilters(BaseModel):
    search: str | None = None
    category: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1)


# =====================================================
# CART
# =====================================================
class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    id: int
    product: ProductOut
    quantity: int

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity


class CartOut(BaseModel):
    id: int
    items: List[CartItemOut]

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def total_amount(self) -> Decimal:
        return sum((i.subtotal for i in self.items), Decimal("0.00"))


# =====================================================
# ORDERS
# =====================================================
class CheckoutIn(BaseModel):
    shipping_address: str = Field(..., min_length=1)
    payment_method_id: str = Field(..., min_length=1, description="Token metody platnosci z bramki")


class OrderItemOut(BaseModel):
    id: int
    product: ProductOut
    quantity: int
    price_at_purchase: Decimal

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.price_at_purchase * self.quantity


class OrderOut(BaseModel):
    id: int
    user_id: int
    total_amount: Decimal
    status: OrderStatus
    payment_reference: str | None = None
    shipping_address: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
