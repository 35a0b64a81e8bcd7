# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class OrderStatus(str, Enum):
    CREATED = "created"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class ProductOut(BaseModel):
    """Produkt z katalogu (tylko odczyt po stronie klienta)."""

    id: str
    name: str
    price: Decimal = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    category: str
    featured: bool = False
    image_url: str | None = None
    description: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    user_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")


class QuantityIn(BaseModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    """Wiersz koszyka razem z osadzonym produktem."""

    id: str
    user_id: str
    product_id: str
    quantity: int = Field(..., ge=1)
    product: ProductOut | None = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def unit_price(self) -> Decimal:
        # brak zaladowanego produktu liczy sie jako 0
        if self.product is None or self.product.price is None:
            return Decimal("0")
        return self.product.price

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


_SHIPPING_MESSAGES = {
    "fullName": "Name is required",
    "address": "Address is required",
    "city": "City is required",
    "state": "State is required",
    "zipCode": "ZIP code is required",
    "country": "Country is required",
}


class ShippingValidationError(ValueError):
    """Adres nie przeszedl walidacji; errors to {pole: komunikat}."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))


class ShippingAddress(BaseModel):
    full_name: str = Field(..., alias="fullName", min_length=2)
    address: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    state: str = Field(..., min_length=2)
    zip_code: str = Field(..., alias="zipCode", min_length=4)
    country: str = Field(..., min_length=2)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> "ShippingAddress":
        """
        Jedyny sposob na zbudowanie adresu. Waliduje wszystkie pola naraz
        i zwraca poprawny obiekt albo rzuca ShippingValidationError
        z jednym komunikatem na kazde bledne pole.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors: Dict[str, str] = {}
            for err in e.errors():
                if not err["loc"]:
                    continue
                field = cls._public_name(str(err["loc"][0]))
                errors.setdefault(field, _SHIPPING_MESSAGES.get(field, err["msg"]))
            raise ShippingValidationError(errors) from e

    @classmethod
    def _public_name(cls, name: str) -> str:
        info = cls.model_fields.get(name)
        if info is not None and info.alias:
            return info.alias
        return name

    def as_payload(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class OrderCreate(BaseModel):
    """Schema dla tworzenia naglowka zamowienia."""

    user_id: str = Field(..., min_length=1)
    total: Decimal = Field(..., gt=0)
    shipping_address: Dict[str, Any]
    status: OrderStatus = OrderStatus.CONFIRMED


class OrderItemCreate(BaseModel):
    order_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)


class OrderItemOut(BaseModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: str
    user_id: str
    total: Decimal
    shipping_address: Dict[str, Any]
    status: OrderStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @property
    def reference(self) -> str:
        return self.id[:8].upper()


class OrderDetailOut(OrderOut):
    items: List[OrderItemOut] = []
