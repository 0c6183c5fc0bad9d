# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, PrivateAttr, model_validator
from typing import Any, Dict, List, Literal, Optional
from decimal import Decimal
from datetime import datetime


ShippingMethod = Literal["free", "express"]
PaymentMethod = Literal["card", "wallet", "cod"]


class ActionResult(BaseModel):
    """Jednolita odpowiedz dla mutacji koszyka/zamowienia."""

    success: bool
    message: str


class UserRead(BaseModel):
    id: str
    email: str
    name: str
    profile: str = ""

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# KATALOG
# =====================================================
class ProductImageOut(BaseModel):
    id: int
    image_url: str
    product_id: int

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    brand: str
    type: str
    amount: Decimal
    banner_url: Optional[str] = None
    rating: Optional[float] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ProductDetailOut(ProductOut):
    product_images: List[ProductImageOut] = Field(default_factory=list)


# =====================================================
# KOSZYK
# =====================================================
class CartProductOut(BaseModel):
    id: int
    name: str
    banner_url: Optional[str] = None
    amount: Decimal
    description: str
    rating: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class CartLineOut(BaseModel):
    id: int
    user_id: str
    product_id: int
    quantity: int
    amount: Decimal
    product: Optional[CartProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class AddToCartIn(BaseModel):
    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")


class AdjustQuantityIn(BaseModel):
    delta: int = Field(..., description="Zmiana ilosci, np. 1 albo -1")


# =====================================================
# CHECKOUT
# =====================================================
class Address(BaseModel):
    """Adres w ksztalcie oczekiwanym przez funkcje platnosci i maila (camelCase)."""

    address_line1: str = Field(..., alias="addressLine1")
    address_line2: str = Field("", alias="addressLine2")
    country: str = "US"
    state: str = ""
    zip_code: str = Field(..., alias="zipCode")

    model_config = ConfigDict(populate_by_name=True)


class DeliveryDetails(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    address1: str = Field(..., min_length=1)
    address2: str = Field(..., min_length=1)
    zip: str = Field(..., pattern=r"^[0-9]{4,10}$")
    state: str = ""

    model_config = ConfigDict(str_strip_whitespace=True)

    def to_address(self) -> Address:
        return Address(
            address_line1=self.address1,
            address_line2=self.address2,
            state=self.state,
            zip_code=self.zip,
        )


class CheckoutIn(BaseModel):
    payment_method: PaymentMethod
    token: Optional[str] = Field(None, description="Token karty albo id metody platnosci portfela")
    shipping_method: ShippingMethod = "free"
    delivery: DeliveryDetails

    @model_validator(mode="after")
    def token_required_for_online_payment(self):
        if self.payment_method != "cod" and not (self.token and self.token.strip()):
            raise ValueError("Payment token is required")
        return self


class OrderRequest(BaseModel):
    """Dane zamowienia przekazywane do orkiestratora po udanej platnosci."""

    email: str
    name: str
    address: Address
    shipping_method: ShippingMethod
    payment_status: str


class PaymentConfirmation(BaseModel):
    """Odpowiedz funkcji platnosci; dodatkowe pola zostaja do audytu."""

    message: str
    transaction_id: Optional[str] = Field(None, alias="transactionId")
    charge_id: Optional[str] = Field(None, alias="chargeId")

    # procesor potrafi zwrocic id jako liczbe
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    _payload: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    def with_payload(self, payload: Dict[str, Any]) -> "PaymentConfirmation":
        self._payload = payload
        return self

    def raw(self) -> Dict[str, Any]:
        if self._payload is not None:
            return dict(self._payload)
        return self.model_dump(by_alias=True, mode="json")


class SignInIn(BaseModel):
    credential: str = Field(..., min_length=1)


class OrderQuote(BaseModel):
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal


# =====================================================
# ZAMOWIENIA / POWIADOMIENIA
# =====================================================
class OrderItemOut(BaseModel):
    product_id: int
    quantity: int
    price_each: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: str
    status: str
    total_amount: Decimal
    shipping_address: Dict[str, Any]
    payment_status: str
    order_date: datetime
    tracking_number: str
    shipping_method: str
    created_at: datetime
    items: List[OrderItemOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class NotificationOut(BaseModel):
    id: int
    user_id: str
    order_id: Optional[int] = None
    message: str
    read: bool
    type: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
