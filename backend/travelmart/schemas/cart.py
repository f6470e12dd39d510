import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

CartItemType = Literal["baggage", "airport_transfer", "car"]


class AddCartItemRequest(BaseModel):
    item_type: CartItemType
    item_id: str | None = None
    service_name: str = Field(min_length=1)
    price: float = Field(gt=0)
    details: dict = {}


class CartItemResponse(BaseModel):
    id: uuid.UUID
    item_type: str
    item_id: uuid.UUID | None = None
    service_name: str
    price: float
    details: dict | None = None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    total_amount: float
    count: int


class MergeCartRequest(BaseModel):
    # Raw entries from the browser's local storage; validated one by one
    items: list[dict] = []


class CustomerData(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)


class CheckoutRequest(BaseModel):
    customer: CustomerData
    payment_method: Literal["credit_card", "bank_transfer", "cash", "paylabs"]
    bank_id: int | None = None
    idempotency_key: str | None = Field(default=None, max_length=100)
    # Guests have no server cart and send their items inline
    items: list[AddCartItemRequest] | None = None


class CheckoutBooking(BaseModel):
    booking_type: str
    booking_id: str
    booking_code: str | None = None
    service_name: str | None = None
    price: float | None = None


class CheckoutResponse(BaseModel):
    payment_id: uuid.UUID
    amount: float
    status: str
    payment_method: str
    bookings: list[CheckoutBooking]
    skipped: list[str] = []
    replayed: bool = False
