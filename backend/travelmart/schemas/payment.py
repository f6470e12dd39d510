import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class ProcessPaymentRequest(BaseModel):
    booking_id: uuid.UUID
    amount: float = Field(gt=0)
    payment_method: str = Field(min_length=1)  # cash | bank | card
    transaction_id: str | None = None
    bank_name: str | None = None
    is_partial_payment: bool = False
    is_damage_payment: bool = False
    damage_ids: list[uuid.UUID] = []


class PaymentResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None = None
    booking_id: uuid.UUID | None = None
    amount: float
    payment_method: str
    bank_name: str | None = None
    transaction_id: str | None = None
    status: str
    is_partial_payment: bool
    is_damage_payment: bool
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PaymentMethodResponse(BaseModel):
    id: int
    name: str
    type: str
    bank_name: str | None = None
    account_holder: str | None = None
    account_number: str | None = None
    swift_code: str | None = None
    branch: str | None = None

    model_config = {"from_attributes": True}


class DamageResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    description: str | None = None
    amount: float
    payment_status: str

    model_config = {"from_attributes": True}
