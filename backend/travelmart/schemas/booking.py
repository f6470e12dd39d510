import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field


# ── Car rental ────────────────────────────────────────────────────────────────


class CreateCarBookingRequest(BaseModel):
    vehicle_id: uuid.UUID
    start_date: date
    end_date: date
    pickup_time: str | None = None
    with_driver: bool = False
    notes: str | None = None


class UpdateCarBookingRequest(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
    pickup_time: str | None = None
    with_driver: bool | None = None
    status: str | None = None
    notes: str | None = None


class CarBookingResponse(BaseModel):
    id: uuid.UUID
    booking_code: str
    user_id: uuid.UUID | None = None
    vehicle_id: uuid.UUID
    start_date: date
    end_date: date
    pickup_time: str | None = None
    with_driver: bool
    total_amount: float
    paid_amount: float
    payment_status: str
    payment_id: uuid.UUID | None = None
    status: str
    notes: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Baggage ───────────────────────────────────────────────────────────────────


class BaggagePrices(BaseModel):
    small_price: float = Field(ge=0)
    medium_price: float = Field(ge=0)
    large_price: float = Field(ge=0)
    extra_large_price: float = Field(ge=0)
    electronic_price: float = Field(ge=0)
    surfing_price: float = Field(ge=0)
    wheelchair_price: float = Field(ge=0)
    stickgolf_price: float = Field(ge=0)

    model_config = {"from_attributes": True}


class BaggageQuoteRequest(BaseModel):
    baggage_size: str
    duration_type: Literal["hours", "days"] = "hours"
    hours: int | None = Field(default=None, ge=1)
    start_date: date | None = None
    end_date: date | None = None


class BaggageQuoteResponse(BaseModel):
    baggage_size: str
    duration_type: str
    units: int
    unit_price: float
    total_price: float


# ── Airport transfer & handling ───────────────────────────────────────────────


class AirportTransferResponse(BaseModel):
    id: int
    booking_code: str
    customer_name: str
    customer_email: str | None = None
    phone: str
    pickup_location: str
    dropoff_location: str
    pickup_date: date
    pickup_time: str
    price: float
    status: str
    vehicle_name: str | None = None
    driver_name: str | None = None
    license_plate: str | None = None
    distance: str | None = None
    duration: str | None = None
    transfer_type: str
    passenger: int
    payment_id: uuid.UUID | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CreateHandlingBookingRequest(BaseModel):
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    customer_email: EmailStr
    passenger_area: str
    pickup_area: str
    flight_number: str
    travel_type: str
    pickup_date: date
    pickup_time: str
    category: str
    passengers: int = Field(default=1, ge=1)
    price: float = Field(gt=0)


class HandlingBookingResponse(BaseModel):
    id: uuid.UUID
    booking_code: str
    customer_name: str
    customer_phone: str
    customer_email: str
    passenger_area: str
    pickup_area: str
    flight_number: str
    travel_type: str
    pickup_date: date
    pickup_time: str
    category: str
    passengers: int
    price: float
    status: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class StatusUpdateRequest(BaseModel):
    status: str
