"""Service bookings created at checkout or from the back office."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from travelmart.database import Base, utcnow

TRANSFER_STATUSES = ("pending", "confirmed", "onprocess", "completed", "cancelled")
HANDLING_STATUSES = ("pending", "confirmed", "completed", "cancelled")


class BaggagePrice(Base):
    __tablename__ = "baggage_price"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    small_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    medium_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    large_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    extra_large_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    electronic_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    surfing_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    wheelchair_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    stickgolf_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class BaggageBooking(Base):
    __tablename__ = "baggage_booking"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_code: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    item_name: Mapped[str | None] = mapped_column(String(255))
    flight_number: Mapped[str] = mapped_column(String(20), default="-")
    baggage_size: Mapped[str] = mapped_column(String(30), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=1)
    duration_type: Mapped[str] = mapped_column(String(10), default="hours")
    hours: Mapped[int | None] = mapped_column(Integer)
    storage_location: Mapped[str] = mapped_column(String(255), default="Terminal 1, Level 1")
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    start_time: Mapped[str | None] = mapped_column(String(5))
    end_time: Mapped[str | None] = mapped_column(String(5))
    airport: Mapped[str | None] = mapped_column(String(100))
    terminal: Mapped[str | None] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(20), default="confirmed")
    customer_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"))
    payment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("payments.id"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )


class AirportTransfer(Base):
    __tablename__ = "airport_transfer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_code: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    pickup_location: Mapped[str] = mapped_column(String(500), nullable=False)
    dropoff_location: Mapped[str] = mapped_column(String(500), nullable=False)
    pickup_date: Mapped[date] = mapped_column(Date, nullable=False)
    pickup_time: Mapped[str] = mapped_column(String(5), default="09:00")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    vehicle_name: Mapped[str | None] = mapped_column(String(100))
    driver_name: Mapped[str | None] = mapped_column(String(255))
    driver_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"))
    license_plate: Mapped[str | None] = mapped_column(String(20))
    distance: Mapped[str | None] = mapped_column(String(30))
    duration: Mapped[str | None] = mapped_column(String(30))
    transfer_type: Mapped[str] = mapped_column(String(30), default="airport_transfer")
    passenger: Mapped[int] = mapped_column(Integer, default=1)
    customer_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"))
    payment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("payments.id"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )


class HandlingBooking(Base):
    __tablename__ = "handling_bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_code: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    passenger_area: Mapped[str] = mapped_column(String(100), nullable=False)
    pickup_area: Mapped[str] = mapped_column(String(100), nullable=False)
    flight_number: Mapped[str] = mapped_column(String(20), nullable=False)
    travel_type: Mapped[str] = mapped_column(String(30), nullable=False)
    pickup_date: Mapped[date] = mapped_column(Date, nullable=False)
    pickup_time: Mapped[str] = mapped_column(String(5), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    passengers: Mapped[int] = mapped_column(Integer, default=1)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
