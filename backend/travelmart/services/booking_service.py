"""Car rental bookings and the vehicle catalog."""

import logging
import time
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.vehicle import CarBooking, Vehicle

logger = logging.getLogger(__name__)

CAR_BOOKING_STATUSES = ("pending", "confirmed", "onride", "completed", "cancelled")


def generate_booking_code(prefix: str) -> str:
    """Human-readable booking code, e.g. 'BG-1718000000000-3F9A1C'."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6].upper()}"


def rental_days(start_date: date, end_date: date) -> int:
    if end_date < start_date:
        raise ValueError("End date must not be before start date")
    return max(1, (end_date - start_date).days)


def group_by_model(vehicles: list[Vehicle]) -> list[dict]:
    """Group vehicles into catalog entries keyed by 'make model'."""
    models: dict[str, dict] = {}
    for v in vehicles:
        key = f"{v.make or ''} {v.model or ''}".strip()
        entry = models.setdefault(key, {
            "model_name": key,
            "available_count": 0,
            "min_price_per_day": None,
            "image_url": v.image_url,
            "vehicles": [],
        })
        if v.is_available:
            entry["available_count"] += 1
        price = float(v.price_per_day)
        if entry["min_price_per_day"] is None or price < entry["min_price_per_day"]:
            entry["min_price_per_day"] = price
        if not entry["image_url"] and v.image_url:
            entry["image_url"] = v.image_url
        entry["vehicles"].append({
            "id": str(v.id),
            "make": v.make,
            "model": v.model,
            "year": v.year,
            "vehicle_type": v.vehicle_type,
            "license_plate": v.license_plate,
            "seats": v.seats,
            "transmission": v.transmission,
            "fuel_type": v.fuel_type,
            "price_per_day": price,
            "is_available": v.is_available,
        })
    return sorted(models.values(), key=lambda m: m["model_name"])


class BookingService:
    """Create, query, update and delete car rental bookings."""

    async def list_catalog(self, db: AsyncSession, available_only: bool = False) -> list[dict]:
        query = select(Vehicle).order_by(Vehicle.make, Vehicle.model)
        if available_only:
            query = query.where(Vehicle.is_available == True)
        result = await db.execute(query)
        return group_by_model(list(result.scalars().all()))

    async def create_booking(
        self,
        db: AsyncSession,
        user_id: uuid.UUID | None,
        vehicle_id: uuid.UUID,
        start_date: date,
        end_date: date,
        pickup_time: str | None = None,
        with_driver: bool = False,
        notes: str | None = None,
    ) -> CarBooking:
        vehicle = await db.get(Vehicle, vehicle_id)
        if vehicle is None:
            raise LookupError("Vehicle not found")
        if not vehicle.is_available:
            raise ValueError("Vehicle is not available")

        days = rental_days(start_date, end_date)
        booking = CarBooking(
            booking_code=generate_booking_code("CR"),
            user_id=user_id,
            vehicle_id=vehicle.id,
            start_date=start_date,
            end_date=end_date,
            pickup_time=pickup_time,
            with_driver=with_driver,
            total_amount=Decimal(str(vehicle.price_per_day)) * days,
            paid_amount=Decimal("0"),
            payment_status="unpaid",
            status="pending",
            notes=notes,
        )
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
        logger.info(f"Car booking {booking.booking_code} created for {days} day(s)")
        return booking

    async def get_bookings(
        self,
        db: AsyncSession,
        user_id: uuid.UUID | None = None,
        booking_id: uuid.UUID | None = None,
        vehicle_id: uuid.UUID | None = None,
        status: str | None = None,
    ) -> list[CarBooking]:
        """Filter bookings; `user_id=None` means all users (staff view)."""
        query = select(CarBooking).order_by(CarBooking.created_at.desc())
        if user_id is not None:
            query = query.where(CarBooking.user_id == user_id)
        if booking_id is not None:
            query = query.where(CarBooking.id == booking_id)
        if vehicle_id is not None:
            query = query.where(CarBooking.vehicle_id == vehicle_id)
        if status:
            query = query.where(CarBooking.status == status)
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    async def update_booking(self, db: AsyncSession, booking: CarBooking, changes: dict) -> CarBooking:
        if "status" in changes and changes["status"] not in CAR_BOOKING_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {', '.join(CAR_BOOKING_STATUSES)}")

        for field in ("start_date", "end_date", "pickup_time", "with_driver", "status", "notes"):
            if field in changes and changes[field] is not None:
                setattr(booking, field, changes[field])

        if "start_date" in changes or "end_date" in changes:
            days = rental_days(booking.start_date, booking.end_date)
            booking.total_amount = Decimal(str(booking.vehicle.price_per_day)) * days

        await db.commit()
        await db.refresh(booking)
        return booking

    async def delete_booking(self, db: AsyncSession, booking: CarBooking) -> None:
        if booking.payment_status != "unpaid":
            raise ValueError("Cannot delete a booking that has payments")
        await db.delete(booking)
        await db.commit()


booking_service = BookingService()
