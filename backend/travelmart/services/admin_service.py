"""Back-office operations: airport transfers, handling bookings and dashboard stats."""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.booking import (
    HANDLING_STATUSES,
    TRANSFER_STATUSES,
    AirportTransfer,
    BaggageBooking,
    HandlingBooking,
)
from travelmart.models.payment import Payment
from travelmart.models.vehicle import CarBooking, Vehicle
from travelmart.services.booking_service import generate_booking_code
from travelmart.services.notification_service import notification_service

logger = logging.getLogger(__name__)


def _search_clause(term: str, *columns):
    pattern = f"%{term.lower()}%"
    return or_(*(func.lower(col).like(pattern) for col in columns))


class AdminService:
    """Queries and status changes performed by staff."""

    # ── Airport transfers ──

    async def list_transfers(self, db: AsyncSession, search: str | None = None) -> list[AirportTransfer]:
        query = select(AirportTransfer).order_by(AirportTransfer.created_at.desc(), AirportTransfer.id.desc())
        if search:
            query = query.where(_search_clause(
                search,
                AirportTransfer.customer_name,
                AirportTransfer.pickup_location,
                AirportTransfer.dropoff_location,
                AirportTransfer.customer_email,
                AirportTransfer.phone,
            ))
        result = await db.execute(query)
        return list(result.scalars().all())

    async def update_transfer_status(self, db: AsyncSession, transfer_id: int, status: str) -> AirportTransfer:
        if status not in TRANSFER_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {', '.join(TRANSFER_STATUSES)}")

        transfer = await db.get(AirportTransfer, transfer_id)
        if transfer is None:
            raise LookupError("Airport transfer not found")

        old_status = transfer.status
        transfer.status = status
        if transfer.customer_id and old_status != status:
            await notification_service.send_transfer_status(
                db, transfer.customer_id, transfer.booking_code, status, transfer.id
            )
        await db.commit()
        await db.refresh(transfer)
        logger.info(f"Transfer {transfer.booking_code}: {old_status} -> {status}")
        return transfer

    # ── Handling bookings ──

    async def create_handling(self, db: AsyncSession, data: dict) -> HandlingBooking:
        booking = HandlingBooking(
            booking_code=generate_booking_code("HS"),
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            customer_email=data["customer_email"],
            passenger_area=data["passenger_area"],
            pickup_area=data["pickup_area"],
            flight_number=data["flight_number"],
            travel_type=data["travel_type"],
            pickup_date=data["pickup_date"],
            pickup_time=data["pickup_time"],
            category=data["category"],
            passengers=data.get("passengers") or 1,
            price=Decimal(str(data["price"])),
            status="pending",
        )
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
        logger.info(f"Handling booking {booking.booking_code} created")
        return booking

    async def list_handling(self, db: AsyncSession, search: str | None = None) -> list[HandlingBooking]:
        query = select(HandlingBooking).order_by(HandlingBooking.created_at.desc())
        if search:
            query = query.where(_search_clause(
                search,
                HandlingBooking.customer_name,
                HandlingBooking.customer_email,
                HandlingBooking.customer_phone,
                HandlingBooking.booking_code,
                HandlingBooking.passenger_area,
                HandlingBooking.pickup_area,
                HandlingBooking.flight_number,
                HandlingBooking.travel_type,
                HandlingBooking.category,
                HandlingBooking.status,
            ))
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_handling(self, db: AsyncSession, booking_id: uuid.UUID) -> HandlingBooking | None:
        return await db.get(HandlingBooking, booking_id)

    async def update_handling_status(self, db: AsyncSession, booking_id: uuid.UUID, status: str) -> HandlingBooking:
        if status not in HANDLING_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {', '.join(HANDLING_STATUSES)}")

        booking = await db.get(HandlingBooking, booking_id)
        if booking is None:
            raise LookupError("Handling booking not found")

        booking.status = status
        booking.updated_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(booking)
        return booking

    async def delete_handling(self, db: AsyncSession, booking_id: uuid.UUID) -> bool:
        booking = await db.get(HandlingBooking, booking_id)
        if booking is None:
            return False
        await db.delete(booking)
        await db.commit()
        logger.info(f"Handling booking {booking.booking_code} deleted")
        return True

    # ── Dashboard ──

    async def dashboard(self, db: AsyncSession) -> dict:
        async def count(query) -> int:
            return (await db.execute(query)).scalar_one() or 0

        total_vehicles = await count(select(func.count(Vehicle.id)))
        available_vehicles = await count(select(func.count(Vehicle.id)).where(Vehicle.is_available == True))
        car_bookings = await count(select(func.count(CarBooking.id)))
        active_rentals = await count(
            select(func.count(CarBooking.id)).where(CarBooking.status.in_(("confirmed", "onride")))
        )
        baggage_bookings = await count(select(func.count(BaggageBooking.id)))
        transfers = await count(select(func.count(AirportTransfer.id)))
        pending_transfers = await count(
            select(func.count(AirportTransfer.id)).where(AirportTransfer.status == "pending")
        )
        handling = await count(select(func.count(HandlingBooking.id)))

        paid = (await db.execute(
            select(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.status == "completed")
        )).one()
        unpaid = (await db.execute(
            select(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.status == "pending")
        )).one()

        return {
            "vehicles": {"total": total_vehicles, "available": available_vehicles},
            "bookings": {
                "car": car_bookings,
                "active_rentals": active_rentals,
                "baggage": baggage_bookings,
                "airport_transfer": transfers,
                "pending_transfers": pending_transfers,
                "handling": handling,
            },
            "payments": {
                "paid": {"count": paid[0], "amount": float(paid[1])},
                "unpaid": {"count": unpaid[0], "amount": float(unpaid[1])},
            },
            "revenue": float(paid[1]),
        }


admin_service = AdminService()
