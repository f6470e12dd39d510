"""Payment service: booking/damage payments, receipts and expiry."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.booking import AirportTransfer, BaggageBooking
from travelmart.models.payment import Payment, PaymentBooking
from travelmart.models.vehicle import CarBooking, Damage
from travelmart.services.notification_service import notification_service

logger = logging.getLogger(__name__)


class PaymentService:
    """Records payments against car bookings and damages."""

    async def process_payment(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        booking_id: uuid.UUID,
        amount: float,
        payment_method: str,
        transaction_id: str | None = None,
        bank_name: str | None = None,
        is_partial_payment: bool = False,
        is_damage_payment: bool = False,
        damage_ids: list[uuid.UUID] | None = None,
    ) -> dict:
        """Record a completed payment and roll the booking's payment status forward.

        Damage payments mark the listed damages paid. Regular payments recompute
        the booking's paid amount from all its completed, non-damage payments
        plus any checkout that paid for it: `paid` once it covers the total,
        otherwise `partial`.
        """
        amount_dec = Decimal(str(amount))

        if is_damage_payment and damage_ids:
            damages_result = await db.execute(
                select(Damage).where(Damage.id.in_(damage_ids), Damage.booking_id == booking_id)
            )
            damages = list(damages_result.scalars().all())
            if len(damages) != len(set(damage_ids)):
                raise LookupError("One or more damage records were not found for this booking")

            payment = Payment(
                user_id=user_id,
                booking_id=booking_id,
                amount=amount_dec,
                payment_method=payment_method,
                status="completed",
                transaction_id=transaction_id,
                bank_name=bank_name,
                is_partial_payment=is_partial_payment,
                is_damage_payment=True,
            )
            db.add(payment)
            await db.flush()
            for damage in damages:
                damage.payment_status = "paid"
                damage.payment_id = payment.id
            await db.commit()
            logger.info(f"Damage payment {payment.id} covers {len(damages)} damage(s)")
            return {"payment": payment, "booking": None, "total_paid": amount_dec}

        booking = await db.get(CarBooking, booking_id)
        if booking is None:
            raise LookupError(f"Booking with ID {booking_id} not found")

        payment = Payment(
            user_id=user_id,
            booking_id=booking_id,
            amount=amount_dec,
            payment_method=payment_method,
            status="completed",
            transaction_id=transaction_id,
            bank_name=bank_name,
            is_partial_payment=is_partial_payment,
            is_damage_payment=False,
        )
        db.add(payment)
        await db.flush()

        total_result = await db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(
                Payment.booking_id == booking_id,
                Payment.status == "completed",
                Payment.is_damage_payment == False,
            )
        )
        # Checkout payments reach the rental through payment_bookings, not booking_id
        checkout_result = await db.execute(
            select(func.coalesce(func.sum(PaymentBooking.price), 0))
            .join(Payment, Payment.id == PaymentBooking.payment_id)
            .where(
                PaymentBooking.booking_type == "car",
                PaymentBooking.booking_id == str(booking_id),
                Payment.status != "expired",
            )
        )
        total_paid = Decimal(str(total_result.scalar_one()))
        total_paid += Decimal(str(checkout_result.scalar_one()))

        booking.paid_amount = total_paid
        booking.payment_status = "paid" if total_paid >= Decimal(str(booking.total_amount or 0)) else "partial"
        booking.payment_id = payment.id

        if booking.user_id:
            await notification_service.send_payment_received(
                db, booking.user_id, booking.booking_code, booking.payment_status, payment.id
            )
        await db.commit()
        logger.info(
            f"Payment {payment.id} on booking {booking.booking_code}: "
            f"paid {total_paid} of {booking.total_amount} -> {booking.payment_status}"
        )
        return {"payment": payment, "booking": booking, "total_paid": total_paid}

    async def unpaid_damages(self, db: AsyncSession, booking_id: uuid.UUID) -> list[Damage]:
        result = await db.execute(
            select(Damage)
            .where(Damage.booking_id == booking_id, Damage.payment_status != "paid")
            .order_by(Damage.created_at)
        )
        return list(result.scalars().all())

    async def get_receipt(self, db: AsyncSession, payment_id: uuid.UUID) -> dict | None:
        """Payment plus every booking it paid for, across all service types."""
        payment = await db.get(Payment, payment_id)
        if payment is None:
            return None

        bookings: list[dict] = []

        baggage = await db.execute(select(BaggageBooking).where(BaggageBooking.payment_id == payment_id))
        for b in baggage.scalars().all():
            bookings.append({
                "booking_type": "baggage",
                "booking_id": b.booking_code,
                "item_name": b.item_name or f"Baggage ({b.baggage_size})",
                "price": float(b.price),
                "start_date": b.start_date.isoformat() if b.start_date else None,
                "end_date": b.end_date.isoformat() if b.end_date else None,
                "details": {
                    "baggage_size": b.baggage_size,
                    "airport": b.airport,
                    "terminal": b.terminal,
                    "storage_location": b.storage_location,
                    "flight_number": b.flight_number,
                },
            })

        transfers = await db.execute(select(AirportTransfer).where(AirportTransfer.payment_id == payment_id))
        for t in transfers.scalars().all():
            bookings.append({
                "booking_type": "airport_transfer",
                "booking_id": t.booking_code,
                "item_name": f"{t.pickup_location} → {t.dropoff_location}",
                "price": float(t.price),
                "start_date": t.pickup_date.isoformat(),
                "end_date": None,
                "details": {
                    "pickup_time": t.pickup_time,
                    "vehicle_name": t.vehicle_name,
                    "driver_name": t.driver_name,
                    "license_plate": t.license_plate,
                },
            })

        cars = await db.execute(select(CarBooking).where(CarBooking.payment_id == payment_id))
        for c in cars.scalars().unique().all():
            vehicle = c.vehicle
            name = f"{vehicle.make} {vehicle.model}" if vehicle else "Vehicle"
            if vehicle and vehicle.year:
                name += f" ({vehicle.year})"
            bookings.append({
                "booking_type": "car",
                "booking_id": c.booking_code,
                "item_name": name,
                "price": float(c.total_amount),
                "start_date": c.start_date.isoformat(),
                "end_date": c.end_date.isoformat(),
                "details": {"pickup_time": c.pickup_time, "with_driver": c.with_driver},
            })

        return {"payment": payment, "bookings": bookings}

    async def expire_stale_payments(self, db: AsyncSession, ttl_hours: int) -> int:
        """Mark checkout payments still pending after `ttl_hours` as expired."""
        cutoff = datetime.now(timezone.utc) - timedelta(hours=ttl_hours)
        result = await db.execute(
            update(Payment)
            .where(Payment.status == "pending", Payment.created_at < cutoff)
            .values(status="expired")
        )
        await db.commit()
        return result.rowcount or 0


payment_service = PaymentService()
