"""Checkout service: turns a cart into one payment plus per-item bookings.

The whole conversion runs in a single transaction: the payment, every booking,
the payment/booking links and the cart status updates are committed together or
not at all. Customer messaging happens only after the commit and never fails
the checkout.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.booking import AirportTransfer, BaggageBooking
from travelmart.models.cart import CartItem
from travelmart.models.payment import PAYMENT_METHODS, Payment, PaymentBooking, PaymentMethod
from travelmart.models.user import User
from travelmart.models.vehicle import CarBooking
from travelmart.services.booking_service import generate_booking_code
from travelmart.services.cart_service import cart_service
from travelmart.services.notification_service import notification_service
from travelmart.services.pricing_service import billable_units, pricing_service
from travelmart.services.whatsapp_service import whatsapp_service

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_LOCATION = "Terminal 1, Level 1"


class CheckoutError(ValueError):
    """Raised when a checkout request cannot be fulfilled."""


class IdempotencyConflictError(CheckoutError):
    """The idempotency key already belongs to another customer's payment."""


@dataclass
class Customer:
    name: str
    email: str
    phone: str


@dataclass
class CheckoutResult:
    payment: Payment
    bookings: list[dict] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    replayed: bool = False
    messages: list[tuple[str, str]] = field(default_factory=list)


def parse_details(details) -> dict:
    """Cart details may arrive as a JSON string from older clients."""
    if isinstance(details, dict):
        return details
    if isinstance(details, str) and details:
        try:
            parsed = json.loads(details)
        except ValueError:
            logger.warning("Could not parse cart item details JSON")
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


def parse_date(value, default: date | None = None) -> date | None:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return default
    return default


def _first(details: dict, *keys, default=None):
    for key in keys:
        value = details.get(key)
        if value not in (None, ""):
            return value
    return default


class CheckoutService:
    """Validates a cart and converts it into a payment and bookings."""

    async def find_by_idempotency_key(self, db: AsyncSession, key: str) -> Payment | None:
        result = await db.execute(select(Payment).where(Payment.idempotency_key == key))
        return result.scalar_one_or_none()

    async def resolve_bank(self, db: AsyncSession, payment_method: str, bank_id: int | None) -> PaymentMethod | None:
        if payment_method not in PAYMENT_METHODS:
            raise CheckoutError(f"Unsupported payment method: {payment_method}")
        if payment_method != "bank_transfer":
            return None
        if bank_id is None:
            raise CheckoutError("Please select a bank for transfer")
        bank = await db.get(PaymentMethod, bank_id)
        if bank is None or not bank.is_active or bank.type != "manual":
            raise CheckoutError("Selected bank account is not available")
        return bank

    async def validated_price(
        self, db: AsyncSession, item: CartItem, details: dict, user: User | None = None
    ) -> Decimal | None:
        """Server-side price for a cart item; None means the item cannot be fulfilled."""
        if item.item_type == "baggage":
            size = _first(details, "baggage_size", "size")
            if not size:
                raise CheckoutError(f"Baggage item '{item.service_name}' has no baggage size")
            quote = await pricing_service.quote(
                db,
                baggage_size=size,
                duration_type=_first(details, "duration_type", "durationType", default="hours"),
                hours=_int_or_none(_first(details, "hours")),
                start_date=parse_date(_first(details, "start_date")),
                end_date=parse_date(_first(details, "end_date")),
            )
            return quote["total_price"]

        if item.item_type == "car":
            booking = await self._car_booking(db, item, user)
            if booking is None:
                return None
            return Decimal(str(booking.total_amount))

        return Decimal(str(item.price))

    async def _replay(
        self, db: AsyncSession, payment: Payment, user: User | None, customer: Customer
    ) -> CheckoutResult:
        """Rebuild the result of an already completed checkout for the same caller."""
        if user is not None:
            same_owner = payment.user_id == user.id
        else:
            same_owner = (
                payment.user_id is None
                and (payment.customer_email or "").lower() == customer.email.lower()
            )
        if not same_owner:
            logger.warning(f"Idempotency key {payment.idempotency_key} reused by another customer")
            raise IdempotencyConflictError("Idempotency key has already been used")

        result = await db.execute(
            select(PaymentBooking)
            .where(PaymentBooking.payment_id == payment.id)
            .order_by(PaymentBooking.id)
        )
        bookings = [
            {
                "booking_type": link.booking_type,
                "booking_id": link.booking_id,
                "booking_code": link.booking_code,
                "service_name": link.service_name,
                "price": link.price,
            }
            for link in result.scalars().all()
        ]
        return CheckoutResult(
            payment=payment,
            bookings=bookings,
            skipped=list(payment.skipped_items or []),
            replayed=True,
        )

    async def _car_booking(self, db: AsyncSession, item: CartItem, user: User | None) -> CarBooking | None:
        """The caller's own rental for a car item, if it can still be paid."""
        if item.item_id is None:
            return None
        booking = await db.get(CarBooking, item.item_id)
        if booking is None:
            return None
        if booking.user_id != (user.id if user else None):
            logger.warning(f"Car booking {booking.booking_code} does not belong to the caller")
            return None
        if booking.payment_status == "paid" or booking.status == "cancelled":
            logger.warning(
                f"Car booking {booking.booking_code} is {booking.status}/{booking.payment_status}, not payable"
            )
            return None
        return booking

    async def checkout(
        self,
        db: AsyncSession,
        user: User | None,
        customer: Customer,
        payment_method: str,
        bank_id: int | None = None,
        idempotency_key: str | None = None,
        guest_items: list[CartItem] | None = None,
    ) -> CheckoutResult:
        if idempotency_key:
            existing = await self.find_by_idempotency_key(db, idempotency_key)
            if existing is not None:
                logger.info(f"Checkout replay for idempotency key {idempotency_key}")
                return await self._replay(db, existing, user, customer)

        if user is not None:
            items = await cart_service.list_items(db, user.id)
        else:
            items = list(guest_items or [])
        if not items:
            raise CheckoutError("Cart is empty")

        bank = await self.resolve_bank(db, payment_method, bank_id)

        # Price every item before writing anything
        priced: list[tuple[CartItem, dict, Decimal]] = []
        skipped: list[str] = []
        for item in items:
            details = parse_details(item.details)
            price = await self.validated_price(db, item, details, user)
            if price is None:
                logger.warning(f"No payable car booking for cart item {item.id}, skipping")
                skipped.append(item.service_name)
                continue
            if price != Decimal(str(item.price)):
                logger.warning(
                    f"Cart price mismatch for '{item.service_name}': cart={item.price} server={price}"
                )
            priced.append((item, details, price))

        if not priced:
            raise CheckoutError("None of the cart items can be booked")

        total = sum((p for _, _, p in priced), Decimal("0"))
        logger.info(f"Creating payment for total amount {total} ({len(priced)} items)")

        try:
            payment = Payment(
                user_id=user.id if user else None,
                amount=total,
                payment_method=payment_method,
                bank_name=bank.bank_name if bank else None,
                status="pending",
                is_partial_payment=False,
                is_damage_payment=False,
                customer_name=customer.name,
                customer_email=customer.email,
                customer_phone=customer.phone,
                idempotency_key=idempotency_key,
                skipped_items=skipped or None,
            )
            db.add(payment)
            await db.flush()

            result = CheckoutResult(payment=payment, skipped=skipped)
            for item, details, price in priced:
                booking = await self._create_booking(db, user, customer, payment, item, details, price)
                db.add(PaymentBooking(
                    payment_id=payment.id,
                    booking_id=booking["booking_id"],
                    booking_type=item.item_type,
                    booking_code=booking["booking_code"],
                    service_name=item.service_name,
                    price=price,
                ))
                result.bookings.append(booking)
                if item.item_type == "airport_transfer":
                    result.messages.append((customer.phone, booking.pop("_message")))

            if user is not None:
                for item in items:
                    item.status = "paid"

            await db.commit()
        except IntegrityError:
            await db.rollback()
            if idempotency_key:
                existing = await self.find_by_idempotency_key(db, idempotency_key)
                if existing is not None:
                    return await self._replay(db, existing, user, customer)
            raise
        except Exception:
            await db.rollback()
            logger.exception("Checkout failed, transaction rolled back")
            raise

        logger.info(f"Checkout completed: payment {payment.id}")
        await self._after_commit(db, user, result)
        return result

    async def _create_booking(
        self,
        db: AsyncSession,
        user: User | None,
        customer: Customer,
        payment: Payment,
        item: CartItem,
        details: dict,
        price: Decimal,
    ) -> dict:
        customer_id = user.id if user else None

        if item.item_type == "baggage":
            duration_type = _first(details, "duration_type", "durationType", default="hours")
            hours = _int_or_none(_first(details, "hours"))
            start_date = parse_date(_first(details, "start_date"))
            end_date = parse_date(_first(details, "end_date"))
            row = BaggageBooking(
                booking_code=generate_booking_code("BG"),
                customer_name=customer.name,
                customer_phone=customer.phone,
                customer_email=customer.email,
                item_name=_first(details, "item_name"),
                flight_number=_first(details, "flight_number", default="-"),
                baggage_size=_first(details, "baggage_size", "size"),
                price=price,
                duration=billable_units(duration_type, hours, start_date, end_date),
                duration_type=duration_type,
                hours=hours if duration_type == "hours" else None,
                storage_location=_first(details, "storage_location", default=DEFAULT_STORAGE_LOCATION),
                start_date=start_date,
                end_date=end_date,
                start_time=_first(details, "start_time"),
                end_time=_first(details, "end_time"),
                airport=_first(details, "airport"),
                terminal=_first(details, "terminal"),
                status="confirmed",
                customer_id=customer_id,
                payment_id=payment.id,
            )
            db.add(row)
            await db.flush()
            return {
                "booking_type": "baggage",
                "booking_id": str(row.id),
                "booking_code": row.booking_code,
                "service_name": item.service_name,
                "price": price,
            }

        if item.item_type == "airport_transfer":
            row = AirportTransfer(
                booking_code=generate_booking_code("AT"),
                customer_name=customer.name,
                customer_email=customer.email,
                phone=customer.phone,
                pickup_location=_first(details, "fromAddress", "pickup_location", default="Unknown"),
                dropoff_location=_first(details, "toAddress", "dropoff_location", default="Unknown"),
                pickup_date=parse_date(_first(details, "pickupDate", "pickup_date"), date.today()),
                pickup_time=_first(details, "pickupTime", "pickup_time", default="09:00"),
                price=price,
                status="confirmed",
                vehicle_name=_first(details, "vehicleType", "vehicle_name"),
                driver_name=_first(details, "driver_name"),
                license_plate=_first(details, "license_plate"),
                distance=_stringify(_first(details, "distance")),
                duration=_stringify(_first(details, "duration")),
                transfer_type=_first(details, "type", default="airport_transfer"),
                passenger=_int_or_none(_first(details, "passenger", "passengers")) or 1,
                customer_id=customer_id,
                payment_id=payment.id,
            )
            db.add(row)
            await db.flush()
            return {
                "booking_type": "airport_transfer",
                "booking_id": str(row.id),
                "booking_code": row.booking_code,
                "service_name": item.service_name,
                "price": price,
                "_message": whatsapp_service.transfer_confirmation(
                    customer.name,
                    row.pickup_location,
                    row.dropoff_location,
                    row.pickup_date.isoformat(),
                    row.pickup_time,
                    price,
                ),
            }

        booking = await self._car_booking(db, item, user)
        booking.payment_status = "paid"
        booking.paid_amount = price
        booking.payment_id = payment.id
        if booking.status == "pending":
            booking.status = "confirmed"
        return {
            "booking_type": "car",
            "booking_id": str(booking.id),
            "booking_code": booking.booking_code,
            "service_name": item.service_name,
            "price": price,
        }

    async def _after_commit(self, db: AsyncSession, user: User | None, result: CheckoutResult) -> None:
        for target, message in result.messages:
            try:
                await whatsapp_service.send_message(target, message)
            except Exception as e:
                logger.error(f"Failed to send WhatsApp confirmation: {e}")

        if user is None:
            return
        try:
            await notification_service.send_order_confirmed(
                db, user.id, result.payment.id, result.payment.amount, len(result.bookings)
            )
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create order notification: {e}")


def _stringify(value) -> str | None:
    return None if value is None else str(value)


def _int_or_none(value) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CheckoutError(f"Invalid number: {value}")


checkout_service = CheckoutService()
