"""Notification service: creates in-app notifications."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.notification import Notification
from travelmart.services.whatsapp_service import format_idr

logger = logging.getLogger(__name__)


class NotificationService:
    """Creates in-app notifications for booking and payment events."""

    async def send_order_confirmed(
        self, db: AsyncSession, user_id: uuid.UUID, payment_id: uuid.UUID, amount, item_count: int
    ) -> Notification:
        return await self._create(
            db,
            user_id=user_id,
            type="order_confirmed",
            title="Order Confirmed",
            body=f"Your order of {item_count} item(s) totalling {format_idr(amount)} has been received.",
            reference_type="payment",
            reference_id=str(payment_id),
        )

    async def send_payment_received(
        self, db: AsyncSession, user_id: uuid.UUID, booking_code: str, payment_status: str, payment_id: uuid.UUID
    ) -> Notification:
        titles = {
            "paid": "Booking Paid in Full",
            "partial": "Partial Payment Received",
        }
        return await self._create(
            db,
            user_id=user_id,
            type="payment_received",
            title=titles.get(payment_status, "Payment Received"),
            body=f"A payment for booking {booking_code} was recorded. Status: {payment_status}.",
            reference_type="payment",
            reference_id=str(payment_id),
        )

    async def send_role_assigned(
        self, db: AsyncSession, user_id: uuid.UUID, role_name: str
    ) -> Notification:
        return await self._create(
            db,
            user_id=user_id,
            type="role_assigned",
            title="Role Updated",
            body=f"Your account role is now '{role_name}'.",
        )

    async def send_transfer_status(
        self, db: AsyncSession, user_id: uuid.UUID, booking_code: str, status: str, transfer_id: int
    ) -> Notification:
        return await self._create(
            db,
            user_id=user_id,
            type="transfer_status",
            title="Airport Transfer Update",
            body=f"Your airport transfer {booking_code} is now {status}.",
            reference_type="airport_transfer",
            reference_id=str(transfer_id),
        )

    async def _create(
        self, db: AsyncSession, user_id: uuid.UUID, type: str,
        title: str, body: str, reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            body=body,
            reference_type=reference_type,
            reference_id=reference_id,
        )
        db.add(notification)
        return notification


notification_service = NotificationService()
