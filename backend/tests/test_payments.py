import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from conftest import auth_headers, make_user
from travelmart.models.notification import Notification
from travelmart.models.payment import Payment
from travelmart.models.vehicle import CarBooking, Damage
from travelmart.services.payment_service import payment_service


async def _rental(factory, user, vehicle, total="1000000") -> CarBooking:
    async with factory() as db:
        booking = CarBooking(
            booking_code=f"CR-TEST-{uuid.uuid4().hex[:6]}",
            user_id=user.id,
            vehicle_id=vehicle.id,
            start_date=date(2025, 8, 1),
            end_date=date(2025, 8, 3),
            total_amount=Decimal(total),
            paid_amount=Decimal("0"),
        )
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
        return booking


async def test_partial_then_full_payment(client, customer, vehicle, session_factory):
    booking = await _rental(session_factory, customer, vehicle)
    headers = auth_headers(customer)

    first = await client.post("/api/payments/process", json={
        "booking_id": str(booking.id),
        "amount": 400000,
        "payment_method": "cash",
        "is_partial_payment": True,
    }, headers=headers)
    assert first.status_code == 200
    assert first.json()["booking_payment_status"] == "partial"
    assert first.json()["total_paid"] == 400000

    second = await client.post("/api/payments/process", json={
        "booking_id": str(booking.id),
        "amount": 600000,
        "payment_method": "bank",
        "bank_name": "Mandiri",
    }, headers=headers)
    assert second.json()["booking_payment_status"] == "paid"

    async with session_factory() as db:
        refreshed = await db.get(CarBooking, booking.id)
        assert refreshed.paid_amount == Decimal("1000000")
        titles = (await db.execute(select(Notification.title))).scalars().all()
        assert sorted(titles) == ["Booking Paid in Full", "Partial Payment Received"]


async def test_payment_for_unknown_booking(client, customer):
    resp = await client.post("/api/payments/process", json={
        "booking_id": str(uuid.uuid4()),
        "amount": 1000,
        "payment_method": "cash",
    }, headers=auth_headers(customer))
    assert resp.status_code == 404


async def test_payment_after_checkout_keeps_rental_paid(client, customer, vehicle, session_factory):
    booking = await _rental(session_factory, customer, vehicle, total="1050000")
    headers = auth_headers(customer)
    await client.post("/api/cart/items", json={
        "item_type": "car",
        "item_id": str(booking.id),
        "service_name": "Toyota Avanza (3 days)",
        "price": 1050000,
    }, headers=headers)
    checkout = await client.post("/api/checkout", json={
        "customer": {"name": "Budi", "email": "budi@example.com", "phone": "0812"},
        "payment_method": "cash",
    }, headers=headers)
    assert checkout.status_code == 201

    resp = await client.post("/api/payments/process", json={
        "booking_id": str(booking.id),
        "amount": 1000,
        "payment_method": "cash",
    }, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["booking_payment_status"] == "paid"
    assert resp.json()["total_paid"] == 1051000

    async with session_factory() as db:
        assert (await db.get(CarBooking, booking.id)).paid_amount == Decimal("1051000")


async def test_only_owner_or_staff_can_pay_a_rental(client, customer, staff_user, vehicle, session_factory):
    booking = await _rental(session_factory, customer, vehicle)
    async with session_factory() as db:
        db.add(Damage(booking_id=booking.id, description="Cracked mirror", amount=Decimal("120000")))
        await db.commit()

    stranger = await make_user(session_factory, "stranger@example.com")
    payload = {"booking_id": str(booking.id), "amount": 1000000, "payment_method": "cash"}

    forbidden = await client.post("/api/payments/process", json=payload, headers=auth_headers(stranger))
    assert forbidden.status_code == 403
    damages = await client.get(f"/api/payments/bookings/{booking.id}/damages", headers=auth_headers(stranger))
    assert damages.status_code == 403

    async with session_factory() as db:
        assert (await db.get(CarBooking, booking.id)).payment_status == "unpaid"
        assert (await db.execute(select(Payment))).scalars().all() == []

    staff = await client.get(f"/api/payments/bookings/{booking.id}/damages", headers=auth_headers(staff_user))
    assert [d["description"] for d in staff.json()] == ["Cracked mirror"]
    paid = await client.post("/api/payments/process", json=payload, headers=auth_headers(staff_user))
    assert paid.json()["booking_payment_status"] == "paid"


async def test_required_fields(client, customer):
    resp = await client.post("/api/payments/process", json={"amount": 1000}, headers=auth_headers(customer))
    assert resp.status_code == 422


async def test_damage_payment_marks_damages_paid(client, customer, vehicle, session_factory):
    booking = await _rental(session_factory, customer, vehicle)
    async with session_factory() as db:
        scratch = Damage(booking_id=booking.id, description="Rear bumper scratch", amount=Decimal("150000"))
        dent = Damage(booking_id=booking.id, description="Door dent", amount=Decimal("250000"))
        db.add_all([scratch, dent])
        await db.commit()

    headers = auth_headers(customer)
    unpaid = (await client.get(f"/api/payments/bookings/{booking.id}/damages", headers=headers)).json()
    assert len(unpaid) == 2

    resp = await client.post("/api/payments/process", json={
        "booking_id": str(booking.id),
        "amount": 400000,
        "payment_method": "cash",
        "is_damage_payment": True,
        "damage_ids": [d["id"] for d in unpaid],
    }, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["payment"]["is_damage_payment"] is True

    assert (await client.get(f"/api/payments/bookings/{booking.id}/damages", headers=headers)).json() == []

    # Damage payments never count towards the rental itself
    async with session_factory() as db:
        assert (await db.get(CarBooking, booking.id)).payment_status == "unpaid"


async def test_damage_ids_must_belong_to_booking(customer, vehicle, session_factory):
    booking = await _rental(session_factory, customer, vehicle)
    async with session_factory() as db:
        with pytest.raises(LookupError):
            await payment_service.process_payment(
                db, customer.id, booking.id, 1000, "cash",
                is_damage_payment=True, damage_ids=[uuid.uuid4()],
            )


async def test_receipt_and_invoice(client, customer, session_factory):
    headers = auth_headers(customer)
    await client.post("/api/cart/items", json={
        "item_type": "airport_transfer",
        "service_name": "Airport Transfer - Sedan",
        "price": 200000,
        "details": {"fromAddress": "Soekarno-Hatta T3", "toAddress": "Menteng", "pickupDate": "2025-09-10"},
    }, headers=headers)
    checkout = (await client.post("/api/checkout", json={
        "customer": {"name": "Budi", "email": "budi@example.com", "phone": "0812"},
        "payment_method": "cash",
    }, headers=headers)).json()

    receipt = (await client.get(f"/api/payments/{checkout['payment_id']}", headers=headers)).json()
    assert receipt["payment"]["amount"] == 200000
    assert receipt["bookings"][0]["booking_type"] == "airport_transfer"
    assert receipt["bookings"][0]["start_date"] == "2025-09-10"

    invoice = await client.get(f"/api/payments/{checkout['payment_id']}/invoice", headers=headers)
    assert invoice.status_code == 200
    assert invoice.headers["content-type"] == "application/pdf"
    assert invoice.content.startswith(b"%PDF")

    stranger = await make_user(session_factory, "stranger@example.com")
    assert (await client.get(f"/api/payments/{checkout['payment_id']}", headers=auth_headers(stranger))).status_code == 403
    assert (await client.get(f"/api/payments/{uuid.uuid4()}", headers=headers)).status_code == 404


async def test_stale_pending_payments_expire(session_factory):
    async with session_factory() as db:
        db.add(Payment(
            amount=Decimal("50000"),
            payment_method="bank_transfer",
            status="pending",
            created_at=datetime.now(timezone.utc) - timedelta(hours=30),
        ))
        db.add(Payment(amount=Decimal("70000"), payment_method="cash", status="pending"))
        await db.commit()

    async with session_factory() as db:
        assert await payment_service.expire_stale_payments(db, ttl_hours=24) == 1

    async with session_factory() as db:
        statuses = sorted((await db.execute(select(Payment.status))).scalars().all())
        assert statuses == ["expired", "pending"]
