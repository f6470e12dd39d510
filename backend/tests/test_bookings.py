from decimal import Decimal

from conftest import auth_headers, make_user
from travelmart.models.vehicle import Vehicle
from travelmart.services.booking_service import generate_booking_code, rental_days


def test_booking_code_format():
    code = generate_booking_code("CR")
    prefix, millis, suffix = code.split("-")
    assert prefix == "CR"
    assert millis.isdigit()
    assert len(suffix) == 6 and suffix == suffix.upper()


def test_rental_days():
    from datetime import date

    assert rental_days(date(2025, 8, 1), date(2025, 8, 1)) == 1
    assert rental_days(date(2025, 8, 1), date(2025, 8, 5)) == 4


async def test_catalog_groups_by_model(client, session_factory, vehicle):
    async with session_factory() as db:
        db.add(Vehicle(make="Toyota", model="Avanza", license_plate="B 9999 ZZ",
                       price_per_day=Decimal("325000"), is_available=False))
        db.add(Vehicle(make="Honda", model="Brio", license_plate="DK 1 AB",
                       price_per_day=Decimal("300000")))
        await db.commit()

    catalog = (await client.get("/api/vehicles")).json()
    assert [m["model_name"] for m in catalog] == ["Honda Brio", "Toyota Avanza"]
    avanza = catalog[1]
    assert len(avanza["vehicles"]) == 2
    assert avanza["available_count"] == 1
    assert avanza["min_price_per_day"] == 325000

    available = (await client.get("/api/vehicles", params={"available_only": True})).json()
    assert sum(len(m["vehicles"]) for m in available) == 2


async def test_create_booking_validates_dates_and_availability(client, customer, vehicle, session_factory):
    headers = auth_headers(customer)
    backwards = await client.post("/api/bookings", json={
        "vehicle_id": str(vehicle.id), "start_date": "2025-08-05", "end_date": "2025-08-01",
    }, headers=headers)
    assert backwards.status_code == 400

    same_day = await client.post("/api/bookings", json={
        "vehicle_id": str(vehicle.id), "start_date": "2025-08-05", "end_date": "2025-08-05",
    }, headers=headers)
    assert same_day.status_code == 201
    assert same_day.json()["total_amount"] == 350000
    assert same_day.json()["booking_code"].startswith("CR-")

    async with session_factory() as db:
        v = await db.get(Vehicle, vehicle.id)
        v.is_available = False
        await db.commit()

    unavailable = await client.post("/api/bookings", json={
        "vehicle_id": str(vehicle.id), "start_date": "2025-09-01", "end_date": "2025-09-02",
    }, headers=headers)
    assert unavailable.status_code == 400


async def test_customers_see_only_their_bookings(client, customer, staff_user, vehicle, session_factory):
    other = await make_user(session_factory, "wayan@example.com")
    for user in (customer, other):
        await client.post("/api/bookings", json={
            "vehicle_id": str(vehicle.id), "start_date": "2025-08-01", "end_date": "2025-08-02",
        }, headers=auth_headers(user))

    mine = (await client.get("/api/bookings", headers=auth_headers(customer))).json()
    assert len(mine) == 1
    assert mine[0]["user_id"] == str(customer.id)

    everything = (await client.get("/api/bookings", headers=auth_headers(staff_user))).json()
    assert len(everything) == 2

    filtered = (await client.get(
        "/api/bookings", params={"status": "confirmed"}, headers=auth_headers(staff_user)
    )).json()
    assert filtered == []


async def test_update_and_delete_booking(client, customer, vehicle):
    headers = auth_headers(customer)
    booking = (await client.post("/api/bookings", json={
        "vehicle_id": str(vehicle.id), "start_date": "2025-08-01", "end_date": "2025-08-02",
    }, headers=headers)).json()

    longer = await client.patch(f"/api/bookings/{booking['id']}", json={"end_date": "2025-08-04"}, headers=headers)
    assert longer.status_code == 200
    assert longer.json()["total_amount"] == 1050000

    confirm = await client.patch(f"/api/bookings/{booking['id']}", json={"status": "confirmed"}, headers=headers)
    assert confirm.status_code == 403

    await client.post("/api/payments/process", json={
        "booking_id": booking["id"], "amount": 100000, "payment_method": "cash",
    }, headers=headers)
    blocked = await client.delete(f"/api/bookings/{booking['id']}", headers=headers)
    assert blocked.status_code == 409


async def test_unpaid_booking_can_be_deleted(client, customer, vehicle):
    headers = auth_headers(customer)
    booking = (await client.post("/api/bookings", json={
        "vehicle_id": str(vehicle.id), "start_date": "2025-08-01", "end_date": "2025-08-02",
    }, headers=headers)).json()

    assert (await client.delete(f"/api/bookings/{booking['id']}", headers=headers)).status_code == 204
    assert (await client.get("/api/bookings", headers=headers)).json() == []
