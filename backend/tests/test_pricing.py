from datetime import date
from decimal import Decimal

import pytest

from conftest import auth_headers
from travelmart.models.booking import BaggagePrice
from travelmart.services.pricing_service import (
    BAGGAGE_PRICE_ROW_ID,
    DEFAULT_BAGGAGE_PRICES,
    billable_units,
    normalize_size,
    pricing_service,
)


@pytest.mark.parametrize("hours,units", [(1, 1), (4, 1), (5, 2), (8, 2), (9, 3), (24, 6)])
def test_hourly_storage_is_billed_per_started_block(hours, units):
    assert billable_units("hours", hours=hours) == units


def test_daily_storage_bills_at_least_one_day():
    assert billable_units("days", start_date=date(2025, 3, 1), end_date=date(2025, 3, 4)) == 3
    assert billable_units("days", start_date=date(2025, 3, 1), end_date=date(2025, 3, 1)) == 1


def test_daily_storage_rejects_end_before_start():
    with pytest.raises(ValueError):
        billable_units("days", start_date=date(2025, 3, 4), end_date=date(2025, 3, 1))


def test_unknown_duration_type():
    with pytest.raises(ValueError):
        billable_units("weeks", hours=3)


def test_size_labels_are_normalized():
    assert normalize_size("Extra Large") == "extra_large"
    assert normalize_size("surfboard") == "surfing"
    with pytest.raises(ValueError):
        normalize_size("huge")


async def test_first_read_creates_default_prices(db):
    prices = await pricing_service.get_prices(db)
    assert prices["small_price"] == Decimal("70000")
    assert prices["stickgolf_price"] == Decimal("110000")


async def test_price_row_created_concurrently_is_reused(db, session_factory, monkeypatch):
    async with session_factory() as other:
        prices = {**DEFAULT_BAGGAGE_PRICES, "small_price": Decimal("72000")}
        other.add(BaggagePrice(id=BAGGAGE_PRICE_ROW_ID, **prices))
        await other.commit()

    find = pricing_service._find_price_row
    calls = []

    async def first_read_misses(session):
        calls.append(session)
        if len(calls) == 1:
            return None
        return await find(session)

    monkeypatch.setattr(pricing_service, "_find_price_row", first_read_misses)
    row = await pricing_service.get_price_row(db)
    assert len(calls) == 2
    assert row.id == BAGGAGE_PRICE_ROW_ID
    assert row.small_price == Decimal("72000")


async def test_quote_uses_current_prices(db):
    await pricing_service.update_prices(db, {"medium_price": 85000})
    quote = await pricing_service.quote(db, "medium", "hours", hours=6)
    assert quote["units"] == 2
    assert quote["total_price"] == Decimal("170000")


async def test_quote_endpoint_rejects_unknown_size(client):
    resp = await client.post("/api/baggage/quote", json={"baggage_size": "piano", "hours": 2})
    assert resp.status_code == 400


async def test_quote_endpoint_rejects_reversed_dates(client):
    resp = await client.post("/api/baggage/quote", json={
        "baggage_size": "small",
        "duration_type": "days",
        "start_date": "2025-03-04",
        "end_date": "2025-03-01",
    })
    assert resp.status_code == 400
    assert "End date" in resp.json()["detail"]


async def test_admin_updates_prices(client, admin, customer):
    prices = (await client.get("/api/baggage/prices")).json()
    prices["large_price"] = 95000

    forbidden = await client.put("/api/admin/baggage-prices", json=prices, headers=auth_headers(customer))
    assert forbidden.status_code == 403

    resp = await client.put("/api/admin/baggage-prices", json=prices, headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json()["large_price"] == 95000

    assert (await client.get("/api/baggage/prices")).json()["large_price"] == 95000


async def test_negative_price_rejected(client, admin):
    prices = (await client.get("/api/baggage/prices")).json()
    prices["small_price"] = -1
    resp = await client.put("/api/admin/baggage-prices", json=prices, headers=auth_headers(admin))
    assert resp.status_code == 422
