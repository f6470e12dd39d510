import uuid

from conftest import auth_headers
from travelmart.services.cart_service import normalize_item_id

BAGGAGE_ITEM = {
    "item_type": "baggage",
    "item_id": "42",
    "service_name": "Baggage Storage - Medium",
    "price": 80000,
    "details": {"baggage_size": "medium", "duration_type": "hours", "hours": 4},
}


def test_normalize_item_id():
    real = uuid.uuid4()
    assert normalize_item_id(str(real)) == real
    assert normalize_item_id(None) is None

    replaced = normalize_item_id("car-17")
    assert isinstance(replaced, uuid.UUID)
    assert replaced.version == 4

    # Well-formed hex but not an RFC 4122 version
    assert normalize_item_id("00000000-0000-0000-0000-000000000000") != uuid.UUID(int=0)


async def test_cart_add_list_remove(client, customer):
    headers = auth_headers(customer)
    assert (await client.get("/api/cart", headers=headers)).json()["count"] == 0

    added = await client.post("/api/cart/items", json=BAGGAGE_ITEM, headers=headers)
    assert added.status_code == 201
    item = added.json()
    assert item["status"] == "active"
    assert item["item_id"] != "42"

    await client.post("/api/cart/items", json={
        "item_type": "airport_transfer",
        "service_name": "Airport Transfer - MPV",
        "price": 250000,
        "details": {"fromAddress": "Ngurah Rai Airport", "toAddress": "Ubud"},
    }, headers=headers)

    cart = (await client.get("/api/cart", headers=headers)).json()
    assert cart["count"] == 2
    assert cart["total_amount"] == 330000
    assert cart["items"][0]["item_type"] == "airport_transfer"

    removed = await client.delete(f"/api/cart/items/{item['id']}", headers=headers)
    assert removed.status_code == 204
    missing = await client.delete(f"/api/cart/items/{item['id']}", headers=headers)
    assert missing.status_code == 404

    cleared = await client.delete("/api/cart", headers=headers)
    assert cleared.json()["removed"] == 1


async def test_cart_rejects_bad_items(client, customer):
    headers = auth_headers(customer)
    bad_type = await client.post("/api/cart/items", json={**BAGGAGE_ITEM, "item_type": "hotel"}, headers=headers)
    assert bad_type.status_code == 422
    free = await client.post("/api/cart/items", json={**BAGGAGE_ITEM, "price": 0}, headers=headers)
    assert free.status_code == 422


async def test_cart_items_are_private(client, customer, session_factory):
    from conftest import make_user

    other = await make_user(session_factory, "other@example.com")
    item = (await client.post("/api/cart/items", json=BAGGAGE_ITEM, headers=auth_headers(customer))).json()

    resp = await client.delete(f"/api/cart/items/{item['id']}", headers=auth_headers(other))
    assert resp.status_code == 404
    assert (await client.get("/api/cart", headers=auth_headers(other))).json()["count"] == 0


async def test_merge_guest_cart_skips_malformed_entries(client, customer):
    headers = auth_headers(customer)
    resp = await client.post("/api/cart/merge", json={"items": [
        BAGGAGE_ITEM,
        {"item_type": "hotel", "service_name": "Hotel", "price": 100},
        {"item_type": "baggage", "service_name": "No price"},
        {"item_type": "car", "service_name": "Avanza", "price": -5},
    ]}, headers=headers)
    assert resp.json() == {"added": 1, "skipped": 3}
    assert (await client.get("/api/cart", headers=headers)).json()["count"] == 1
