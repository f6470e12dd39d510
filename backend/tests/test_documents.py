import base64

import pytest

from conftest import auth_headers, make_user
from travelmart.models.user import Driver, Staff
from travelmart.models.vehicle import Vehicle
from travelmart.services.document_service import decode_data_url, document_service, result_key

JPEG = b"\xff\xd8\xff\xe0fake-jpeg-body\xff\xd9"
DATA_URL = "data:image/jpeg;base64," + base64.b64encode(JPEG).decode()


def _stored(url: str) -> bytes:
    bucket, name = url.rsplit("/", 2)[-2:]
    return (document_service.storage_dir / bucket / name).read_bytes()


def test_decode_data_url():
    assert decode_data_url(DATA_URL) == JPEG
    with pytest.raises(ValueError):
        decode_data_url("https://example.com/ktp.jpg")
    with pytest.raises(ValueError):
        decode_data_url("data:image/jpeg,rawbytes")
    with pytest.raises(ValueError):
        decode_data_url("data:image/jpeg;base64,@@not-base64@@")


def test_result_keys_drop_image_suffix():
    assert result_key("ktpImage") == "ktp"
    assert result_key("selfie") == "selfie"


async def test_driver_uploads_own_documents(client, session_factory):
    driver = await make_user(session_factory, "ketut@example.com", "Driver Mitra")
    async with session_factory() as db:
        db.add(Driver(id=driver.id))
        await db.commit()

    resp = await client.post("/api/documents", json={
        "userId": str(driver.id),
        "selfie": DATA_URL,
        "ktpImage": DATA_URL,
        "simImage": "data:image/jpeg;base64,%%%",
        "kkImage": "not-a-data-url",
    }, headers=auth_headers(driver))
    assert resp.status_code == 200
    urls = resp.json()
    assert set(urls) == {"selfie", "ktp"}
    assert urls["ktp"].startswith(f"/storage/driver_documents/ktp_{driver.id}_")
    assert _stored(urls["selfie"]) == JPEG

    async with session_factory() as db:
        row = await db.get(Driver, driver.id)
        assert row.ktp_url == urls["ktp"]
        assert row.selfie_url == urls["selfie"]
        assert row.sim_url is None


async def test_staff_id_card_without_staff_row(customer, session_factory):
    async with session_factory() as db:
        urls = await document_service.upload(db, {"idCardImage": DATA_URL}, user_id=customer.id)
        assert set(urls) == {"idCard"}
        assert await db.get(Staff, customer.id) is None


async def test_vehicle_photos_are_staff_only(client, customer, staff_user, vehicle, session_factory):
    payload = {"vehicleId": str(vehicle.id), "front": DATA_URL, "bpkb": DATA_URL}

    forbidden = await client.post("/api/documents", json=payload, headers=auth_headers(customer))
    assert forbidden.status_code == 403

    resp = await client.post("/api/documents", json=payload, headers=auth_headers(staff_user))
    assert set(resp.json()) == {"front", "bpkb"}

    async with session_factory() as db:
        row = await db.get(Vehicle, vehicle.id)
        assert row.front_image_url == resp.json()["front"]
        assert row.bpkb_url.startswith("/storage/vehicles/bpkb_")


async def test_upload_requires_owner_and_permission(client, customer, session_factory):
    other = await make_user(session_factory, "wayan@example.com")
    missing = await client.post("/api/documents", json={"selfie": DATA_URL}, headers=auth_headers(customer))
    assert missing.status_code == 400

    someone_else = await client.post(
        "/api/documents", json={"userId": str(other.id), "selfie": DATA_URL}, headers=auth_headers(customer)
    )
    assert someone_else.status_code == 403

    with pytest.raises(ValueError):
        async with session_factory() as db:
            await document_service.upload(db, {"selfie": DATA_URL})
