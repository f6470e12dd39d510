import os
import tempfile

os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="travelmart-storage-")
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["FONNTE_API_KEY"] = ""
os.environ["GOOGLE_MAPS_API_KEY"] = ""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from travelmart.database import Base, get_db
from travelmart.main import app
from travelmart.models.payment import PaymentMethod
from travelmart.models.user import Role, User
from travelmart.models.vehicle import Vehicle
from travelmart.routers.auth import create_access_token
from travelmart.seed import ROLES
from travelmart.services.cache_service import cache_service
from travelmart.services.staff_service import pwd_context

# One bcrypt hash for every fixture user keeps the suite fast
PASSWORD = "password123"
PASSWORD_HASH = pwd_context.hash(PASSWORD)


@pytest.fixture(autouse=True)
def no_cache():
    cache_service.enabled = False
    yield
    cache_service.enabled = True


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as db:
        for name, description in ROLES:
            db.add(Role(name=name, description=description))
        await db.commit()

    yield factory
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(factory, email: str, role_name: str = "Customer", **fields) -> User:
    async with factory() as db:
        role = (await db.execute(select(Role).where(Role.name == role_name))).scalar_one()
        user = User(
            email=email,
            password_hash=PASSWORD_HASH,
            full_name=fields.pop("full_name", email.split("@")[0].title()),
            role_id=role.id,
            **fields,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


@pytest.fixture
async def customer(session_factory):
    return await make_user(session_factory, "budi@example.com", phone="081234567890")


@pytest.fixture
async def admin(session_factory):
    return await make_user(session_factory, "admin@example.com", "Admin")


@pytest.fixture
async def staff_user(session_factory):
    return await make_user(session_factory, "siti@example.com", "Staff Trips")


@pytest.fixture
async def vehicle(session_factory):
    async with session_factory() as db:
        v = Vehicle(
            make="Toyota",
            model="Avanza",
            year=2023,
            vehicle_type="MPV",
            license_plate="B 1234 XYZ",
            seats=7,
            price_per_day=Decimal("350000"),
            is_available=True,
        )
        db.add(v)
        await db.commit()
        await db.refresh(v)
        return v


@pytest.fixture
async def bank(session_factory):
    async with session_factory() as db:
        method = PaymentMethod(
            name="BCA Transfer",
            type="manual",
            bank_name="BCA",
            account_holder="PT TravelMart Indonesia",
            account_number="1234567890",
            is_active=True,
        )
        db.add(method)
        await db.commit()
        await db.refresh(method)
        return method
