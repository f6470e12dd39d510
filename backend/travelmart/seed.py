"""Seed script for the TravelMart development database."""

import asyncio
import logging
from decimal import Decimal

from sqlalchemy import select

from travelmart.database import async_session_factory
from travelmart.models.booking import BaggagePrice
from travelmart.models.payment import PaymentMethod
from travelmart.models.user import Role, Staff, User
from travelmart.models.vehicle import Vehicle
from travelmart.services.pricing_service import BAGGAGE_PRICE_ROW_ID, DEFAULT_BAGGAGE_PRICES
from travelmart.services.staff_service import pwd_context

logger = logging.getLogger(__name__)

# ── Roles ──────────────────────────────────────────────────────────────────────

ROLES = [
    ("Super Admin", "Full access including role management"),
    ("Admin", "Back-office administrator"),
    ("Staff", "General staff"),
    ("Staff Trips", "Airport transfer operations"),
    ("Staff Traffic", "Handling and traffic desk"),
    ("Staff Admin", "Administrative staff"),
    ("Driver Mitra", "Partner driver with own vehicle"),
    ("Driver Perusahaan", "Company driver"),
    ("Customer", "Storefront customer"),
]

ADMIN_USER = {
    "email": "admin@travelmart.id",
    "password": "password123",
    "full_name": "TravelMart Admin",
    "phone": "081200000000",
}

# ── Bank accounts for manual transfer ──────────────────────────────────────────

BANK_ACCOUNTS = [
    ("BCA Transfer", "BCA", "PT TravelMart Indonesia", "1234567890", "CENAIDJA", "Jakarta"),
    ("Mandiri Transfer", "Bank Mandiri", "PT TravelMart Indonesia", "1370012345678", "BMRIIDJA", "Jakarta"),
    ("BNI Transfer", "BNI", "PT TravelMart Indonesia", "0987654321", "BNINIDJA", "Denpasar"),
]

# ── Rental fleet ───────────────────────────────────────────────────────────────

VEHICLES = [
    # make, model, year, type, plate, seats, transmission, price/day
    ("Toyota", "Avanza", 2022, "MPV", "B 1234 TMA", 7, "manual", 350000),
    ("Toyota", "Avanza", 2023, "MPV", "B 1235 TMA", 7, "automatic", 375000),
    ("Toyota", "Innova Reborn", 2022, "MPV", "B 2001 TMI", 7, "automatic", 550000),
    ("Daihatsu", "Xenia", 2021, "MPV", "B 3102 TMX", 7, "manual", 325000),
    ("Honda", "Brio", 2023, "City Car", "B 4410 TMB", 5, "automatic", 300000),
    ("Mitsubishi", "Pajero Sport", 2022, "SUV", "B 5501 TMP", 7, "automatic", 1100000),
]


async def seed():
    async with async_session_factory() as db:
        existing_roles = {r.name for r in (await db.execute(select(Role))).scalars().all()}
        for name, description in ROLES:
            if name not in existing_roles:
                db.add(Role(name=name, description=description))
        await db.flush()

        result = await db.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            await db.commit()
            logger.info("Database already seeded, roles verified")
            return

        super_admin = (await db.execute(select(Role).where(Role.name == "Super Admin"))).scalar_one()
        admin = User(
            email=ADMIN_USER["email"],
            password_hash=pwd_context.hash(ADMIN_USER["password"]),
            full_name=ADMIN_USER["full_name"],
            phone=ADMIN_USER["phone"],
            role_id=super_admin.id,
        )
        db.add(admin)
        await db.flush()
        db.add(Staff(id=admin.id, department="Management"))

        if await db.get(BaggagePrice, BAGGAGE_PRICE_ROW_ID) is None:
            db.add(BaggagePrice(id=BAGGAGE_PRICE_ROW_ID, **DEFAULT_BAGGAGE_PRICES))

        for name, bank, holder, number, swift, branch in BANK_ACCOUNTS:
            db.add(PaymentMethod(
                name=name,
                type="manual",
                bank_name=bank,
                account_holder=holder,
                account_number=number,
                swift_code=swift,
                branch=branch,
            ))

        for make, model, year, vtype, plate, seats, transmission, price in VEHICLES:
            db.add(Vehicle(
                make=make,
                model=model,
                year=year,
                vehicle_type=vtype,
                license_plate=plate,
                seats=seats,
                transmission=transmission,
                fuel_type="petrol",
                price_per_day=Decimal(price),
                is_available=True,
            ))

        await db.commit()
        logger.info(
            f"Seeded {len(ROLES)} roles, admin {ADMIN_USER['email']}, "
            f"{len(BANK_ACCOUNTS)} bank accounts and {len(VEHICLES)} vehicles"
        )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
