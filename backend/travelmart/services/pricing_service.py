"""Baggage pricing: admin-editable price table and quote calculation."""

import logging
import math
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.booking import BaggagePrice
from travelmart.services.cache_service import cache_service

logger = logging.getLogger(__name__)

BAGGAGE_PRICE_ROW_ID = 2025

DEFAULT_BAGGAGE_PRICES = {
    "small_price": Decimal("70000"),
    "medium_price": Decimal("80000"),
    "large_price": Decimal("90000"),
    "extra_large_price": Decimal("100000"),
    "electronic_price": Decimal("90000"),
    "surfing_price": Decimal("100000"),
    "wheelchair_price": Decimal("110000"),
    "stickgolf_price": Decimal("110000"),
}

PRICE_FIELDS = tuple(DEFAULT_BAGGAGE_PRICES)

# Hourly storage is sold in 4-hour blocks
HOURS_PER_BLOCK = 4

# Accept the labels the storefront uses as well as the column stems
SIZE_ALIASES = {
    "extra-large": "extra_large",
    "extralarge": "extra_large",
    "xl": "extra_large",
    "surfingboard": "surfing",
    "surfboard": "surfing",
    "golf": "stickgolf",
}


def normalize_size(size: str) -> str:
    key = size.strip().lower().replace(" ", "_")
    key = SIZE_ALIASES.get(key, key)
    if f"{key}_price" not in DEFAULT_BAGGAGE_PRICES:
        raise ValueError(f"Unknown baggage size: {size}")
    return key


def billable_units(
    duration_type: str,
    hours: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> int:
    """Number of price units for a storage period.

    Hourly storage is charged per started 4-hour block, daily storage per day
    between start and end date. Either way at least one unit is charged.
    """
    if duration_type == "hours":
        if not hours:
            return 1
        if hours < 0:
            raise ValueError("Hours must be positive")
        return max(1, math.ceil(hours / HOURS_PER_BLOCK))

    if duration_type == "days":
        if start_date is None or end_date is None:
            return 1
        if end_date < start_date:
            raise ValueError("End date must not be before start date")
        return max(1, (end_date - start_date).days)

    raise ValueError(f"Unknown duration type: {duration_type}")


class PricingService:
    """Reads and updates the single baggage price row."""

    async def _find_price_row(self, db: AsyncSession) -> BaggagePrice | None:
        result = await db.execute(select(BaggagePrice).limit(1))
        return result.scalar_one_or_none()

    async def get_price_row(self, db: AsyncSession) -> BaggagePrice:
        """Return the price row, creating it with defaults on first use."""
        row = await self._find_price_row(db)
        if row is not None:
            return row

        row = BaggagePrice(id=BAGGAGE_PRICE_ROW_ID, **DEFAULT_BAGGAGE_PRICES)
        db.add(row)
        try:
            await db.flush()
        except IntegrityError:
            # Another request created the row first
            await db.rollback()
            return await self._find_price_row(db)
        logger.info("Created initial baggage price record")
        return row

    async def get_prices(self, db: AsyncSession) -> dict[str, Decimal]:
        cached = await cache_service.get_baggage_prices()
        if cached:
            return {k: Decimal(str(v)) for k, v in cached.items()}

        row = await self.get_price_row(db)
        prices = {field: Decimal(str(getattr(row, field))) for field in PRICE_FIELDS}
        await cache_service.set_baggage_prices({k: str(v) for k, v in prices.items()})
        return prices

    async def update_prices(self, db: AsyncSession, updates: dict[str, float]) -> dict[str, Decimal]:
        row = await self.get_price_row(db)
        for field, value in updates.items():
            if field not in PRICE_FIELDS:
                continue
            if value < 0:
                raise ValueError(f"{field} must not be negative")
            setattr(row, field, Decimal(str(value)))
        await db.commit()
        await cache_service.invalidate_baggage_prices()
        logger.info("Baggage prices updated")
        return {field: Decimal(str(getattr(row, field))) for field in PRICE_FIELDS}

    async def quote(
        self,
        db: AsyncSession,
        baggage_size: str,
        duration_type: str = "hours",
        hours: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        size = normalize_size(baggage_size)
        prices = await self.get_prices(db)
        unit_price = prices[f"{size}_price"]
        units = billable_units(duration_type, hours, start_date, end_date)
        return {
            "baggage_size": size,
            "duration_type": duration_type,
            "units": units,
            "unit_price": unit_price,
            "total_price": unit_price * units,
        }


pricing_service = PricingService()
