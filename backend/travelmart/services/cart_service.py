"""Shopping cart service: per-user server cart and guest cart merge."""

import logging
import uuid
from decimal import Decimal, InvalidOperation

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.cart import CART_ITEM_TYPES, CartItem

logger = logging.getLogger(__name__)


def normalize_item_id(item_id: str | uuid.UUID | None) -> uuid.UUID | None:
    """Keep a referenced item id only if it is a real RFC 4122 UUID.

    Anything else (numeric ids, slugs) is replaced with a fresh UUID so the row
    still carries a unique reference.
    """
    if item_id is None or item_id == "":
        return None
    if isinstance(item_id, uuid.UUID):
        return item_id
    try:
        parsed = uuid.UUID(str(item_id))
    except ValueError:
        return uuid.uuid4()
    if parsed.version not in (1, 2, 3, 4, 5) or parsed.variant != uuid.RFC_4122:
        return uuid.uuid4()
    return parsed


def cart_total(items: list[CartItem]) -> Decimal:
    return sum((Decimal(str(i.price)) for i in items), Decimal("0"))


class CartService:
    """CRUD over the `shopping_cart` table scoped to one user."""

    async def list_items(self, db: AsyncSession, user_id: uuid.UUID) -> list[CartItem]:
        result = await db.execute(
            select(CartItem)
            .where(CartItem.user_id == user_id, CartItem.status == "active")
            .order_by(CartItem.created_at.desc())
        )
        return list(result.scalars().all())

    async def add_item(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        item_type: str,
        service_name: str,
        price: float | Decimal,
        item_id: str | uuid.UUID | None = None,
        details: dict | None = None,
    ) -> CartItem:
        if item_type not in CART_ITEM_TYPES:
            raise ValueError(f"Unsupported item type: {item_type}")
        amount = Decimal(str(price))
        if amount <= 0:
            raise ValueError("Price must be positive")

        item = CartItem(
            user_id=user_id,
            item_type=item_type,
            item_id=normalize_item_id(item_id),
            service_name=service_name,
            price=amount,
            details=details or {},
            status="active",
        )
        db.add(item)
        await db.commit()
        await db.refresh(item)
        logger.info(f"Cart item added: user={user_id} type={item_type} price={amount}")
        return item

    async def remove_item(self, db: AsyncSession, user_id: uuid.UUID, cart_item_id: uuid.UUID) -> bool:
        result = await db.execute(
            select(CartItem).where(CartItem.id == cart_item_id, CartItem.user_id == user_id)
        )
        item = result.scalar_one_or_none()
        if not item:
            return False
        await db.delete(item)
        await db.commit()
        return True

    async def clear(self, db: AsyncSession, user_id: uuid.UUID) -> int:
        result = await db.execute(
            delete(CartItem).where(CartItem.user_id == user_id, CartItem.status == "active")
        )
        await db.commit()
        return result.rowcount or 0

    async def merge_guest_items(
        self, db: AsyncSession, user_id: uuid.UUID, raw_items: list[dict]
    ) -> tuple[int, int]:
        """Move a guest's locally stored cart into the user's server cart.

        Returns (added, skipped). Malformed entries are skipped, not fatal.
        """
        added = 0
        skipped = 0
        for raw in raw_items:
            try:
                item_type = raw["item_type"]
                service_name = str(raw["service_name"])
                price = Decimal(str(raw["price"]))
            except (KeyError, TypeError, InvalidOperation):
                skipped += 1
                continue

            if item_type not in CART_ITEM_TYPES or price <= 0 or not service_name:
                skipped += 1
                continue

            details = raw.get("details")
            db.add(CartItem(
                user_id=user_id,
                item_type=item_type,
                item_id=normalize_item_id(raw.get("item_id")),
                service_name=service_name,
                price=price,
                details=details if isinstance(details, dict) else {},
                status="active",
            ))
            added += 1

        await db.commit()
        if skipped:
            logger.warning(f"Cart merge for {user_id}: skipped {skipped} malformed items")
        logger.info(f"Cart merge for {user_id}: {added} items migrated")
        return added, skipped

    async def purge_paid(self, db: AsyncSession) -> int:
        """Delete cart rows already consumed by a checkout."""
        result = await db.execute(delete(CartItem).where(CartItem.status == "paid"))
        await db.commit()
        return result.rowcount or 0


cart_service = CartService()
