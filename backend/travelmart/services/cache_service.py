"""Redis cache service for pricing tables and geocoding lookups."""

import json
import logging
from typing import Any

import redis.asyncio as redis

from travelmart.config import settings

logger = logging.getLogger(__name__)

# TTLs in seconds
TTL_BAGGAGE_PRICES = 10 * 60      # 10 minutes: invalidated on admin update
TTL_ROUTE = 24 * 60 * 60          # 24 hours: OSRM routes
TTL_AUTOCOMPLETE = 60 * 60        # 1 hour: place predictions
TTL_PLACE_DETAILS = 24 * 60 * 60  # 24 hours


class CacheService:
    """Redis-backed cache with typed TTLs."""

    def __init__(self):
        self._redis: redis.Redis | None = None
        self.enabled = True

    async def _get_redis(self) -> redis.Redis | None:
        if not self.enabled:
            return None
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception:
            return None

    async def set(self, key: str, value: Any, ttl: int = TTL_BAGGAGE_PRICES) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl)
            return True
        except Exception:
            return False

    async def delete(self, key: str) -> bool:
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.delete(key)
            return True
        except Exception:
            return False

    # Typed helpers

    baggage_prices_key = "pricing:baggage"

    def route_key(self, from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> str:
        return f"route:{from_lat:.5f},{from_lng:.5f}:{to_lat:.5f},{to_lng:.5f}"

    def autocomplete_key(self, query: str) -> str:
        return f"places:ac:{query.strip().lower()}"

    def place_key(self, place_id: str) -> str:
        return f"places:detail:{place_id}"

    async def get_baggage_prices(self) -> dict | None:
        return await self.get(self.baggage_prices_key)

    async def set_baggage_prices(self, data: dict):
        await self.set(self.baggage_prices_key, data, TTL_BAGGAGE_PRICES)

    async def invalidate_baggage_prices(self):
        await self.delete(self.baggage_prices_key)

    async def get_route(self, from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> dict | None:
        return await self.get(self.route_key(from_lat, from_lng, to_lat, to_lng))

    async def set_route(self, from_lat: float, from_lng: float, to_lat: float, to_lng: float, data: dict):
        await self.set(self.route_key(from_lat, from_lng, to_lat, to_lng), data, TTL_ROUTE)

    async def get_autocomplete(self, query: str) -> list[dict] | None:
        return await self.get(self.autocomplete_key(query))

    async def set_autocomplete(self, query: str, data: list[dict]):
        await self.set(self.autocomplete_key(query), data, TTL_AUTOCOMPLETE)

    async def get_place(self, place_id: str) -> dict | None:
        return await self.get(self.place_key(place_id))

    async def set_place(self, place_id: str, data: dict):
        await self.set(self.place_key(place_id), data, TTL_PLACE_DETAILS)

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
