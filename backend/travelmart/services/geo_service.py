"""Geo service: OSRM driving routes and Google Places address lookup.

Routes fall back to a straight great-circle line when OSRM has no route or
cannot be reached, so the transfer page always has something to draw.
"""

import asyncio
import logging
import math

import httpx

from travelmart.config import settings
from travelmart.services.cache_service import cache_service

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
FALLBACK_SPEED_KMH = 40.0


def haversine_km(from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(from_lat), math.radians(to_lat)
    dphi = math.radians(to_lat - from_lat)
    dlmb = math.radians(to_lng - from_lng)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def straight_line_route(from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> dict:
    distance = haversine_km(from_lat, from_lng, to_lat, to_lng)
    return {
        "distance_km": round(distance, 2),
        "duration_min": round(distance / FALLBACK_SPEED_KMH * 60, 1),
        "coordinates": [[from_lat, from_lng], [to_lat, to_lng]],
        "is_fallback": True,
    }


class GeoService:
    """Adapter for the OSRM route API and the Google Places web service."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=15.0)
        return self._client

    async def _get_json(self, url: str, params: dict | None = None) -> dict:
        """GET with up to 3 attempts, backing off on 429 and network errors."""
        client = await self._get_client()
        for attempt in range(3):
            try:
                resp = await client.get(url, params=params)
                resp.raise_for_status()
                return resp.json()
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 429 and attempt < 2:
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise
            except httpx.RequestError:
                if attempt < 2:
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise
        raise RuntimeError("unreachable")

    async def get_route(self, from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> dict:
        """Driving route with distance (km), duration (minutes) and [lat, lng] points."""
        cached = await cache_service.get_route(from_lat, from_lng, to_lat, to_lng)
        if cached:
            return cached

        url = (
            f"{settings.osrm_base_url}/route/v1/driving/"
            f"{from_lng},{from_lat};{to_lng},{to_lat}"
        )
        try:
            data = await self._get_json(url, params={"overview": "full", "geometries": "geojson"})
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"OSRM route request failed, using straight line: {e}")
            return straight_line_route(from_lat, from_lng, to_lat, to_lng)

        routes = data.get("routes") or []
        coords = routes[0].get("geometry", {}).get("coordinates") if routes else None
        if not coords:
            logger.warning(f"No OSRM route found (code={data.get('code')}), using straight line")
            return straight_line_route(from_lat, from_lng, to_lat, to_lng)

        route = {
            "distance_km": round(routes[0].get("distance", 0) / 1000, 2),
            "duration_min": round(routes[0].get("duration", 0) / 60, 1),
            # GeoJSON is [lng, lat]; map clients want [lat, lng]
            "coordinates": [[lat, lng] for lng, lat in coords],
            "is_fallback": False,
        }
        await cache_service.set_route(from_lat, from_lng, to_lat, to_lng, route)
        return route

    async def autocomplete(self, query: str) -> list[dict]:
        """Place predictions for a partial address. Empty query gives no results."""
        query = (query or "").strip()
        if not query:
            return []
        if not settings.google_maps_api_key:
            logger.info("Google Maps API key not configured, autocomplete skipped")
            return []

        cached = await cache_service.get_autocomplete(query)
        if cached is not None:
            return cached

        try:
            data = await self._get_json(
                f"{settings.google_places_base_url}/autocomplete/json",
                params={"input": query, "key": settings.google_maps_api_key},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Places autocomplete failed for '{query}': {e}")
            return []

        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            logger.warning(f"Places autocomplete returned {status}: {data.get('error_message')}")
            return []

        predictions = [
            {
                "place_id": p.get("place_id"),
                "description": p.get("description"),
                "main_text": p.get("structured_formatting", {}).get("main_text"),
                "secondary_text": p.get("structured_formatting", {}).get("secondary_text"),
            }
            for p in data.get("predictions", [])
        ]
        await cache_service.set_autocomplete(query, predictions)
        return predictions

    async def place_details(self, place_id: str) -> dict | None:
        """Address and coordinates of a place, or None if it cannot be resolved."""
        if not settings.google_maps_api_key:
            return None

        cached = await cache_service.get_place(place_id)
        if cached:
            return cached

        try:
            data = await self._get_json(
                f"{settings.google_places_base_url}/details/json",
                params={
                    "place_id": place_id,
                    "fields": "name,formatted_address,geometry",
                    "key": settings.google_maps_api_key,
                },
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Place details failed for {place_id}: {e}")
            return None

        result = data.get("result")
        if data.get("status") != "OK" or not result:
            return None

        location = result.get("geometry", {}).get("location", {})
        place = {
            "place_id": place_id,
            "name": result.get("name"),
            "address": result.get("formatted_address"),
            "lat": location.get("lat"),
            "lng": location.get("lng"),
        }
        await cache_service.set_place(place_id, place)
        return place

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


geo_service = GeoService()
