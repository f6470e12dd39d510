"""Fonnte WhatsApp client: booking confirmations to customers."""

import asyncio
import logging

import httpx

from travelmart.config import settings

logger = logging.getLogger(__name__)


def format_idr(amount) -> str:
    """Format an amount the way the storefront shows rupiah, e.g. 'Rp 150.000'."""
    return "Rp " + f"{float(amount):,.0f}".replace(",", ".")


def normalize_phone(phone: str) -> str:
    """Strip formatting and convert a leading 0 to the Indonesian country code."""
    digits = "".join(ch for ch in phone if ch.isdigit())
    if digits.startswith("0"):
        digits = "62" + digits[1:]
    return digits


class WhatsAppService:
    """Adapter for the Fonnte `/send` endpoint."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None

    @property
    def enabled(self) -> bool:
        return bool(settings.fonnte_api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=settings.fonnte_base_url, timeout=15.0)
        return self._client

    async def send_message(self, target: str, message: str) -> dict | None:
        """Send a message. Returns the provider response, or None if not sent."""
        if not self.enabled:
            logger.info("Fonnte API key not configured, WhatsApp message skipped")
            return None

        client = await self._get_client()
        for attempt in range(3):
            try:
                resp = await client.post(
                    "/send",
                    data={"target": normalize_phone(target), "message": message},
                    headers={"Authorization": settings.fonnte_api_key},
                )
                resp.raise_for_status()
                result = resp.json()
                logger.info(f"Fonnte response: {result}")
                return result
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 429 and attempt < 2:
                    await asyncio.sleep(2 ** attempt)
                    continue
                logger.error(f"Fonnte send failed: HTTP {e.response.status_code}")
                return None
            except httpx.RequestError as e:
                if attempt < 2:
                    await asyncio.sleep(2 ** attempt)
                    continue
                logger.error(f"Fonnte send failed: {e}")
                return None
        return None

    def transfer_confirmation(
        self,
        customer_name: str,
        pickup_location: str,
        dropoff_location: str,
        pickup_date: str,
        pickup_time: str,
        price,
    ) -> str:
        return (
            f"Hello {customer_name},\n\n"
            "Your airport transfer booking has been confirmed!\n\n"
            "Booking Details:\n"
            f"- Pickup: {pickup_location}\n"
            f"- Dropoff: {dropoff_location}\n"
            f"- Date: {pickup_date}\n"
            f"- Time: {pickup_time}\n"
            f"- Price: {format_idr(price)}\n\n"
            "Thank you for choosing our service!"
        )

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


whatsapp_service = WhatsAppService()
