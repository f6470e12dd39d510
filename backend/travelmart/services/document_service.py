"""Document uploads: identity papers for drivers/staff and vehicle photos.

Images arrive as data URLs, are written under the storage directory and the
public URL is recorded on the owning driver, staff or vehicle row.
"""

import asyncio
import base64
import binascii
import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.config import settings
from travelmart.models.user import Driver, Staff
from travelmart.models.vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSlot:
    key: str
    bucket: str
    filename: str
    model: type | None = None
    field: str | None = None


IMAGE_SLOTS = (
    ImageSlot("selfie", "selfies", "selfie", Driver, "selfie_url"),
    ImageSlot("ktpImage", "driver_documents", "ktp", Driver, "ktp_url"),
    ImageSlot("simImage", "driver_documents", "sim", Driver, "sim_url"),
    ImageSlot("idCardImage", "staff_documents", "idcard", Staff, "id_card_url"),
    ImageSlot("kkImage", "driver_documents", "kk", Driver, "kk_url"),
    ImageSlot("stnkImage", "driver_documents", "stnk", Driver, "stnk_url"),
    ImageSlot("skckImage", "driver_documents", "skck", Driver, "skck_url"),
    ImageSlot("front", "vehicles", "front", Vehicle, "front_image_url"),
    ImageSlot("back", "vehicles", "back", Vehicle, "back_image_url"),
    ImageSlot("side", "vehicles", "side", Vehicle, "side_image_url"),
    ImageSlot("interior", "vehicles", "interior", Vehicle, "interior_image_url"),
    ImageSlot("bpkb", "vehicles", "bpkb", Vehicle, "bpkb_url"),
)


def decode_data_url(value: str) -> bytes:
    """Decode a base64 `data:` URL. Raises ValueError when it is not one."""
    if not value.startswith("data:") or "," not in value:
        raise ValueError("Not a data URL")
    header, payload = value.split(",", 1)
    if ";base64" not in header:
        raise ValueError("Only base64 data URLs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def result_key(slot_key: str) -> str:
    return slot_key.replace("Image", "")


class DocumentService:
    """Stores uploaded images and links them to their owner."""

    def __init__(self, storage_dir: str | None = None):
        self.storage_dir = Path(storage_dir or settings.storage_dir)

    async def _write(self, bucket: str, name: str, content: bytes) -> str:
        folder = self.storage_dir / bucket
        await asyncio.to_thread(folder.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread((folder / name).write_bytes, content)
        return f"{settings.public_storage_url.rstrip('/')}/{bucket}/{name}"

    async def upload(
        self,
        db: AsyncSession,
        images: dict[str, str],
        user_id: uuid.UUID | None = None,
        vehicle_id: uuid.UUID | None = None,
    ) -> dict[str, str]:
        """Store every valid image and return public URLs keyed by document name.

        A failure on one image is logged and does not stop the others.
        """
        if user_id is None and vehicle_id is None:
            raise ValueError("User ID is required")

        uploaded: dict[str, str] = {}
        for slot in IMAGE_SLOTS:
            data = images.get(slot.key)
            if not data or not isinstance(data, str) or not data.startswith("data:"):
                continue

            owner_id = vehicle_id if slot.model is Vehicle else user_id
            if owner_id is None:
                logger.warning(f"No owner for {slot.key} upload, skipped")
                continue

            try:
                content = decode_data_url(data)
                name = f"{slot.filename}_{owner_id}_{int(time.time() * 1000)}.jpg"
                url = await self._write(slot.bucket, name, content)
            except (ValueError, OSError) as e:
                logger.error(f"Error uploading {slot.key}: {e}")
                continue

            uploaded[result_key(slot.key)] = url

            if slot.model is not None:
                row = await db.get(slot.model, owner_id)
                if row is None:
                    logger.warning(f"No {slot.model.__tablename__} row for {owner_id}, {slot.field} not updated")
                else:
                    setattr(row, slot.field, url)

        await db.commit()
        logger.info(f"Stored {len(uploaded)} document(s) for {user_id or vehicle_id}")
        return uploaded


document_service = DocumentService()
