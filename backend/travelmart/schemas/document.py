import uuid

from pydantic import BaseModel, Field


class DocumentUploadRequest(BaseModel):
    """Images are `data:` URLs; keys follow the registration form field names."""

    user_id: uuid.UUID | None = Field(default=None, alias="userId")
    vehicle_id: uuid.UUID | None = Field(default=None, alias="vehicleId")
    selfie: str | None = None
    ktpImage: str | None = None
    simImage: str | None = None
    idCardImage: str | None = None
    kkImage: str | None = None
    stnkImage: str | None = None
    skckImage: str | None = None
    front: str | None = None
    back: str | None = None
    side: str | None = None
    interior: str | None = None
    bpkb: str | None = None

    model_config = {"populate_by_name": True}

    def images(self) -> dict[str, str]:
        return {
            k: v for k, v in self.model_dump(exclude={"user_id", "vehicle_id"}).items() if v
        }
