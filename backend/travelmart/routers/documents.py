from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.dependencies import get_current_user
from travelmart.models.user import ADMIN_ROLES, STAFF_ROLES, User
from travelmart.schemas.document import DocumentUploadRequest
from travelmart.services.document_service import document_service

router = APIRouter()


@router.post("")
async def upload_documents(
    req: DocumentUploadRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Store registration and vehicle images; returns their public URLs."""
    is_staff = user.role_name in (*ADMIN_ROLES, *STAFF_ROLES)
    if req.user_id is None and req.vehicle_id is None:
        raise HTTPException(status_code=400, detail="User ID is required")
    if req.user_id is not None and req.user_id != user.id and not is_staff:
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    if req.vehicle_id is not None and not is_staff:
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    return await document_service.upload(
        db, req.images(), user_id=req.user_id, vehicle_id=req.vehicle_id
    )
