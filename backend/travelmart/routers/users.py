import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.dependencies import get_current_user
from travelmart.models.user import User
from travelmart.schemas.auth import MetadataRequest, UpdateProfileRequest, UserResponse

router = APIRouter()


async def _metadata_target(user_id: uuid.UUID, caller: User, db: AsyncSession) -> User:
    if caller.id != user_id and not caller.is_admin:
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    target = caller if caller.id == user_id else await db.get(User, user_id)
    if target is None:
        raise HTTPException(status_code=404, detail="User not found")
    return target


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    req: UpdateProfileRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    for field, value in req.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return UserResponse.model_validate(user)


@router.get("/{user_id}/metadata")
async def get_user_metadata(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    target = await _metadata_target(user_id, user, db)
    return {"user_id": str(target.id), "metadata": target.user_metadata or {}}


@router.put("/{user_id}/metadata")
async def update_user_metadata(
    user_id: uuid.UUID,
    req: MetadataRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Replace the stored metadata of a user (admins, or the user themselves)."""
    target = await _metadata_target(user_id, user, db)
    target.user_metadata = dict(req.metadata)
    await db.commit()
    return {"user_id": str(target.id), "metadata": target.user_metadata}
