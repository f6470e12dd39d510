import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.dependencies import get_current_user
from travelmart.models.user import ADMIN_ROLES, STAFF_ROLES, User
from travelmart.models.vehicle import CarBooking
from travelmart.schemas.booking import CarBookingResponse, CreateCarBookingRequest, UpdateCarBookingRequest
from travelmart.services.booking_service import booking_service

router = APIRouter()


def _is_staff(user: User) -> bool:
    return user.role_name in (*ADMIN_ROLES, *STAFF_ROLES)


async def _get_own_booking(booking_id: uuid.UUID, user: User, db: AsyncSession) -> CarBooking:
    booking = await db.get(CarBooking, booking_id)
    if booking is None or (booking.user_id != user.id and not _is_staff(user)):
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.get("/vehicles")
async def list_vehicles(
    available_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """Rental catalog grouped by make and model."""
    return await booking_service.list_catalog(db, available_only=available_only)


@router.post("/bookings", status_code=201, response_model=CarBookingResponse)
async def create_booking(
    req: CreateCarBookingRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        booking = await booking_service.create_booking(
            db,
            user.id,
            vehicle_id=req.vehicle_id,
            start_date=req.start_date,
            end_date=req.end_date,
            pickup_time=req.pickup_time,
            with_driver=req.with_driver,
            notes=req.notes,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CarBookingResponse.model_validate(booking)


@router.get("/bookings", response_model=list[CarBookingResponse])
async def list_bookings(
    id: uuid.UUID | None = Query(None),
    vehicle_id: uuid.UUID | None = Query(None),
    status: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    bookings = await booking_service.get_bookings(
        db,
        user_id=None if _is_staff(user) else user.id,
        booking_id=id,
        vehicle_id=vehicle_id,
        status=status,
    )
    return [CarBookingResponse.model_validate(b) for b in bookings]


@router.patch("/bookings/{booking_id}", response_model=CarBookingResponse)
async def update_booking(
    booking_id: uuid.UUID,
    req: UpdateCarBookingRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    booking = await _get_own_booking(booking_id, user, db)
    changes = req.model_dump(exclude_unset=True)
    if changes.get("status") not in (None, "cancelled") and not _is_staff(user):
        raise HTTPException(status_code=403, detail="Only staff can change booking status")

    try:
        booking = await booking_service.update_booking(db, booking, changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CarBookingResponse.model_validate(booking)


@router.delete("/bookings/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    booking = await _get_own_booking(booking_id, user, db)
    try:
        await booking_service.delete_booking(db, booking)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
