import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.dependencies import require_admin, require_staff
from travelmart.models.user import User
from travelmart.schemas.admin import (
    AssignRoleRequest,
    CreateStaffRequest,
    RoleResponse,
    StaffResponse,
    UpdateStaffRequest,
)
from travelmart.schemas.auth import UserResponse
from travelmart.schemas.booking import (
    AirportTransferResponse,
    BaggagePrices,
    CreateHandlingBookingRequest,
    HandlingBookingResponse,
    StatusUpdateRequest,
)
from travelmart.services.admin_service import admin_service
from travelmart.services.pricing_service import pricing_service
from travelmart.services.staff_service import staff_service

router = APIRouter()


# ─── Pricing ───


@router.put("/baggage-prices", response_model=BaggagePrices)
async def update_baggage_prices(
    req: BaggagePrices,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    try:
        prices = await pricing_service.update_prices(db, req.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BaggagePrices(**{k: float(v) for k, v in prices.items()})


# ─── Staff & roles ───


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    return [RoleResponse.model_validate(r) for r in await staff_service.list_roles(db)]


@router.post("/roles/assign", response_model=UserResponse)
async def assign_role(
    req: AssignRoleRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    try:
        target = await staff_service.assign_role(db, req.user_id, req.role_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return UserResponse.model_validate(target)


@router.get("/staff", response_model=list[StaffResponse])
async def list_staff(
    search: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    return await staff_service.list_staff(db, search=search)


@router.post("/staff", status_code=201, response_model=StaffResponse)
async def create_staff(
    req: CreateStaffRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    try:
        return await staff_service.create_staff(
            db,
            email=req.email,
            password=req.password,
            full_name=req.full_name,
            role_id=req.role_id,
            phone=req.phone,
            department=req.department,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/staff/{user_id}", response_model=StaffResponse)
async def update_staff(
    user_id: uuid.UUID,
    req: UpdateStaffRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    try:
        return await staff_service.update_staff(db, user_id, req.model_dump(exclude_unset=True))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/staff/{user_id}", status_code=204)
async def delete_staff(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Deactivate a staff account; history stays linked to it."""
    if user_id == user.id:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    if not await staff_service.deactivate_staff(db, user_id):
        raise HTTPException(status_code=404, detail="Staff member not found")


# ─── Airport transfers ───


@router.get("/airport-transfers", response_model=list[AirportTransferResponse])
async def list_airport_transfers(
    search: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    transfers = await admin_service.list_transfers(db, search=search)
    return [AirportTransferResponse.model_validate(t) for t in transfers]


@router.patch("/airport-transfers/{transfer_id}/status", response_model=AirportTransferResponse)
async def update_transfer_status(
    transfer_id: int,
    req: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    try:
        transfer = await admin_service.update_transfer_status(db, transfer_id, req.status)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AirportTransferResponse.model_validate(transfer)


# ─── Handling bookings ───


@router.post("/handling-bookings", status_code=201, response_model=HandlingBookingResponse)
async def create_handling_booking(
    req: CreateHandlingBookingRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    booking = await admin_service.create_handling(db, req.model_dump())
    return HandlingBookingResponse.model_validate(booking)


@router.get("/handling-bookings", response_model=list[HandlingBookingResponse])
async def list_handling_bookings(
    search: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    bookings = await admin_service.list_handling(db, search=search)
    return [HandlingBookingResponse.model_validate(b) for b in bookings]


@router.get("/handling-bookings/{booking_id}", response_model=HandlingBookingResponse)
async def get_handling_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    booking = await admin_service.get_handling(db, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Handling booking not found")
    return HandlingBookingResponse.model_validate(booking)


@router.patch("/handling-bookings/{booking_id}/status", response_model=HandlingBookingResponse)
async def update_handling_status(
    booking_id: uuid.UUID,
    req: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    try:
        booking = await admin_service.update_handling_status(db, booking_id, req.status)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return HandlingBookingResponse.model_validate(booking)


@router.delete("/handling-bookings/{booking_id}", status_code=204)
async def delete_handling_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    if not await admin_service.delete_handling(db, booking_id):
        raise HTTPException(status_code=404, detail="Handling booking not found")


# ─── Dashboard ───


@router.get("/dashboard")
async def dashboard(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_staff),
):
    return await admin_service.dashboard(db)
