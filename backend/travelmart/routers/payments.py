import uuid

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.dependencies import get_current_user, get_optional_user
from travelmart.models.payment import Payment
from travelmart.models.user import ADMIN_ROLES, STAFF_ROLES, User
from travelmart.models.vehicle import CarBooking
from travelmart.schemas.payment import DamageResponse, PaymentResponse, ProcessPaymentRequest
from travelmart.services.export_service import export_service
from travelmart.services.payment_service import payment_service

router = APIRouter()


def _check_access(payment: Payment, user: User | None):
    """Guest payments are readable by id; member payments only by their owner or staff."""
    if payment.user_id is None:
        return
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if user.id != payment.user_id and user.role_name not in (*ADMIN_ROLES, *STAFF_ROLES):
        raise HTTPException(status_code=403, detail="Insufficient permissions")


async def _get_payable_booking(booking_id: uuid.UUID, user: User, db: AsyncSession) -> CarBooking:
    """Rental the caller may pay for or inspect: their own, or any for staff."""
    booking = await db.get(CarBooking, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail=f"Booking with ID {booking_id} not found")
    if booking.user_id != user.id and user.role_name not in (*ADMIN_ROLES, *STAFF_ROLES):
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return booking


@router.post("/process")
async def process_payment(
    req: ProcessPaymentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await _get_payable_booking(req.booking_id, user, db)
    try:
        result = await payment_service.process_payment(
            db,
            user_id=user.id,
            booking_id=req.booking_id,
            amount=req.amount,
            payment_method=req.payment_method,
            transaction_id=req.transaction_id,
            bank_name=req.bank_name,
            is_partial_payment=req.is_partial_payment,
            is_damage_payment=req.is_damage_payment,
            damage_ids=req.damage_ids,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

    booking = result["booking"]
    return {
        "success": True,
        "payment": PaymentResponse.model_validate(result["payment"]),
        "total_paid": float(result["total_paid"]),
        "booking_payment_status": booking.payment_status if booking else None,
    }


@router.get("/bookings/{booking_id}/damages", response_model=list[DamageResponse])
async def list_unpaid_damages(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await _get_payable_booking(booking_id, user, db)
    damages = await payment_service.unpaid_damages(db, booking_id)
    return [DamageResponse.model_validate(d) for d in damages]


@router.get("/{payment_id}")
async def get_payment(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    """Receipt: the payment and every booking it paid for."""
    receipt = await payment_service.get_receipt(db, payment_id)
    if receipt is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    _check_access(receipt["payment"], user)
    return {
        "payment": PaymentResponse.model_validate(receipt["payment"]),
        "bookings": receipt["bookings"],
    }


@router.get("/{payment_id}/invoice")
async def download_invoice(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    payment = await db.get(Payment, payment_id)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    _check_access(payment, user)

    pdf_bytes = await export_service.generate_invoice_pdf(db, payment_id)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice-{payment_id}.pdf"'},
    )
