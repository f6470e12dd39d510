import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.dependencies import get_optional_user
from travelmart.models.cart import CartItem
from travelmart.models.payment import PaymentMethod
from travelmart.models.user import User
from travelmart.schemas.cart import AddCartItemRequest, CheckoutBooking, CheckoutRequest, CheckoutResponse
from travelmart.schemas.payment import PaymentMethodResponse
from travelmart.services.cart_service import normalize_item_id
from travelmart.services.checkout_service import Customer, IdempotencyConflictError, checkout_service

router = APIRouter()


def _guest_item(req: AddCartItemRequest) -> CartItem:
    """Transient cart row for a guest checkout; never added to the session."""
    return CartItem(
        id=uuid.uuid4(),
        item_type=req.item_type,
        item_id=normalize_item_id(req.item_id),
        service_name=req.service_name,
        price=Decimal(str(req.price)),
        details=req.details,
        status="active",
    )


@router.post("", status_code=201, response_model=CheckoutResponse)
async def checkout(
    req: CheckoutRequest,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    guest_items = None
    if user is None:
        guest_items = [_guest_item(i) for i in req.items or []]

    try:
        result = await checkout_service.checkout(
            db,
            user,
            Customer(name=req.customer.name, email=req.customer.email, phone=req.customer.phone),
            payment_method=req.payment_method,
            bank_id=req.bank_id,
            idempotency_key=req.idempotency_key,
            guest_items=guest_items,
        )
    except IdempotencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        # CheckoutError and pricing errors (unknown baggage size, bad duration)
        raise HTTPException(status_code=400, detail=str(e))

    payment = result.payment
    return CheckoutResponse(
        payment_id=payment.id,
        amount=float(payment.amount),
        status=payment.status,
        payment_method=payment.payment_method,
        bookings=[CheckoutBooking(**b) for b in result.bookings],
        skipped=result.skipped,
        replayed=result.replayed,
    )


@router.get("/payment-methods", response_model=list[PaymentMethodResponse])
async def list_payment_methods(
    type: str = Query("manual"),
    db: AsyncSession = Depends(get_db),
):
    """Bank accounts customers can transfer to."""
    result = await db.execute(
        select(PaymentMethod)
        .where(PaymentMethod.type == type, PaymentMethod.is_active == True)
        .order_by(PaymentMethod.id)
    )
    return [PaymentMethodResponse.model_validate(m) for m in result.scalars().all()]
