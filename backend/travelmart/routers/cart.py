import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.dependencies import get_current_user
from travelmart.models.user import User
from travelmart.schemas.cart import AddCartItemRequest, CartItemResponse, CartResponse, MergeCartRequest
from travelmart.services.cart_service import cart_service, cart_total

router = APIRouter()


@router.get("", response_model=CartResponse)
async def get_cart(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    items = await cart_service.list_items(db, user.id)
    return CartResponse(
        items=[CartItemResponse.model_validate(i) for i in items],
        total_amount=float(cart_total(items)),
        count=len(items),
    )


@router.post("/items", status_code=201, response_model=CartItemResponse)
async def add_cart_item(
    req: AddCartItemRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        item = await cart_service.add_item(
            db,
            user.id,
            item_type=req.item_type,
            service_name=req.service_name,
            price=req.price,
            item_id=req.item_id,
            details=req.details,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CartItemResponse.model_validate(item)


@router.delete("/items/{item_id}", status_code=204)
async def remove_cart_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not await cart_service.remove_item(db, user.id, item_id):
        raise HTTPException(status_code=404, detail="Cart item not found")


@router.delete("")
async def clear_cart(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    removed = await cart_service.clear(db, user.id)
    return {"removed": removed}


@router.post("/merge")
async def merge_cart(
    req: MergeCartRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Migrate a guest's locally stored cart after sign-in."""
    added, skipped = await cart_service.merge_guest_items(db, user.id, req.items)
    return {"added": added, "skipped": skipped}
