from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.database import get_db
from travelmart.schemas.booking import BaggagePrices, BaggageQuoteRequest, BaggageQuoteResponse
from travelmart.services.pricing_service import pricing_service

router = APIRouter()


@router.get("/prices", response_model=BaggagePrices)
async def get_baggage_prices(db: AsyncSession = Depends(get_db)):
    prices = await pricing_service.get_prices(db)
    # Persist the default row if this read created it
    await db.commit()
    return BaggagePrices(**{k: float(v) for k, v in prices.items()})


@router.post("/quote", response_model=BaggageQuoteResponse)
async def quote_baggage(req: BaggageQuoteRequest, db: AsyncSession = Depends(get_db)):
    try:
        quote = await pricing_service.quote(
            db,
            baggage_size=req.baggage_size,
            duration_type=req.duration_type,
            hours=req.hours,
            start_date=req.start_date,
            end_date=req.end_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await db.commit()
    return BaggageQuoteResponse(
        baggage_size=quote["baggage_size"],
        duration_type=quote["duration_type"],
        units=quote["units"],
        unit_price=float(quote["unit_price"]),
        total_price=float(quote["total_price"]),
    )
