from fastapi import APIRouter, HTTPException, Query

from travelmart.services.geo_service import geo_service

router = APIRouter()


@router.get("/route")
async def get_route(
    from_lat: float = Query(..., ge=-90, le=90),
    from_lng: float = Query(..., ge=-180, le=180),
    to_lat: float = Query(..., ge=-90, le=90),
    to_lng: float = Query(..., ge=-180, le=180),
):
    """Driving route between two points; straight line when no road route exists."""
    return await geo_service.get_route(from_lat, from_lng, to_lat, to_lng)


@router.get("/autocomplete")
async def autocomplete(q: str = Query("")):
    return {"predictions": await geo_service.autocomplete(q)}


@router.get("/place/{place_id}")
async def place_details(place_id: str):
    place = await geo_service.place_details(place_id)
    if place is None:
        raise HTTPException(status_code=404, detail="Place not found")
    return place
