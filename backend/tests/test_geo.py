import httpx
import pytest

from travelmart.config import settings
from travelmart.services.geo_service import geo_service, haversine_km, straight_line_route

AIRPORT = (-8.7482, 115.1670)
UBUD = (-8.5069, 115.2625)


def _mock(monkeypatch, handler):
    monkeypatch.setattr(geo_service, "_client", httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_haversine_known_distance():
    # Jakarta to Surabaya is roughly 660 km as the crow flies
    assert haversine_km(-6.2088, 106.8456, -7.2575, 112.7521) == pytest.approx(663, abs=10)
    assert haversine_km(*AIRPORT, *AIRPORT) == 0


def test_straight_line_route_estimates_duration():
    route = straight_line_route(*AIRPORT, *UBUD)
    assert route["is_fallback"] is True
    assert route["coordinates"] == [list(AIRPORT), list(UBUD)]
    assert route["duration_min"] == pytest.approx(route["distance_km"] / 40 * 60, abs=0.1)


async def test_route_flips_geojson_coordinates(client, monkeypatch):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={
            "code": "Ok",
            "routes": [{
                "distance": 38412.7,
                "duration": 3540,
                "geometry": {"type": "LineString", "coordinates": [[115.167, -8.748], [115.21, -8.62], [115.2625, -8.5069]]},
            }],
        })

    _mock(monkeypatch, handler)
    resp = await client.get("/api/geo/route", params={
        "from_lat": AIRPORT[0], "from_lng": AIRPORT[1], "to_lat": UBUD[0], "to_lng": UBUD[1],
    })
    route = resp.json()
    assert route["distance_km"] == 38.41
    assert route["duration_min"] == 59.0
    assert route["coordinates"][0] == [-8.748, 115.167]
    assert route["is_fallback"] is False

    assert seen[0].path == "/route/v1/driving/115.167,-8.7482;115.2625,-8.5069"
    assert seen[0].params["geometries"] == "geojson"


async def test_route_without_result_falls_back(monkeypatch):
    _mock(monkeypatch, lambda request: httpx.Response(200, json={"code": "NoRoute", "routes": []}))
    route = await geo_service.get_route(*AIRPORT, *UBUD)
    assert route["is_fallback"] is True
    assert route["distance_km"] > 0


async def test_route_server_error_falls_back(monkeypatch):
    _mock(monkeypatch, lambda request: httpx.Response(500))
    route = await geo_service.get_route(*AIRPORT, *UBUD)
    assert route == straight_line_route(*AIRPORT, *UBUD)


async def test_route_rejects_out_of_range_coordinates(client):
    resp = await client.get("/api/geo/route", params={"from_lat": 95, "from_lng": 0, "to_lat": 0, "to_lng": 0})
    assert resp.status_code == 422


async def test_autocomplete_needs_query_and_key(client, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    _mock(monkeypatch, handler)
    assert (await client.get("/api/geo/autocomplete", params={"q": "  "})).json() == {"predictions": []}
    assert (await client.get("/api/geo/autocomplete", params={"q": "Ubud"})).json() == {"predictions": []}


async def test_autocomplete_maps_predictions(client, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["input"] == "Ubud"
        assert request.url.params["key"] == "maps-test-key"
        return httpx.Response(200, json={
            "status": "OK",
            "predictions": [{
                "place_id": "ChIJubud",
                "description": "Ubud, Gianyar Regency, Bali, Indonesia",
                "structured_formatting": {"main_text": "Ubud", "secondary_text": "Gianyar Regency, Bali"},
            }],
        })

    monkeypatch.setattr(settings, "google_maps_api_key", "maps-test-key")
    _mock(monkeypatch, handler)
    predictions = (await client.get("/api/geo/autocomplete", params={"q": "Ubud"})).json()["predictions"]
    assert predictions == [{
        "place_id": "ChIJubud",
        "description": "Ubud, Gianyar Regency, Bali, Indonesia",
        "main_text": "Ubud",
        "secondary_text": "Gianyar Regency, Bali",
    }]


async def test_autocomplete_denied_request_is_empty(monkeypatch):
    monkeypatch.setattr(settings, "google_maps_api_key", "maps-test-key")
    _mock(monkeypatch, lambda request: httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"}))
    assert await geo_service.autocomplete("Kuta") == []


async def test_place_details(client, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["place_id"] == "missing":
            return httpx.Response(200, json={"status": "NOT_FOUND"})
        return httpx.Response(200, json={
            "status": "OK",
            "result": {
                "name": "I Gusti Ngurah Rai International Airport",
                "formatted_address": "Jl. Raya Gusti Ngurah Rai, Tuban, Kuta, Bali",
                "geometry": {"location": {"lat": -8.7482, "lng": 115.167}},
            },
        })

    monkeypatch.setattr(settings, "google_maps_api_key", "maps-test-key")
    _mock(monkeypatch, handler)

    place = (await client.get("/api/geo/place/ChIJdps")).json()
    assert place["lat"] == -8.7482
    assert place["address"].endswith("Bali")
    assert (await client.get("/api/geo/place/missing")).status_code == 404
