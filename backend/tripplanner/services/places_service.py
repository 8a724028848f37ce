"""
Places search through the Google Places web service.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from tripplanner.core.config import settings
from tripplanner.core.errors import PlacesError
from tripplanner.schemas.place import PlaceResult

logger = logging.getLogger(__name__)

SEARCH_RADIUS_METERS = 50000
DETAIL_FIELDS = "place_id,name,formatted_address,geometry,photos,types"


def _to_place(data: Dict[str, Any]) -> PlaceResult:
    location = (data.get("geometry") or {}).get("location") or {}
    photos = data.get("photos") or []
    return PlaceResult(
        place_id=data["place_id"],
        name=data.get("name", ""),
        formatted_address=data.get("formatted_address"),
        latitude=location.get("lat"),
        longitude=location.get("lng"),
        types=data.get("types") or [],
        photo_reference=photos[0].get("photo_reference") if photos else None,
    )


class PlacesClient:
    """Text search and place details; the HTTP client can be injected."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        base_url: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.base_url = (base_url or settings.PLACES_API_URL).rstrip("/")
        self.http_client = http_client or httpx.Client(timeout=settings.PLACES_TIMEOUT)

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            logger.error("GOOGLE_MAPS_API_KEY is not configured. Please set it in .env file.")
            raise PlacesError("Places API key is not configured")

        url = f"{self.base_url}/{endpoint}/json"
        try:
            response = self.http_client.get(url, params={**params, "key": self.api_key})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error with Places API: {e.response.status_code}")
            raise PlacesError(f"Places API HTTP error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error with Places API: {e}")
            raise PlacesError(f"Places API network error: {str(e)}") from e

        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            message = data.get("error_message") or status
            logger.error(f"Places API returned error: {message}")
            raise PlacesError(f"Places search failed: {message}")
        return data

    def search_places(self, query: str, lat: Optional[float] = None, lng: Optional[float] = None) -> List[PlaceResult]:
        """Free-text search, biased to a 50 km radius when coordinates are given."""
        params: Dict[str, Any] = {"query": query}
        if lat is not None and lng is not None:
            params["location"] = f"{lat},{lng}"
            params["radius"] = SEARCH_RADIUS_METERS
        logger.info(f"Searching places for '{query}'")
        data = self._get("textsearch", params)
        return [_to_place(item) for item in data.get("results", [])]

    def get_place_details(self, place_id: str) -> PlaceResult:
        data = self._get("details", {"place_id": place_id, "fields": DETAIL_FIELDS})
        result = data.get("result")
        if not result:
            raise PlacesError("Place details not found")
        return _to_place(result)

    def close(self):
        self.http_client.close()
