"""
Places search routes.
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from tripplanner.models.user import User
from tripplanner.schemas.place import PlaceResult
from tripplanner.services.places_service import PlacesClient
from tripplanner.api.dependencies import get_current_user, get_places_client

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/search", response_model=List[PlaceResult])
async def search_places(
    q: str = Query(..., min_length=1),
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    current_user: User = Depends(get_current_user),
    client: PlacesClient = Depends(get_places_client)
):
    """Free-text place search."""
    return client.search_places(q, lat, lng)


@router.get("/{place_id}", response_model=PlaceResult)
async def get_place_details(
    place_id: str,
    current_user: User = Depends(get_current_user),
    client: PlacesClient = Depends(get_places_client)
):
    """Place details by id."""
    return client.get_place_details(place_id)
