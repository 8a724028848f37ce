"""
Location routes.
"""
from fastapi import APIRouter, Depends, status, UploadFile, File
from typing import List
from tripplanner.db.store import TripStore
from tripplanner.models.user import User
from tripplanner.models.location import Location
from tripplanner.schemas.location import LocationCreate, LocationUpdate, LocationResponse, LocationReorder
from tripplanner.services.location_service import LocationService
from tripplanner.services.storage_service import LocalObjectStorage
from tripplanner.api.dependencies import get_current_user, get_store, get_storage
from tripplanner.api.routes.trips import check_trip_access, check_day_access

router = APIRouter(prefix="/locations", tags=["locations"])


def check_location_access(location_id: int, user_id: int, store: TripStore) -> Location:
    location = store.get_location(location_id)
    check_day_access(location.day_itinerary_id, user_id, store)
    return location


@router.get("/day/{day_id}", response_model=List[LocationResponse])
async def get_locations_by_day(
    day_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Locations of a day in display order."""
    check_day_access(day_id, current_user.id, store)
    return LocationService(store).list_locations(day_id)


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    data: LocationCreate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Add a location to a day (the day is created if the trip has none for that date)."""
    if data.day_itinerary_id is not None:
        check_day_access(data.day_itinerary_id, current_user.id, store)
    elif data.trip_id is not None:
        check_trip_access(data.trip_id, current_user.id, store)
    return LocationService(store).create_location(data)


@router.put("/day/{day_id}/order", response_model=List[LocationResponse])
async def reorder_locations(
    day_id: int,
    data: LocationReorder,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Set order_index for several locations of a day."""
    check_day_access(day_id, current_user.id, store)
    return LocationService(store).reorder(day_id, data.locations)


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: int,
    changes: LocationUpdate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Update a location."""
    location = check_location_access(location_id, current_user.id, store)
    return LocationService(store).update_location(location, changes)


@router.put("/{location_id}/photo", response_model=LocationResponse)
async def upload_location_photo(
    location_id: int,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Upload or replace the location photo."""
    location = check_location_access(location_id, current_user.id, store)
    content = await file.read()
    return LocationService(store, storage).set_photo(
        location, current_user.id, file.filename, file.content_type, content
    )


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    location_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Delete a location; other locations keep their order_index."""
    location = check_location_access(location_id, current_user.id, store)
    LocationService(store).delete_location(location)
