"""
Trip management routes.
"""
from decimal import Decimal
from fastapi import APIRouter, Depends, status, UploadFile, File
from typing import List
from tripplanner.core.errors import NotFoundError
from tripplanner.db.store import TripStore
from tripplanner.models.user import User
from tripplanner.models.trip import Trip
from tripplanner.models.itinerary import DayItinerary
from tripplanner.schemas.trip import (
    TripCreate, TripUpdate, TripResponse, TripDaysResponse, TripStatusResponse
)
from tripplanner.services.trip_service import TripService
from tripplanner.services.storage_service import LocalObjectStorage
from tripplanner.api.dependencies import get_current_user, get_store, get_storage

router = APIRouter(prefix="/trips", tags=["trips"])


def check_trip_access(trip_id: int, user_id: int, store: TripStore) -> Trip:
    """Return the trip if the user owns it; other users' trips look missing."""
    trip = store.get_trip(trip_id)
    if trip.user_id != user_id:
        raise NotFoundError("Trip", trip_id)
    return trip


def check_day_access(day_id: int, user_id: int, store: TripStore) -> DayItinerary:
    """Return the day if the user owns its trip."""
    day = store.get_day(day_id)
    check_trip_access(day.trip_id, user_id, store)
    return day


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Create a new trip."""
    service = TripService(store, storage)
    trip = service.create_trip(current_user.id, trip_data)
    return service.to_response(trip, total=Decimal("0.00"))


@router.get("", response_model=List[TripResponse])
async def list_trips(
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """List the current user's trips with their expense totals."""
    return TripService(store).list_trips(current_user.id)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Get trip details with its expense total."""
    trip = check_trip_access(trip_id, current_user.id, store)
    return TripService(store).to_response(trip)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: int,
    changes: TripUpdate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Update a trip; changed dates are re-validated."""
    trip = check_trip_access(trip_id, current_user.id, store)
    service = TripService(store)
    trip = service.update_trip(trip, changes)
    return service.to_response(trip)


@router.put("/{trip_id}/cover", response_model=TripResponse)
async def upload_cover_image(
    trip_id: int,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Upload or replace the trip cover image."""
    trip = check_trip_access(trip_id, current_user.id, store)
    service = TripService(store, storage)
    content = await file.read()
    trip = service.set_cover_image(trip, file.filename, file.content_type, content)
    return service.to_response(trip)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Delete a trip with all its days, locations, photos and expenses."""
    trip = check_trip_access(trip_id, current_user.id, store)
    TripService(store, storage).delete_trip(trip)


@router.get("/{trip_id}/days", response_model=TripDaysResponse)
async def get_trip_days(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Calendar days of the trip (at most 90) with stored itineraries attached."""
    trip = check_trip_access(trip_id, current_user.id, store)
    return TripService(store).trip_days(trip)


@router.get("/{trip_id}/status", response_model=TripStatusResponse)
async def get_trip_status(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Get current trip status, updated from today's date."""
    trip = check_trip_access(trip_id, current_user.id, store)
    return {"status": TripService(store).refresh_status(trip)}

