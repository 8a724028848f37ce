"""
Day itinerary routes: composite days with locations, photos and expenses.
"""
from fastapi import APIRouter, Depends, status
from typing import List
from tripplanner.db.store import TripStore
from tripplanner.models.user import User
from tripplanner.schemas.itinerary import (
    DayItineraryCreate, DayItineraryUpdate, DayItineraryResponse, DayWithChildren
)
from tripplanner.services.relation_loader import RelationLoader
from tripplanner.services.storage_service import LocalObjectStorage, TRIP_PHOTOS_BUCKET
from tripplanner.api.dependencies import get_current_user, get_store, get_storage
from tripplanner.api.routes.trips import check_trip_access, check_day_access

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


def with_photo_urls(day: DayWithChildren, storage: LocalObjectStorage) -> DayWithChildren:
    photos = [
        photo.model_copy(update={"url": storage.public_url(TRIP_PHOTOS_BUCKET, photo.file_path)})
        for photo in day.photos
    ]
    return day.model_copy(update={"photos": photos})


@router.get("/trip/{trip_id}", response_model=List[DayWithChildren])
async def get_day_itineraries(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """All stored days of a trip with their children and totals."""
    check_trip_access(trip_id, current_user.id, store)
    days = RelationLoader(store).load_trip_days(trip_id)
    return [with_photo_urls(day, storage) for day in days]


@router.post("", response_model=DayItineraryResponse, status_code=status.HTTP_201_CREATED)
async def create_day_itinerary(
    data: DayItineraryCreate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Create the day for a date, or return the one that already exists."""
    check_trip_access(data.trip_id, current_user.id, store)
    return RelationLoader(store).get_or_create_day(data.trip_id, data.date, data.notes)


@router.get("/{day_id}", response_model=DayWithChildren)
async def get_day_itinerary(
    day_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """One day with its locations, photos, expenses and total."""
    check_day_access(day_id, current_user.id, store)
    return with_photo_urls(RelationLoader(store).load_day(day_id), storage)


@router.put("/{day_id}", response_model=DayItineraryResponse)
async def update_day_itinerary(
    day_id: int,
    updates: DayItineraryUpdate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Update day notes."""
    day = check_day_access(day_id, current_user.id, store)
    day.notes = updates.notes
    return store.save(day)
