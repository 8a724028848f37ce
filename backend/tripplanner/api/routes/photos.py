"""
Photo routes for trip, day and location pictures.
"""
from fastapi import APIRouter, Depends, status, UploadFile, File, Form
from typing import List, Optional
from datetime import date
from tripplanner.db.store import TripStore
from tripplanner.models.user import User
from tripplanner.models.photo import PhotoType
from tripplanner.schemas.photo import PhotoResponse
from tripplanner.services.photo_service import PhotoService
from tripplanner.services.storage_service import LocalObjectStorage
from tripplanner.api.dependencies import get_current_user, get_store, get_storage
from tripplanner.api.routes.trips import check_trip_access

router = APIRouter(prefix="/photos", tags=["photos"])


@router.get("/trip/{trip_id}", response_model=List[PhotoResponse])
async def get_photos(
    trip_id: int,
    day_id: Optional[int] = None,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Photos of a trip, optionally of one day, newest first."""
    check_trip_access(trip_id, current_user.id, store)
    service = PhotoService(store, storage)
    return [service.to_response(p) for p in service.list_photos(trip_id, day_id)]


@router.post("/trip/{trip_id}", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
async def upload_photo(
    trip_id: int,
    file: UploadFile = File(...),
    day_itinerary_id: Optional[int] = Form(None),
    day_date: Optional[date] = Form(None, alias="date"),
    location_id: Optional[int] = Form(None),
    caption: Optional[str] = Form(None),
    photo_type: PhotoType = Form(PhotoType.GENERAL),
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Upload a photo to a trip, a day (by id or date) or a location."""
    check_trip_access(trip_id, current_user.id, store)
    service = PhotoService(store, storage)
    content = await file.read()
    photo = service.upload_photo(
        trip_id,
        current_user.id,
        file.filename,
        file.content_type,
        content,
        day_id=day_itinerary_id,
        day_date=day_date,
        location_id=location_id,
        caption=caption,
        photo_type=photo_type,
    )
    return service.to_response(photo)


@router.delete("/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_photo(
    photo_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Delete a photo and its stored file."""
    photo = store.get_photo(photo_id)
    check_trip_access(photo.trip_id, current_user.id, store)
    PhotoService(store, storage).delete_photo(photo)
