"""
Photo service: uploads to object storage plus photo rows.
"""
import logging
from datetime import date
from typing import List, Optional

from tripplanner.core.errors import TripValidationError
from tripplanner.db.store import TripStore
from tripplanner.models.photo import Photo, PhotoType
from tripplanner.schemas.photo import PhotoResponse
from tripplanner.services.relation_loader import RelationLoader
from tripplanner.services.storage_service import (
    LocalObjectStorage, TRIP_PHOTOS_BUCKET, timestamped_name, validate_image
)

logger = logging.getLogger(__name__)


class PhotoService:

    def __init__(self, store: TripStore, storage: Optional[LocalObjectStorage] = None):
        self.store = store
        self.storage = storage or LocalObjectStorage()

    def to_response(self, photo: Photo) -> PhotoResponse:
        response = PhotoResponse.model_validate(photo)
        return response.model_copy(update={"url": self.photo_url(photo.file_path)})

    def list_photos(self, trip_id: int, day_id: Optional[int] = None) -> List[Photo]:
        """Newest first."""
        return self.store.photos_for_trip(trip_id, day_id)

    def upload_photo(
        self,
        trip_id: int,
        owner_id: int,
        filename: str,
        content_type: str,
        content: bytes,
        day_id: Optional[int] = None,
        day_date: Optional[date] = None,
        location_id: Optional[int] = None,
        caption: Optional[str] = None,
        photo_type: PhotoType = PhotoType.GENERAL,
    ) -> Photo:
        """
        Store the file and its photo row.

        The day is given by id or by date (created on first use); everything
        is validated before the day, the object or the row is written.
        """
        validate_image(content_type, len(content))
        if day_id is not None and self.store.get_day(day_id).trip_id != trip_id:
            raise TripValidationError("Day does not belong to this trip")
        if location_id is not None:
            self._check_location(location_id, trip_id, day_id, day_date)
        if day_id is None and day_date is not None:
            day_id = RelationLoader(self.store).get_or_create_day(trip_id, day_date).id

        path = f"{owner_id}/{trip_id}/{timestamped_name(filename)}"
        self.storage.upload(TRIP_PHOTOS_BUCKET, path, content)

        photo = Photo(
            trip_id=trip_id,
            day_itinerary_id=day_id,
            location_id=location_id,
            file_path=path,
            file_name=filename,
            file_size=len(content),
            mime_type=content_type,
            caption=caption,
            photo_type=photo_type,
        )
        self.store.save(photo)
        logger.info(f"Uploaded photo {photo.id} for trip {trip_id}")
        return photo

    def _check_location(self, location_id: int, trip_id: int, day_id: Optional[int], day_date: Optional[date]):
        location = self.store.get_location(location_id)
        day = self.store.get_day(location.day_itinerary_id)
        if day.trip_id != trip_id:
            raise TripValidationError("Location does not belong to this trip")
        if (day_id is not None and day.id != day_id) or (day_date is not None and day.date != day_date):
            raise TripValidationError("Location does not belong to this day")

    def delete_photo(self, photo: Photo):
        """Remove the stored object first, then the row."""
        self.storage.remove(TRIP_PHOTOS_BUCKET, [photo.file_path])
        self.store.delete(photo)

    def photo_url(self, file_path: str) -> str:
        return self.storage.public_url(TRIP_PHOTOS_BUCKET, file_path)
