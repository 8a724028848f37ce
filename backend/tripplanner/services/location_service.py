"""
Location service: stops within a day, ordered by order_index.
"""
import logging
from typing import List, Optional

from tripplanner.core.errors import StorageError, TripValidationError
from tripplanner.db.store import TripStore
from tripplanner.models.location import Location
from tripplanner.schemas.location import LocationCreate, LocationOrder, LocationUpdate
from tripplanner.services.relation_loader import RelationLoader
from tripplanner.services.storage_service import (
    LocalObjectStorage, TRIP_PHOTOS_BUCKET, timestamped_name, validate_image
)

logger = logging.getLogger(__name__)


class LocationService:

    def __init__(self, store: TripStore, storage: Optional[LocalObjectStorage] = None):
        self.store = store
        self.storage = storage or LocalObjectStorage()
        self.loader = RelationLoader(store)

    def list_locations(self, day_id: int) -> List[Location]:
        return self.store.locations_for_days([day_id])

    def create_location(self, data: LocationCreate) -> Location:
        """Add a location; without an order_index it goes after the day's last one."""
        if data.day_itinerary_id is not None:
            day_id = self.store.get_day(data.day_itinerary_id).id
        elif data.trip_id is not None and data.date is not None:
            day_id = self.loader.get_or_create_day(data.trip_id, data.date).id
        else:
            raise TripValidationError("Either day_itinerary_id or trip_id and date are required")

        order_index = data.order_index
        if order_index is None:
            current_max = self.store.max_order_index(day_id)
            order_index = 0 if current_max is None else current_max + 1

        fields = data.model_dump(exclude={"day_itinerary_id", "trip_id", "date", "order_index"})
        location = Location(day_itinerary_id=day_id, order_index=order_index, **fields)
        self.store.save(location)
        logger.info(f"Created location {location.id} on day {day_id}")
        return location

    def update_location(self, location: Location, changes: LocationUpdate) -> Location:
        for field, value in changes.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "type", "order_index"):
                continue
            setattr(location, field, value)
        return self.store.save(location)

    def set_photo(self, location: Location, owner_id: int, filename: str, content_type: str, content: bytes) -> Location:
        """Replace the location photo; the old object is removed on a best-effort basis."""
        validate_image(content_type, len(content))
        path = f"{owner_id}/locations/{timestamped_name(filename)}"
        old_path = self.storage.path_from_url(TRIP_PHOTOS_BUCKET, location.photo_url)
        if old_path and old_path != path:
            try:
                self.storage.remove(TRIP_PHOTOS_BUCKET, [old_path])
            except StorageError as e:
                # the new photo is still uploaded
                logger.error(f"Failed to delete old photo {old_path}: {e}")

        self.storage.upload(TRIP_PHOTOS_BUCKET, path, content)
        location.photo_url = self.storage.public_url(TRIP_PHOTOS_BUCKET, path)
        return self.store.save(location)

    def delete_location(self, location: Location):
        # remaining order_index values keep their gaps
        self.store.delete(location)

    def reorder(self, day_id: int, items: List[LocationOrder]) -> List[Location]:
        """Apply new order_index values to locations of one day."""
        by_id = {location.id: location for location in self.store.locations_for_days([day_id])}
        unknown = [item.id for item in items if item.id not in by_id]
        if unknown:
            raise TripValidationError(f"Locations {unknown} do not belong to day {day_id}")
        for item in items:
            by_id[item.id].order_index = item.order_index
        self.store.commit()
        return self.store.locations_for_days([day_id])
