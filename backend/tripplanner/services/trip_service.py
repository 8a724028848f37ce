"""
Trip service for trip-related business logic.
"""
import logging
from datetime import date
from typing import List, Optional

from tripplanner.db.store import TripStore
from tripplanner.models.trip import Trip, TripStatus
from tripplanner.schemas.itinerary import DayItineraryResponse
from tripplanner.schemas.trip import TripCreate, TripDaysResponse, TripDayView, TripResponse, TripUpdate
from tripplanner.services.date_range import derive_trip_status, expand_date_range, validate_trip_dates
from tripplanner.services.expense_aggregator import ExpenseAggregator
from tripplanner.services.storage_service import (
    LocalObjectStorage, TRIP_COVERS_BUCKET, timestamped_name, validate_image
)

logger = logging.getLogger(__name__)


class TripService:
    """Trip CRUD with derived totals and cover images."""

    def __init__(self, store: TripStore, storage: Optional[LocalObjectStorage] = None):
        self.store = store
        self.storage = storage or LocalObjectStorage()
        self.aggregator = ExpenseAggregator(store)

    def to_response(self, trip: Trip, total=None) -> TripResponse:
        if total is None:
            total = self.aggregator.trip_total(trip.id)
        response = TripResponse.model_validate(trip)
        return response.model_copy(update={"total_expenses": total})

    def list_trips(self, user_id: int) -> List[TripResponse]:
        """User's trips, newest first, with totals from one batched lookup."""
        trips = self.store.list_trips(user_id)
        if not trips:
            return []
        responses = [TripResponse.model_validate(trip) for trip in trips]
        totals = self.aggregator.trip_totals(r.id for r in responses)
        return [r.model_copy(update={"total_expenses": totals[r.id]}) for r in responses]

    def create_trip(self, user_id: int, data: TripCreate) -> Trip:
        """Create a trip; the initial status follows from its dates."""
        trip = Trip(
            user_id=user_id,
            title=data.title,
            destination=data.destination,
            start_date=data.start_date,
            end_date=data.end_date,
            budget=data.budget,
            status=derive_trip_status(data.start_date, data.end_date),
        )
        self.store.save(trip)
        logger.info(f"Created trip {trip.id} for user {user_id}")
        return trip

    def set_cover_image(self, trip: Trip, filename: str, content_type: str, content: bytes) -> Trip:
        """Upload a cover image to {user_id}/{timestamp}.{ext} and point the trip at it."""
        validate_image(content_type, len(content))
        path = f"{trip.user_id}/{timestamped_name(filename)}"
        self.storage.upload(TRIP_COVERS_BUCKET, path, content)

        old_path = self.storage.path_from_url(TRIP_COVERS_BUCKET, trip.cover_image_url)
        trip.cover_image_url = self.storage.public_url(TRIP_COVERS_BUCKET, path)
        self.store.save(trip)
        if old_path and old_path != path:
            self.storage.remove(TRIP_COVERS_BUCKET, [old_path])
        return trip

    def update_trip(self, trip: Trip, changes: TripUpdate) -> Trip:
        updates = changes.model_dump(exclude_unset=True)
        start = updates.get("start_date") or trip.start_date
        end = updates.get("end_date") or trip.end_date
        if "start_date" in updates or "end_date" in updates:
            validate_trip_dates(start, end)
        for field, value in updates.items():
            if value is None and field in ("title", "destination", "start_date", "end_date", "status"):
                continue
            setattr(trip, field, value)
        return self.store.save(trip)

    def delete_trip(self, trip: Trip):
        cover_path = self.storage.path_from_url(TRIP_COVERS_BUCKET, trip.cover_image_url)
        trip_id = trip.id
        self.store.delete(trip)
        if cover_path:
            self.storage.remove(TRIP_COVERS_BUCKET, [cover_path])
        logger.info(f"Deleted trip {trip_id}")

    def trip_days(self, trip: Trip) -> TripDaysResponse:
        """Calendar days of the trip merged with the stored day itineraries."""
        # truncation is reported through the response's truncated flag
        day_range = expand_date_range(trip.start_date, trip.end_date, warn=False)

        stored = {
            day.date: DayItineraryResponse.model_validate(day)
            for day in self.store.list_days(trip.id)
        }
        return TripDaysResponse(
            trip_id=trip.id,
            total_days=day_range.total_days,
            truncated=day_range.truncated,
            days=[
                TripDayView(
                    day_number=day.day_number,
                    date=day.date,
                    day_itinerary=stored.get(day.date),
                )
                for day in day_range.days
            ],
        )

    def refresh_status(self, trip: Trip, today: Optional[date] = None) -> TripStatus:
        """Status implied by today's date, persisted when it changed."""
        status = derive_trip_status(trip.start_date, trip.end_date, today)
        if trip.status != status:
            trip.status = status
            self.store.save(trip)
        return status
