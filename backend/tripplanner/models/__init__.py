"""Models package - Import all models for SQLAlchemy registration."""
from tripplanner.models.user import User
from tripplanner.models.trip import Trip, TripStatus
from tripplanner.models.itinerary import DayItinerary
from tripplanner.models.location import Location, LocationType
from tripplanner.models.photo import Photo, PhotoType
from tripplanner.models.expense import Expense, ExpenseCategory

__all__ = [
    "User",
    "Trip",
    "TripStatus",
    "DayItinerary",
    "Location",
    "LocationType",
    "Photo",
    "PhotoType",
    "Expense",
    "ExpenseCategory",
]
