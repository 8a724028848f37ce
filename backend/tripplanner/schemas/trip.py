"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime
from datetime import date as dt_date
from decimal import Decimal
from tripplanner.core.utils import MAX_MONEY
from tripplanner.models.trip import TripStatus
from tripplanner.schemas.itinerary import DayItineraryResponse
from tripplanner.services.date_range import validate_trip_dates


class TripBase(BaseModel):
    """Base trip schema."""
    title: str = Field(min_length=1, max_length=200)
    destination: str = Field(min_length=1, max_length=200)
    start_date: dt_date
    end_date: dt_date
    budget: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MONEY)


class TripCreate(TripBase):
    """Schema for trip creation."""

    @model_validator(mode="after")
    def check_dates(self):
        validate_trip_dates(self.start_date, self.end_date)
        return self


class TripUpdate(BaseModel):
    """Schema for trip update; dates are re-validated against the stored trip."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    destination: Optional[str] = Field(default=None, min_length=1, max_length=200)
    start_date: Optional[dt_date] = None
    end_date: Optional[dt_date] = None
    budget: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MONEY)
    status: Optional[TripStatus] = None


class TripResponse(TripBase):
    """Schema for trip response."""
    id: int
    user_id: int
    status: TripStatus
    cover_image_url: Optional[str] = None
    total_expenses: Decimal = Decimal("0.00")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripDayView(BaseModel):
    """A calendar day of the trip with its stored itinerary, if any."""
    day_number: int
    date: dt_date
    day_itinerary: Optional[DayItineraryResponse] = None


class TripDaysResponse(BaseModel):
    """Calendar days of a trip."""
    trip_id: int
    total_days: int
    truncated: bool
    days: List[TripDayView] = []


class TripStatusResponse(BaseModel):
    status: TripStatus
