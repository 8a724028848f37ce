"""
Pydantic schemas for Location entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, time as dt_time
from datetime import date as dt_date
from decimal import Decimal
from tripplanner.core.utils import MAX_MONEY
from tripplanner.models.location import LocationType


class LocationFields(BaseModel):
    """Editable location fields."""
    name: str = Field(min_length=1, max_length=255)
    address: Optional[str] = None
    type: LocationType = LocationType.OTHER
    visit_time: Optional[dt_time] = None
    estimated_cost: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MONEY)
    actual_cost: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MONEY)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_id: Optional[str] = None
    notes: Optional[str] = None


class LocationCreate(LocationFields):
    """
    Schema for location creation.

    Either day_itinerary_id or trip_id + date must be given; the day is
    created on first use.
    """
    day_itinerary_id: Optional[int] = None
    trip_id: Optional[int] = None
    date: Optional[dt_date] = None
    order_index: Optional[int] = None


class LocationUpdate(BaseModel):
    """Schema for location update."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = None
    type: Optional[LocationType] = None
    visit_time: Optional[dt_time] = None
    estimated_cost: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MONEY)
    actual_cost: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MONEY)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_id: Optional[str] = None
    notes: Optional[str] = None
    order_index: Optional[int] = None


class LocationResponse(LocationFields):
    """Schema for location response."""
    id: int
    day_itinerary_id: int
    order_index: int
    photo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LocationOrder(BaseModel):
    id: int
    order_index: int


class LocationReorder(BaseModel):
    """Schema for bulk reordering."""
    locations: List[LocationOrder]
