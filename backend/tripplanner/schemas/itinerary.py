"""
Pydantic schemas for DayItinerary and composite day objects.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime
from datetime import date as dt_date
from decimal import Decimal
from tripplanner.schemas.location import LocationResponse
from tripplanner.schemas.photo import PhotoResponse
from tripplanner.schemas.expense import ExpenseResponse


class DayItineraryCreate(BaseModel):
    """Schema for day creation; returns the existing day for the same date."""
    trip_id: int
    date: dt_date
    notes: Optional[str] = None


class DayItineraryUpdate(BaseModel):
    """Schema for day update."""
    notes: Optional[str] = None


class DayItineraryResponse(BaseModel):
    """Schema for a stored day itinerary."""
    id: int
    trip_id: int
    date: dt_date
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DayWithChildren(DayItineraryResponse):
    """Day itinerary joined with its locations, photos, expenses and total."""
    locations: List[LocationResponse] = []
    photos: List[PhotoResponse] = []
    expenses: List[ExpenseResponse] = []
    day_total: Decimal = Decimal("0.00")


class TripExpenseBreakdown(BaseModel):
    """Expenses and totals of every day of a trip."""
    trip_id: int
    day_totals: Dict[int, Decimal] = {}
    expenses_by_day: Dict[int, List[ExpenseResponse]] = {}
    trip_total: Decimal = Decimal("0.00")
