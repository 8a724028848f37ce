"""
Pydantic schemas for Expense entity and aggregate totals.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from datetime import date as dt_date
from decimal import Decimal
from tripplanner.core.utils import MAX_MONEY
from tripplanner.models.expense import ExpenseCategory


class ExpenseCreate(BaseModel):
    """
    Schema for expense creation.

    Either day_itinerary_id or trip_id + date must be given; the day is
    created on first use.
    """
    day_itinerary_id: Optional[int] = None
    trip_id: Optional[int] = None
    date: Optional[dt_date] = None
    location_id: Optional[int] = None
    description: str = Field(min_length=1, max_length=500)
    amount: Decimal = Field(ge=0, le=MAX_MONEY)
    category: ExpenseCategory = ExpenseCategory.OTHER


class ExpenseUpdate(BaseModel):
    """Schema for expense update."""
    location_id: Optional[int] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MONEY)
    category: Optional[ExpenseCategory] = None


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    day_itinerary_id: int
    location_id: Optional[int] = None
    description: str
    amount: Decimal
    category: ExpenseCategory
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseMutationResult(BaseModel):
    """Totals recomputed after an expense create, update or delete."""
    expense: Optional[ExpenseResponse] = None  # None after delete
    day_itinerary_id: int
    day_total: Decimal
    trip_total: Decimal
    day_expenses: List[ExpenseResponse] = []


class DayTotalRow(BaseModel):
    """One row of the per-day totals of a trip."""
    day_itinerary_id: int
    trip_id: int
    date: dt_date
    day_total: Decimal


class TripDayTotals(BaseModel):
    """Per-day totals of a trip and their sum."""
    trip_id: int
    day_totals: List[DayTotalRow] = []
    total_expenses: Decimal = Decimal("0.00")
