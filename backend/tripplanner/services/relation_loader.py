"""
Batch loading of day itineraries with their locations, photos and expenses.

Children are fetched with one query per child type for the whole set of
days and joined in memory, never one query per day.
"""
import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from tripplanner.core.errors import SchemaMismatch
from tripplanner.core.utils import sum_money
from tripplanner.db.store import TripStore
from tripplanner.models.itinerary import DayItinerary
from tripplanner.schemas.itinerary import DayItineraryResponse, DayWithChildren, TripExpenseBreakdown
from tripplanner.schemas.location import LocationResponse
from tripplanner.schemas.photo import PhotoResponse
from tripplanner.schemas.expense import ExpenseResponse

logger = logging.getLogger(__name__)


def _group_by_day(rows) -> Dict[int, list]:
    grouped = defaultdict(list)
    for row in rows:
        if row.day_itinerary_id is not None:
            grouped[row.day_itinerary_id].append(row)
    return grouped


class RelationLoader:
    """Assembles composite day objects from a TripStore."""

    def __init__(self, store: TripStore):
        self.store = store

    def load_trip_days(self, trip_id: int) -> List[DayWithChildren]:
        """All days of a trip (by date) with their children and totals."""
        days = self.store.list_days(trip_id)
        if not days:
            return []
        return self._assemble(trip_id, days)

    def load_day(self, day_id: int) -> DayWithChildren:
        """A single day with its children; NotFoundError when missing."""
        day = self.store.get_day(day_id)
        return self._assemble(day.trip_id, [day])[0]

    def get_or_create_day(self, trip_id: int, day_date: date, notes: Optional[str] = None) -> DayItinerary:
        """
        Return the trip's day for day_date, creating it on first use.

        Safe to call concurrently: the insert that loses the race on the
        (trip_id, date) unique constraint falls back to the stored row.
        """
        day = self.store.find_day(trip_id, day_date)
        if day:
            return day
        day = self.store.insert_day(trip_id, day_date, notes)
        if day is None:
            day = self.store.find_day(trip_id, day_date)
        logger.debug(f"Using day itinerary {day.id} for trip {trip_id} on {day_date}")
        return day

    def trip_expense_breakdown(self, trip_id: int) -> TripExpenseBreakdown:
        """Expense lists and totals for every day of a trip, empty days included."""
        day_ids = [day.id for day in self.store.list_days(trip_id)]
        if not day_ids:
            return TripExpenseBreakdown(trip_id=trip_id)

        expenses_by_day = {day_id: [] for day_id in day_ids}
        for expense in self.store.expenses_for_days(day_ids):
            expenses_by_day.setdefault(expense.day_itinerary_id, []).append(expense)

        day_totals = {
            day_id: sum_money(e.amount for e in expenses)
            for day_id, expenses in expenses_by_day.items()
        }
        return TripExpenseBreakdown(
            trip_id=trip_id,
            day_totals=day_totals,
            expenses_by_day={
                day_id: [ExpenseResponse.model_validate(e) for e in expenses]
                for day_id, expenses in expenses_by_day.items()
            },
            trip_total=sum_money(day_totals.values()),
        )

    def _assemble(self, trip_id: int, days: List[DayItinerary]) -> List[DayWithChildren]:
        # Snapshot the day rows first: a rollback after a missing view expires ORM state
        day_rows = [DayItineraryResponse.model_validate(day) for day in days]
        day_ids = [row.id for row in day_rows]

        locations = self.store.locations_for_days(day_ids)
        photos = self.store.photos_for_days(trip_id, day_ids)
        try:
            expenses = self.store.expenses_for_days(day_ids)
        except SchemaMismatch:
            logger.info("expenses relation missing; loading days without expenses")
            expenses = []

        locations_map = _group_by_day(LocationResponse.model_validate(l) for l in locations)
        photos_map = _group_by_day(PhotoResponse.model_validate(p) for p in photos)
        expenses_map = _group_by_day(ExpenseResponse.model_validate(e) for e in expenses)

        try:
            totals_map = self.store.day_totals(day_ids)
        except SchemaMismatch:
            logger.info("day_totals view missing; summing expenses in memory")
            totals_map = {
                day_id: sum_money(e.amount for e in day_expenses)
                for day_id, day_expenses in expenses_map.items()
            }

        return [
            DayWithChildren(
                **row.model_dump(),
                locations=locations_map.get(row.id, []),
                photos=photos_map.get(row.id, []),
                expenses=expenses_map.get(row.id, []),
                day_total=totals_map.get(row.id, Decimal("0.00")),
            )
            for row in day_rows
        ]
