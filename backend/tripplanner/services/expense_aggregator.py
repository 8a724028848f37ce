"""
Expense mutations with recomputed day and trip totals.

After every create, update or delete the day's expenses are re-read from
the store (not patched in memory), so the returned totals match what is
persisted even when another session changed the same day. The mutation is
committed before totals are computed and is not rolled back if that
computation fails.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from tripplanner.core.errors import SchemaMismatch, TripValidationError
from tripplanner.core.utils import sum_money, to_money
from tripplanner.db.store import TripStore
from tripplanner.models.expense import Expense
from tripplanner.schemas.expense import (
    DayTotalRow, ExpenseCreate, ExpenseMutationResult, ExpenseResponse, ExpenseUpdate, TripDayTotals
)
from tripplanner.services.relation_loader import RelationLoader

logger = logging.getLogger(__name__)


class ExpenseAggregator:
    """Applies expense mutations and recomputes totals."""

    def __init__(self, store: TripStore):
        self.store = store
        self.loader = RelationLoader(store)

    def create_expense(self, data: ExpenseCreate) -> ExpenseMutationResult:
        if data.location_id is not None:
            self._check_location(data.location_id, data.day_itinerary_id, data.trip_id, data.date)
        day_id = self._resolve_day(data)
        expense = Expense(
            day_itinerary_id=day_id,
            location_id=data.location_id,
            description=data.description,
            amount=to_money(data.amount),
            category=data.category,
        )
        self.store.save(expense)
        logger.info(f"Created expense {expense.id} on day {day_id}")
        return self._recompute(day_id, ExpenseResponse.model_validate(expense))

    def update_expense(self, expense_id: int, changes: ExpenseUpdate) -> ExpenseMutationResult:
        expense = self.store.get_expense(expense_id)
        updates = changes.model_dump(exclude_unset=True)
        if updates.get("location_id") is not None:
            self._check_location(updates["location_id"], expense.day_itinerary_id)
        if "amount" in updates:
            if updates["amount"] is None:
                raise TripValidationError("Expense amount is required")
            updates["amount"] = to_money(updates["amount"])
        for field, value in updates.items():
            setattr(expense, field, value)
        self.store.save(expense)
        logger.info(f"Updated expense {expense_id}")
        return self._recompute(expense.day_itinerary_id, ExpenseResponse.model_validate(expense))

    def delete_expense(self, expense_id: int) -> ExpenseMutationResult:
        expense = self.store.get_expense(expense_id)
        day_id = expense.day_itinerary_id
        self.store.delete(expense)
        logger.info(f"Deleted expense {expense_id} from day {day_id}")
        return self._recompute(day_id, None)

    def trip_total(self, trip_id: int) -> Decimal:
        """Trip total from trip_totals, or summed from the tables without the view."""
        return self.trip_totals([trip_id])[trip_id]

    def trip_totals(self, trip_ids: Iterable[int]) -> Dict[int, Decimal]:
        """Totals for several trips with one batched lookup; trips without expenses map to 0."""
        trip_ids = list(trip_ids)
        if not trip_ids:
            return {}
        try:
            totals = self.store.trip_totals(trip_ids)
        except SchemaMismatch:
            logger.info("trip_totals view missing; summing expenses per trip")
            totals = self._sum_trip_totals(trip_ids)
        return {trip_id: totals.get(trip_id, Decimal("0.00")) for trip_id in trip_ids}

    def day_totals_for_trip(self, trip_id: int) -> TripDayTotals:
        """Per-day totals of a trip ordered by date, with their sum."""
        try:
            rows = self.store.day_total_rows(trip_id)
        except SchemaMismatch:
            logger.info("day_totals view missing; computing day totals from expenses")
            breakdown = self.loader.trip_expense_breakdown(trip_id)
            rows = [
                {
                    "day_itinerary_id": day.id,
                    "trip_id": trip_id,
                    "date": day.date,
                    "day_total": breakdown.day_totals.get(day.id, Decimal("0.00")),
                }
                for day in self.store.list_days(trip_id)
            ]
        day_totals = [DayTotalRow(**row) for row in rows]
        return TripDayTotals(
            trip_id=trip_id,
            day_totals=day_totals,
            total_expenses=sum_money(row.day_total for row in day_totals),
        )

    def _check_location(self, location_id: int, day_id=None, trip_id=None, day_date=None):
        """The location must sit on the expense's day (by id, or by trip and date)."""
        location = self.store.get_location(location_id)
        day = self.store.get_day(location.day_itinerary_id)
        if day_id is not None:
            same_day = day.id == day_id
        else:
            same_day = day.trip_id == trip_id and day.date == day_date
        if not same_day:
            raise TripValidationError("Location does not belong to this day")

    def _resolve_day(self, data: ExpenseCreate) -> int:
        if data.day_itinerary_id is not None:
            # existence check; raises NotFoundError
            self.store.get_day(data.day_itinerary_id)
            return data.day_itinerary_id
        if data.trip_id is None or data.date is None:
            raise TripValidationError("Either day_itinerary_id or trip_id and date are required")
        return self.loader.get_or_create_day(data.trip_id, data.date).id

    def _recompute(self, day_id: int, expense) -> ExpenseMutationResult:
        day_expenses = [
            ExpenseResponse.model_validate(e) for e in self.store.expenses_for_days([day_id])
        ]
        day_total = sum_money(e.amount for e in day_expenses)
        trip_id = self.store.trip_id_for_day(day_id)
        return ExpenseMutationResult(
            expense=expense,
            day_itinerary_id=day_id,
            day_total=day_total,
            trip_total=self.trip_total(trip_id),
            day_expenses=day_expenses,
        )

    def _sum_trip_totals(self, trip_ids: List[int]) -> Dict[int, Decimal]:
        day_to_trip = self.store.day_trip_map(trip_ids)
        totals = {trip_id: Decimal("0.00") for trip_id in trip_ids}
        for day_id, amount in self.store.expense_amounts_for_days(list(day_to_trip)):
            totals[day_to_trip[day_id]] += amount
        return {trip_id: to_money(total) for trip_id, total in totals.items()}
