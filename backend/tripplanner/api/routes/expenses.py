"""
Expense management routes.

Every mutation answers with the day's recomputed total, the trip total and
the day's current expense list.
"""
from fastapi import APIRouter, Depends, status
from typing import List
from tripplanner.db.store import TripStore
from tripplanner.models.user import User
from tripplanner.schemas.expense import (
    ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseMutationResult, TripDayTotals
)
from tripplanner.schemas.itinerary import TripExpenseBreakdown
from tripplanner.services.expense_aggregator import ExpenseAggregator
from tripplanner.services.relation_loader import RelationLoader
from tripplanner.api.dependencies import get_current_user, get_store
from tripplanner.api.routes.trips import check_trip_access, check_day_access

router = APIRouter(prefix="/expenses", tags=["expenses"])


def check_expense_access(expense_id: int, user_id: int, store: TripStore):
    expense = store.get_expense(expense_id)
    check_day_access(expense.day_itinerary_id, user_id, store)
    return expense


@router.get("/day/{day_id}", response_model=List[ExpenseResponse])
async def get_expenses(
    day_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Expenses of a day, newest first."""
    check_day_access(day_id, current_user.id, store)
    return store.expenses_for_days([day_id])


@router.post("", response_model=ExpenseMutationResult, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Create an expense on a day (by id, or by trip and date)."""
    if expense_data.day_itinerary_id is not None:
        check_day_access(expense_data.day_itinerary_id, current_user.id, store)
    elif expense_data.trip_id is not None:
        check_trip_access(expense_data.trip_id, current_user.id, store)
    return ExpenseAggregator(store).create_expense(expense_data)


@router.put("/{expense_id}", response_model=ExpenseMutationResult)
async def update_expense(
    expense_id: int,
    changes: ExpenseUpdate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Update an expense."""
    check_expense_access(expense_id, current_user.id, store)
    return ExpenseAggregator(store).update_expense(expense_id, changes)


@router.delete("/{expense_id}", response_model=ExpenseMutationResult)
async def delete_expense(
    expense_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Delete an expense."""
    check_expense_access(expense_id, current_user.id, store)
    return ExpenseAggregator(store).delete_expense(expense_id)


@router.get("/trip/{trip_id}/days", response_model=TripDayTotals)
async def get_trip_day_totals(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Per-day totals of a trip and their sum."""
    check_trip_access(trip_id, current_user.id, store)
    return ExpenseAggregator(store).day_totals_for_trip(trip_id)


@router.get("/trip/{trip_id}/breakdown", response_model=TripExpenseBreakdown)
async def get_trip_expense_breakdown(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Expenses grouped by day with day totals and the trip total."""
    check_trip_access(trip_id, current_user.id, store)
    return RelationLoader(store).trip_expense_breakdown(trip_id)
