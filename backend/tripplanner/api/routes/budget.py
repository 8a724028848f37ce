"""
Budget routes.
"""
from fastapi import APIRouter, Depends
from tripplanner.db.store import TripStore
from tripplanner.models.user import User
from tripplanner.schemas.budget import BudgetSummary
from tripplanner.services.budget_service import summarize_budget
from tripplanner.services.relation_loader import RelationLoader
from tripplanner.api.dependencies import get_current_user, get_store
from tripplanner.api.routes.trips import check_trip_access

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("/{trip_id}/summary", response_model=BudgetSummary)
async def get_budget_summary(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_store)
):
    """Get budget summary with spending by category."""
    trip = check_trip_access(trip_id, current_user.id, store)
    budget = trip.budget
    breakdown = RelationLoader(store).trip_expense_breakdown(trip_id)
    return summarize_budget(trip_id, budget, breakdown)
