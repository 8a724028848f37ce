"""
Budget summary for a trip.
"""
from decimal import Decimal
from typing import Optional

from tripplanner.core.utils import sum_money, to_money
from tripplanner.models.expense import ExpenseCategory
from tripplanner.schemas.budget import BudgetCategoryItem, BudgetSummary
from tripplanner.schemas.itinerary import TripExpenseBreakdown


def _percentage(part: Decimal, whole: Decimal) -> float:
    if whole <= 0:
        return 0.0
    return round(float(part / whole * 100), 1)


def summarize_budget(trip_id: int, budget: Optional[Decimal], breakdown: TripExpenseBreakdown) -> BudgetSummary:
    """Compare the trip budget with its expenses, broken down by category."""
    total_budget = to_money(budget)
    expenses = [e for day_expenses in breakdown.expenses_by_day.values() for e in day_expenses]
    actual_cost = sum_money(e.amount for e in expenses)

    amounts = {category: [] for category in ExpenseCategory}
    for expense in expenses:
        amounts[expense.category].append(expense.amount)

    categories = [
        BudgetCategoryItem(
            category=category,
            amount=sum_money(values),
            expense_count=len(values),
            percentage_of_total=_percentage(sum_money(values), actual_cost),
        )
        for category, values in amounts.items()
    ]

    return BudgetSummary(
        trip_id=trip_id,
        total_budget=total_budget,
        actual_cost=actual_cost,
        remaining=total_budget - actual_cost,
        percent_used=_percentage(actual_cost, total_budget),
        is_over_budget=total_budget > 0 and actual_cost > total_budget,
        categories=categories,
    )
