"""
Pydantic schemas for the trip budget summary.
"""
from pydantic import BaseModel
from typing import List
from decimal import Decimal
from tripplanner.models.expense import ExpenseCategory


class BudgetCategoryItem(BaseModel):
    """Spending in one expense category."""
    category: ExpenseCategory
    amount: Decimal
    expense_count: int
    percentage_of_total: float  # 0-100


class BudgetSummary(BaseModel):
    """Budget against actual spending for a trip."""
    trip_id: int
    total_budget: Decimal
    actual_cost: Decimal
    remaining: Decimal  # negative when over budget
    percent_used: float  # 0 when the trip has no budget
    is_over_budget: bool
    categories: List[BudgetCategoryItem] = []
