"""
Expense model for tracking spending per day.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tripplanner.db.base import BaseModel
import enum


class ExpenseCategory(str, enum.Enum):
    """Expense category."""
    FOOD = "food"
    TRANSPORT = "transport"
    ACCOMMODATION = "accommodation"
    ACTIVITIES = "activities"
    SHOPPING = "shopping"
    OTHER = "other"


class Expense(BaseModel):
    """A single spending event on a day."""
    __tablename__ = "expenses"

    day_itinerary_id = Column(Integer, ForeignKey("day_itineraries.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True, index=True)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(
        SQLEnum(ExpenseCategory, values_callable=lambda e: [m.value for m in e]),
        default=ExpenseCategory.OTHER,
        nullable=False,
    )

    # Relationships
    day = relationship("DayItinerary", back_populates="expenses")
    location = relationship("Location", back_populates="expenses")
