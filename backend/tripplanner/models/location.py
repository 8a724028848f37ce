"""
Location model for places visited during a day.
"""
from sqlalchemy import Column, String, Numeric, Float, Time, Text, ForeignKey, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tripplanner.db.base import BaseModel
import enum


class LocationType(str, enum.Enum):
    """Location category."""
    RESTAURANT = "restaurant"
    ATTRACTION = "attraction"
    HOTEL = "hotel"
    ACTIVITY = "activity"
    OTHER = "other"


class Location(BaseModel):
    """A stop in a day's plan; display order follows order_index."""
    __tablename__ = "locations"

    day_itinerary_id = Column(Integer, ForeignKey("day_itineraries.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)  # address text or maps link
    type = Column(
        SQLEnum(LocationType, values_callable=lambda e: [m.value for m in e]),
        default=LocationType.OTHER,
        nullable=False,
    )
    visit_time = Column(Time, nullable=True)
    estimated_cost = Column(Numeric(12, 2), nullable=True)
    actual_cost = Column(Numeric(12, 2), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    place_id = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    order_index = Column(Integer, default=0, nullable=False)  # gaps allowed, never renumbered
    photo_url = Column(String(500), nullable=True)

    # Relationships
    day = relationship("DayItinerary", back_populates="locations")
    expenses = relationship("Expense", back_populates="location")
