"""
Day itinerary model: one calendar day of a trip.
"""
from sqlalchemy import Column, Date, Text, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from tripplanner.db.base import BaseModel


class DayItinerary(BaseModel):
    """Created lazily when content is first added to a day."""
    __tablename__ = "day_itineraries"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="days")
    locations = relationship("Location", back_populates="day", cascade="all, delete-orphan")
    photos = relationship("Photo", back_populates="day", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="day", cascade="all, delete-orphan")

    # One day per calendar date per trip
    __table_args__ = (
        UniqueConstraint('trip_id', 'date', name='uq_trip_day_date'),
    )
