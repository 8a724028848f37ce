"""
Trip model for family trip planning.
"""
from sqlalchemy import Column, String, Date, Numeric, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from tripplanner.db.base import BaseModel
import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    PLANNING = "planning"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class Trip(BaseModel):
    """Trip owned by a single user."""
    __tablename__ = "trips"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    budget = Column(Numeric(12, 2), nullable=True)
    status = Column(
        SQLEnum(TripStatus, values_callable=lambda e: [m.value for m in e]),
        default=TripStatus.PLANNING,
        nullable=False,
    )
    cover_image_url = Column(String(500), nullable=True)

    # Relationships
    owner = relationship("User", back_populates="trips")
    days = relationship("DayItinerary", back_populates="trip", cascade="all, delete-orphan")
    photos = relationship("Photo", back_populates="trip", cascade="all, delete-orphan")
