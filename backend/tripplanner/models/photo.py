"""
Photo model for trip, day and location pictures.
"""
from sqlalchemy import Column, String, Text, ForeignKey, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tripplanner.db.base import BaseModel
import enum


class PhotoType(str, enum.Enum):
    """Photo category."""
    TRIP_COVER = "trip_cover"
    LOCATION = "location"
    SOUVENIR = "souvenir"
    GENERAL = "general"


class Photo(BaseModel):
    """Photo stored in object storage; attached to a trip and optionally a day/location."""
    __tablename__ = "photos"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    day_itinerary_id = Column(Integer, ForeignKey("day_itineraries.id", ondelete="CASCADE"), nullable=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True, index=True)
    file_path = Column(String(500), nullable=False)  # storage path inside the bucket
    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)
    caption = Column(Text, nullable=True)
    photo_type = Column(
        SQLEnum(PhotoType, values_callable=lambda e: [m.value for m in e]),
        default=PhotoType.GENERAL,
        nullable=False,
    )

    # Relationships
    trip = relationship("Trip", back_populates="photos")
    day = relationship("DayItinerary", back_populates="photos")
