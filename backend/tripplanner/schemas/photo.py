"""
Pydantic schemas for Photo entity.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from tripplanner.models.photo import PhotoType


class PhotoResponse(BaseModel):
    """Schema for photo response."""
    id: int
    trip_id: int
    day_itinerary_id: Optional[int] = None
    location_id: Optional[int] = None
    file_path: str
    file_name: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    caption: Optional[str] = None
    photo_type: PhotoType
    url: Optional[str] = None  # public URL, filled in by the photo routes
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
