"""
Pydantic schemas for places search results.
"""
from pydantic import BaseModel
from typing import List, Optional


class PlaceResult(BaseModel):
    """A place returned by text search or detail lookup."""
    place_id: str
    name: str
    formatted_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    types: List[str] = []
    photo_reference: Optional[str] = None
