"""
User model for authentication and trip ownership.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from tripplanner.db.base import BaseModel


class User(BaseModel):
    """User account; the owner principal of trips."""
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(200), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_confirmed = Column(Boolean, default=False, nullable=False)

    # Relationships
    trips = relationship("Trip", back_populates="owner", cascade="all, delete-orphan")
