"""
Pydantic schemas for User entity and auth flows.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    """Base user schema."""
    email: EmailStr
    full_name: Optional[str] = None


class UserCreate(UserBase):
    """Schema for sign-up."""
    password: str = Field(min_length=6)


class UserUpdate(BaseModel):
    """Schema for profile update."""
    full_name: Optional[str] = None


class UserResponse(UserBase):
    """Schema for user response."""
    id: int
    is_active: bool
    is_confirmed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    """Schema for sign-in."""
    email: EmailStr
    password: str


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"


class SessionResponse(BaseModel):
    """Current session: the authenticated user."""
    user: UserResponse


class ResendConfirmation(BaseModel):
    """Schema for email-confirmation resend."""
    email: EmailStr
