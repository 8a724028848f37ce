"""
Shared FastAPI dependencies: current user and injected backend handles.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from tripplanner.core.security import decode_access_token
from tripplanner.db.session import get_db
from tripplanner.db.store import TripStore
from tripplanner.models.user import User
from tripplanner.services.places_service import PlacesClient
from tripplanner.services.storage_service import LocalObjectStorage

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="User not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    payload = decode_access_token(credentials.credentials)
    if not payload or "user_id" not in payload:
        raise unauthorized

    user = db.query(User).filter(User.id == payload["user_id"]).first()
    if not user or not user.is_active:
        raise unauthorized
    return user


def get_store(db: Session = Depends(get_db)) -> TripStore:
    """Data-access handle bound to the request's session."""
    return TripStore(db)


def get_storage() -> LocalObjectStorage:
    """Object storage for uploaded images."""
    return LocalObjectStorage()


def get_places_client():
    """Places client, closed after the request."""
    client = PlacesClient()
    try:
        yield client
    finally:
        client.close()
