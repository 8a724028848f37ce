"""
Security utilities for JWT authentication and password hashing.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import hashlib
import bcrypt
from jose import JWTError, jwt
from tripplanner.core.config import settings

ACCESS_TOKEN_PURPOSE = "access"
CONFIRMATION_TOKEN_PURPOSE = "confirm_email"


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    Returns bytes (32 bytes) which is well under bcrypt's 72-byte limit.
    """
    return hashlib.sha256(password.encode('utf-8')).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pre_hashed = _pre_hash_password(plain_password)
    return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt (after the SHA256 pre-hash)."""
    pre_hashed = _pre_hash_password(password)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pre_hashed, salt)
    return hashed.decode('utf-8')


def _encode(data: dict, expires_delta: timedelta, purpose: str) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "purpose": purpose})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    return _encode(data, expires_delta, ACCESS_TOKEN_PURPOSE)


def create_confirmation_token(email: str) -> str:
    """Create a short-lived token for the email confirmation link."""
    return _encode(
        {"sub": email},
        timedelta(hours=settings.CONFIRMATION_TOKEN_EXPIRE_HOURS),
        CONFIRMATION_TOKEN_PURPOSE,
    )


def decode_access_token(token: str, purpose: str = ACCESS_TOKEN_PURPOSE) -> Optional[dict]:
    """Decode and verify a JWT token; None when invalid, expired or issued for another purpose."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("purpose") != purpose:
        return None
    return payload
