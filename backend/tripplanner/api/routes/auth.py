"""
Authentication routes for sign-up, sign-in, sign-out, session and email confirmation.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from tripplanner.core.config import settings
from tripplanner.db.session import get_db
from tripplanner.schemas.user import (
    UserCreate, UserLogin, Token, UserResponse, SessionResponse, ResendConfirmation
)
from tripplanner.models.user import User
from tripplanner.core.security import (
    verify_password, get_password_hash, create_access_token, create_confirmation_token,
    decode_access_token, CONFIRMATION_TOKEN_PURPOSE
)
from tripplanner.api.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def send_confirmation_email(user: User):
    """Issue a confirmation link; there is no mail transport, so the link is logged."""
    token = create_confirmation_token(user.email)
    link = f"{settings.FRONTEND_URL}/auth/confirm?token={token}"
    logger.info(f"Confirmation link issued for {user.email}")
    logger.debug(f"Confirmation link: {link}")
    return token


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and send the confirmation link."""
    existing_email = db.query(User).filter(User.email == user_data.email).first()
    if existing_email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = User(
        email=user_data.email,
        full_name=user_data.full_name,
        hashed_password=get_password_hash(user_data.password)
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    send_confirmation_email(new_user)
    return new_user


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Sign in and get a JWT token."""
    user = db.query(User).filter(User.email == credentials.email).first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    if settings.REQUIRE_EMAIL_CONFIRMATION and not user.is_confirmed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email not confirmed"
        )

    access_token = create_access_token(data={"sub": user.email, "user_id": user.id})
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    """Sign out (tokens are stateless; the client drops its token)."""
    logger.info(f"User {current_user.id} signed out")
    return {"message": "Logged out successfully"}


@router.get("/session", response_model=SessionResponse)
async def get_session(current_user: User = Depends(get_current_user)):
    """Current session's user."""
    return SessionResponse(user=UserResponse.model_validate(current_user))


@router.get("/confirm", response_model=UserResponse)
async def confirm_email(token: str, db: Session = Depends(get_db)):
    """Confirm an email address from the link token."""
    payload = decode_access_token(token, purpose=CONFIRMATION_TOKEN_PURPOSE)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired confirmation link"
        )

    user = db.query(User).filter(User.email == payload.get("sub")).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if not user.is_confirmed:
        user.is_confirmed = True
        db.commit()
        db.refresh(user)
    return user


@router.post("/resend")
async def resend_confirmation(data: ResendConfirmation, db: Session = Depends(get_db)):
    """Resend the confirmation link; the reply does not reveal whether the email exists."""
    user = db.query(User).filter(User.email == data.email).first()
    if user and not user.is_confirmed:
        send_confirmation_email(user)
    return {"message": "If the account exists and is unconfirmed, a new link has been sent"}
