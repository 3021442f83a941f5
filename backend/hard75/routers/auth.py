"""Authentication and profile router."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr
from typing import Optional

from hard75.database import get_db
from hard75.models import User
from hard75.services.auth_service import AuthService
from hard75.services.challenge_service import ChallengeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

DEFAULT_USER_EMAIL = "user@hard75.local"


# ============== Schemas ==============

class UserRegister(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    full_name: str


class UserMeResponse(BaseModel):
    id: int
    email: str
    full_name: str


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None


# ============== Dependencies ==============

def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Get current user from JWT token (optional)."""
    if not token:
        return None

    return AuthService(db).user_from_token(token)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Get current user from JWT token or create default user for dev."""
    if token:
        user = get_current_user_optional(token, db)
        if not user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        return user

    # Single-user development mode
    user = db.query(User).order_by(User.id).first()
    if not user:
        user = User(full_name="Default User", email=DEFAULT_USER_EMAIL)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created default user %s", user.id)
    return user


# ============== Auth Endpoints ==============

@router.post("/register", response_model=TokenResponse)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
):
    """Register a new user and seed their challenge."""
    auth_service = AuthService(db)

    existing_user = auth_service.get_user_by_email(user_data.email)
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = auth_service.create_user(
        email=user_data.email,
        password=user_data.password,
        full_name=user_data.full_name,
    )

    challenge_service = ChallengeService(db)
    challenge_service.ensure_user_settings(user)
    challenge_service.ensure_challenge_days(user)

    access_token = auth_service.issue_token(user)

    return TokenResponse(
        access_token=access_token,
        user_id=user.id,
        full_name=user.full_name or "",
    )


@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Login with email and password."""
    auth_service = AuthService(db)

    user = auth_service.authenticate_user(form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=401, detail="Incorrect email or password")

    access_token = auth_service.issue_token(user)

    return TokenResponse(
        access_token=access_token,
        user_id=user.id,
        full_name=user.full_name or "",
    )


@router.get("/me", response_model=UserMeResponse)
def get_me(
    current_user: User = Depends(get_current_user),
):
    """Get current user profile."""
    return UserMeResponse(
        id=current_user.id,
        email=current_user.email or "",
        full_name=current_user.full_name or "",
    )


@router.patch("/me", response_model=UserMeResponse)
def update_me(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update the display name."""
    user = AuthService(db).update_profile(current_user, profile.full_name)
    return UserMeResponse(
        id=user.id,
        email=user.email or "",
        full_name=user.full_name or "",
    )
