"""Account service: password hashing, JWT tokens and profile updates."""

import logging
from datetime import datetime, timedelta
from typing import Optional
from passlib.context import CryptContext
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from hard75.config import get_settings
from hard75.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively."""
    return email.strip().lower()


class AuthService:
    """Accounts and the tokens that identify them."""

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    # ============== Tokens ==============

    def issue_token(self, user: User) -> str:
        """Signed access token whose subject is the user id."""
        expire = datetime.utcnow() + timedelta(minutes=self.settings.access_token_expire_minutes)
        claims = {"sub": str(user.id), "exp": expire}
        return jwt.encode(claims, self.settings.secret_key, algorithm=self.settings.jwt_algorithm)

    def user_from_token(self, token: str) -> Optional[User]:
        """Active user named by a token, None if it is invalid or expired."""
        try:
            claims = jwt.decode(
                token, self.settings.secret_key, algorithms=[self.settings.jwt_algorithm]
            )
        except JWTError:
            return None

        try:
            user_id = int(claims.get("sub"))
        except (TypeError, ValueError):
            return None

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user or not user.is_active:
            return None
        return user

    # ============== Accounts ==============

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def create_user(self, email: str, password: str, full_name: Optional[str] = None) -> User:
        user = User(
            email=normalize_email(email),
            full_name=full_name.strip() if full_name else None,
            hashed_password=pwd_context.hash(password),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """User for a login form, None on any mismatch or a deactivated account."""
        user = self.get_user_by_email(email)
        if not user or not user.hashed_password or not user.is_active:
            return None
        if not pwd_context.verify(password, user.hashed_password):
            return None
        return user

    def update_profile(self, user: User, full_name: Optional[str]) -> User:
        """Set the display name; blank clears it."""
        user.full_name = full_name.strip() if full_name and full_name.strip() else None
        self.db.commit()
        self.db.refresh(user)
        return user
