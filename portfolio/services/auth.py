import logging
from typing import Optional

from fastapi import HTTPException
from sqlmodel import Session, select

from portfolio.core.security import get_password_hash, verify_password
from portfolio.models.user import User, ADMIN_ROLE

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, session: Session):
        self.session = session

    def get_user_by_email(self, email: str) -> Optional[User]:
        # Use ilike for case-insensitive lookup
        return self.session.exec(select(User).where(User.email == email)).first() or \
               self.session.exec(select(User).where(User.email.ilike(email))).first()

    def get_user_by_login(self, login: str) -> Optional[User]:
        """Look a user up by email or username."""
        return self.get_user_by_email(login) or \
               self.session.exec(select(User).where(User.username == login)).first()

    def authenticate_user(self, login: str, password: str) -> tuple[Optional[User], Optional[str]]:
        user = self.get_user_by_login(login)
        if not user or not verify_password(password, user.password_hash):
            return None, "Invalid credentials"
        if not user.is_active:
            return None, "Account is disabled"
        return user, None

    def create_user(self, email: str, username: str, password: str, role: str = "user") -> User:
        if self.get_user_by_email(email):
            raise HTTPException(status_code=400, detail="Email already registered")

        user = User(
            email=email,
            username=username,
            password_hash=get_password_hash(password),
            role=role,
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("Created %s user %s", role, email)
        return user

    def ensure_admin(self, email: str, username: str, password: str) -> User:
        """Return the first admin, creating one with the given credentials if none exists."""
        admin = self.session.exec(select(User).where(User.role == ADMIN_ROLE)).first()
        if admin:
            return admin
        return self.create_user(email, username, password, role=ADMIN_ROLE)
