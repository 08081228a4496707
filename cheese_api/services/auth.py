"""Authentication service for JWT and password handling."""

import logging
import time

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from cheese_api.config import get_settings
from cheese_api.exceptions import InvalidCredentials, ValidationFailed, Violation
from cheese_api.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(email: str, issued_at: int | None = None) -> str:
    """Create a JWT carrying the user's email and an expiry."""
    issued_at = int(time.time()) if issued_at is None else issued_at
    to_encode = {
        "email": email,
        "exp": issued_at + settings.jwt_expiration_seconds,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def _ensure_email_available(db: Session, email: str, user_id: int | None = None) -> None:
    existing = get_user_by_email(db, email)
    if existing is not None and existing.id != user_id:
        raise ValidationFailed([Violation("email", "This value is already used.")])


def create_user(db: Session, email: str, password: str, roles: list[str] | None = None) -> User:
    """Create a new user.

    The plaintext password is hashed here, once, before the insert. Updates go
    through update_user and never touch the hash.
    """
    _ensure_email_available(db, email)
    user = User(email=email, password_hash=get_password_hash(password), stored_roles=roles or [])
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} <{user.email}>")
    return user


def update_user(db: Session, user: User, email: str | None = None) -> User:
    """Update a user's profile fields."""
    if email is not None and email != user.email:
        _ensure_email_available(db, email, user.id)
        user.email = email
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> User:
    """Replace a user's password after checking the current one."""
    if not verify_password(current_password, user.password_hash):
        raise InvalidCredentials()
    user.password_hash = get_password_hash(new_password)
    db.commit()
    db.refresh(user)
    logger.info(f"Password changed for user {user.id}")
    return user
