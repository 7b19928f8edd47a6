# garage/services/user_service.py
"""
Credential store: registration, lookup by email, and login checks.
Emails are compared in their normalized form (trimmed, lowercase).
"""

import re
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from garage.config import settings
from garage.errors import ValidationError, DuplicateKeyError, InvalidCredentialsError
from garage.models.user import User, EMAIL_MAX_LENGTH
from garage.security import hash_password, verify_password
from garage.utils.logger import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def find_by_email(db: Session, email: str) -> Optional[User]:
    """Find a user by email. Returns None if not found."""
    normalized = normalize_email(email)
    if not normalized:
        return None
    return db.query(User).filter(User.email == normalized).first()


def register_user(db: Session, email: str, password: str) -> User:
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")
    if len(normalized) > EMAIL_MAX_LENGTH:
        raise ValidationError(f"Email cannot be longer than {EMAIL_MAX_LENGTH} characters")
    if not EMAIL_PATTERN.search(normalized):
        raise ValidationError("Please use a valid email format")
    if not password:
        raise ValidationError("Password is required")
    if "\x00" in password:
        raise ValidationError("Password contains an invalid character")
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )

    if find_by_email(db, normalized):
        raise DuplicateKeyError("This email is already registered")

    user = User(email=normalized, password_hash=hash_password(password), created_at=datetime.utcnow())
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent registration won the unique constraint
        db.rollback()
        raise DuplicateKeyError("This email is already registered")
    db.refresh(user)

    logger.info(f"[AUTH] Registered user {user.id} <{user.email}>")
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user whose credentials match; same error for unknown email and bad password."""
    user = find_by_email(db, email)
    if user is None or not verify_password(password or "", user.password_hash):
        logger.info(f"[AUTH] Failed login for <{normalize_email(email)}>")
        raise InvalidCredentialsError()
    logger.info(f"[AUTH] User {user.id} logged in")
    return user
