# garage/security.py
"""
Password hashing and session tokens.

Passwords are hashed with bcrypt (random per-record salt) through passlib.
Sessions are stateless HS256 JWTs carrying the user id and email with a fixed
validity window; there is no server-side session table, so a token stays
valid until it expires.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt
from jose.exceptions import JWTError
from passlib.context import CryptContext

from garage.config import settings
from garage.errors import UnauthenticatedError, InvalidTokenError
from garage.utils.logger import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Security scheme for Swagger UI. auto_error is off so a missing header maps to 401.
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Constant-time comparison of a plaintext password against its stored hash."""
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # Malformed or unknown hash format in storage
        logger.warning("Stored password hash could not be parsed")
        return False


@dataclass(frozen=True)
class SessionPrincipal:
    """Identity carried by a verified session token."""
    id: int
    email: str


class SessionIssuer:
    """Issues and verifies signed, time-limited session tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_hours: int = 8):
        if not secret:
            raise ValueError("Session secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expire_delta = timedelta(hours=expire_hours)

    def issue(self, user, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.expire_delta).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> SessionPrincipal:
        if not token:
            raise UnauthenticatedError()
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info(f"Rejected session token: {e}")
            raise InvalidTokenError()

        subject = payload.get("sub")
        email = payload.get("email")
        if not subject or not str(subject).isdigit() or not email:
            raise InvalidTokenError()
        return SessionPrincipal(id=int(subject), email=email)


@lru_cache
def get_session_issuer() -> SessionIssuer:
    """FastAPI dependency: the process-wide issuer built from settings."""
    return SessionIssuer(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expire_hours=settings.TOKEN_EXPIRE_HOURS,
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> SessionPrincipal:
    """Dependency to get the caller's identity from the Bearer token."""
    token = credentials.credentials if credentials else None
    return issuer.verify(token)
