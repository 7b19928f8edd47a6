# garage/routers/auth.py
"""Registration, login, and the caller's own identity."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from garage.database import get_db
from garage.schemas.auth import Credentials, MessageOut, TokenOut, UserOut
from garage.security import SessionIssuer, SessionPrincipal, get_current_user, get_session_issuer
from garage.services.user_service import register_user, authenticate

router = APIRouter()


@router.post("/auth/register", status_code=status.HTTP_201_CREATED, response_model=MessageOut,
             summary="Register a new user")
def register(body: Credentials, db: Session = Depends(get_db)):
    register_user(db, body.email, body.password)
    return MessageOut(message="User registered successfully")


@router.post("/auth/login", response_model=TokenOut, summary="Log in and receive a session token")
def login(body: Credentials, db: Session = Depends(get_db),
          issuer: SessionIssuer = Depends(get_session_issuer)):
    """Returns a Bearer token valid for a fixed window (8 hours by default)."""
    user = authenticate(db, body.email, body.password)
    return TokenOut(message="Login successful", token=issuer.issue(user))


@router.get("/auth/me", response_model=UserOut, summary="Identity behind the current token")
def me(current_user: SessionPrincipal = Depends(get_current_user)):
    return UserOut(id=current_user.id, email=current_user.email)
