# garage/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL in production and SQLite for local runs/tests.
All models are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from garage.config import settings


def build_engine(url: str):
    """Create an engine with pool settings suited to the backend behind `url`."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from garage.models.user import User                          # noqa
    from garage.models.vehicle import Vehicle, vehicle_shares     # noqa
    from garage.models.maintenance import MaintenanceRecord      # noqa

    Base.metadata.create_all(bind=bind or engine)
