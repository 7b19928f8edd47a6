# garage/models/user.py
"""
Users table: registered accounts.
Email is stored normalized (trimmed, lowercase); the password only as a bcrypt hash.
"""

from sqlalchemy import Column, Integer, String, DateTime
from garage.database import Base

EMAIL_MAX_LENGTH = 254


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
