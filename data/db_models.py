"""
Database models for locally persisted user identity.

The credit backend owns accounts and balances. This table only caches the
last user view returned for a session token, so a caller can resume a
session after the in-memory workflow state has been dropped.
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_token():
    """Generate an opaque session token."""
    return uuid.uuid4().hex


class UserRecord(Base):
    """Cached user view keyed by session token."""

    __tablename__ = 'user_records'

    session_token = Column(String, primary_key=True, default=generate_token)
    user_id = Column(String, nullable=False, index=True)
    email = Column(String, nullable=False)
    credits = Column(Integer, nullable=False, default=0)
    is_pro = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<UserRecord(user_id={self.user_id}, email={self.email}, credits={self.credits})>"

    def to_dict(self):
        """Convert to dictionary for API responses."""
        return {
            'id': self.user_id,
            'email': self.email,
            'credits': self.credits,
            'isPro': self.is_pro
        }
