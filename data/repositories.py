"""
Repository pattern for data access.

Provides clean separation between data access and business logic.
"""
from typing import Optional
from sqlalchemy.orm import Session

from core.models import User
from data.db_models import UserRecord


class UserRecordRepository:
    """Repository for UserRecord operations."""

    def __init__(self, session: Session):
        self.session = session

    def upsert(self, session_token: str, user: User) -> UserRecord:
        """Store the latest user view for a token."""
        record = self.get(session_token)
        if record is None:
            record = UserRecord(session_token=session_token)
            self.session.add(record)
        record.user_id = user.id
        record.email = user.email
        record.credits = user.credits
        record.is_pro = user.is_pro
        self.session.commit()
        self.session.refresh(record)
        return record

    def get(self, session_token: str) -> Optional[UserRecord]:
        """Get record by token."""
        return self.session.query(UserRecord).filter(
            UserRecord.session_token == session_token
        ).first()

    def delete(self, session_token: str) -> bool:
        """Delete a record."""
        record = self.get(session_token)
        if record:
            self.session.delete(record)
            self.session.commit()
            return True
        return False

    @staticmethod
    def to_user(record: UserRecord) -> User:
        return User(
            id=record.user_id,
            email=record.email,
            credits=record.credits,
            is_pro=record.is_pro
        )
