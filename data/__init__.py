"""Data access layer - Database models and connections."""

from .db_models import Base, UserRecord
from .database import DatabaseManager
from .repositories import UserRecordRepository

__all__ = [
    # Models
    'Base',
    'UserRecord',

    # Database
    'DatabaseManager',
    'UserRecordRepository'
]
