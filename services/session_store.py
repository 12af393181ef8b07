"""
Session registry.

Maps session tokens to live WorkflowSession objects and mirrors each
session's user into the local user-record table. Document state is held in
memory only; the user record lets a token be resumed after the in-memory
session is gone (e.g. a server restart), starting again from IDLE.
"""
import logging
from typing import Dict, Optional

from core.models import User
from core.workflow import WorkflowSession
from data.database import DatabaseManager
from data.db_models import generate_token
from data.repositories import UserRecordRepository

logger = logging.getLogger("smartlens.sessions")


class SessionStore:
    """Owns every WorkflowSession of one application instance."""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self._sessions: Dict[str, WorkflowSession] = {}

    def __len__(self):
        return len(self._sessions)

    def contains(self, token: Optional[str]) -> bool:
        """True while the session is registered in memory (not logged out)."""
        return bool(token) and token in self._sessions

    def create(self, user: User) -> WorkflowSession:
        """Open a new session for a freshly logged-in user."""
        token = generate_token()
        session = WorkflowSession(session_id=token, user=user)
        self._sessions[token] = session
        self.save_user(session)
        logger.info("Opened session for user=%s", user.id)
        return session

    def get(self, token: Optional[str]) -> Optional[WorkflowSession]:
        """
        Look up a session, restoring it from the user record if needed.

        Returns:
            The session, or None if the token is unknown
        """
        if not token:
            return None
        session = self._sessions.get(token)
        if session is not None:
            return session

        with self.db.session() as db_session:
            record = UserRecordRepository(db_session).get(token)
            if record is None:
                return None
            user = UserRecordRepository.to_user(record)

        session = WorkflowSession(session_id=token, user=user)
        self._sessions[token] = session
        logger.info("Restored session for user=%s from local record", user.id)
        return session

    def save_user(self, session: WorkflowSession):
        """Persist the session's current user view."""
        if session.user is None:
            return
        with self.db.session() as db_session:
            UserRecordRepository(db_session).upsert(session.session_id, session.user)

    def remove(self, token: str) -> bool:
        """Drop a session and its user record."""
        existed = self._sessions.pop(token, None) is not None
        with self.db.session() as db_session:
            deleted = UserRecordRepository(db_session).delete(token)
        return existed or deleted
