"""In-memory store for live form sessions."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from userform.form.engine import FormEngine

logger = logging.getLogger(__name__)


class FormSession:
    """A form engine bound to one client for the life of the process."""

    def __init__(self, engine: FormEngine) -> None:
        self.session_id = str(uuid.uuid4())
        self.engine = engine
        self.created_at = datetime.now(timezone.utc)
        self.last_active = self.created_at
        self.submitted_at: datetime | None = None


class FormSessionStore:
    """In-memory dict store for form sessions.

    Suitable for single-instance deployment; nothing outlives the process.
    Sessions idle for longer than the expiry window are dropped when next
    looked up and whenever a new session is created.
    """

    def __init__(self, session_expiry_minutes: int = 60) -> None:
        self._sessions: dict[str, FormSession] = {}
        self._expiry = timedelta(minutes=session_expiry_minutes)

    def _expired(self, session: FormSession, now: datetime) -> bool:
        return now - session.last_active > self._expiry

    def create(self, engine: FormEngine) -> FormSession:
        self.prune_expired()
        session = FormSession(engine)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> FormSession | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        now = datetime.now(timezone.utc)
        if self._expired(session, now):
            del self._sessions[session_id]
            return None
        session.last_active = now
        return session

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def prune_expired(self) -> int:
        """Drop idle sessions. Returns how many were removed."""
        now = datetime.now(timezone.utc)
        expired = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Pruned %d expired form sessions", len(expired))
        return len(expired)

    def list_sessions(self, form_id: str | None = None) -> list[FormSession]:
        self.prune_expired()
        return [
            s for s in self._sessions.values()
            if form_id is None or s.engine.form_id == form_id
        ]
