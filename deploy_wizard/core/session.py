"""Session management for wizard runs."""

from datetime import datetime, timedelta
from functools import lru_cache
from uuid import UUID

from deploy_wizard.config import settings
from deploy_wizard.core.wizard import WizardSession
from deploy_wizard.models.deployment import DeploymentConfig


class SessionManager:
    """Manages wizard sessions in memory.

    Sessions are process-local and disappear on restart.
    """

    def __init__(self, ttl_hours: int = 24):
        self._sessions: dict[UUID, WizardSession] = {}
        self._ttl = timedelta(hours=ttl_hours)

    async def create_session(
        self, config: DeploymentConfig | None = None
    ) -> WizardSession:
        """Create a new session, optionally pre-filled."""
        session = WizardSession(config=config or DeploymentConfig())
        self._sessions[session.id] = session
        return session

    async def get_session(self, session_id: UUID) -> WizardSession | None:
        """Get a session by ID."""
        session = self._sessions.get(session_id)
        if session:
            # Check if expired
            if datetime.utcnow() - session.updated_at > self._ttl:
                del self._sessions[session_id]
                return None
        return session

    async def update_session(self, session: WizardSession) -> WizardSession:
        """Store a session after changes."""
        session.touch()
        self._sessions[session.id] = session
        return session

    async def delete_session(self, session_id: UUID) -> bool:
        """Delete a session."""
        if session_id in self._sessions:
            del self._sessions[session_id]
            return True
        return False

    async def cleanup_expired(self) -> int:
        """Remove expired sessions. Returns count of removed sessions."""
        now = datetime.utcnow()
        expired = [
            sid
            for sid, session in self._sessions.items()
            if now - session.updated_at > self._ttl
        ]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)


@lru_cache
def get_session_manager() -> SessionManager:
    """Get the session manager singleton."""
    return SessionManager(ttl_hours=settings.session_ttl_hours)
