"""Dependency injection for API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends

from deploy_wizard.agents.deployment_agent import DeploymentScriptAgent
from deploy_wizard.core.exceptions import SessionNotFoundError
from deploy_wizard.core.session import SessionManager, get_session_manager
from deploy_wizard.core.wizard import WizardSession


async def get_session_store() -> SessionManager:
    """Get the session manager."""
    return get_session_manager()


async def get_agent() -> DeploymentScriptAgent:
    """Get the deployment script agent."""
    return DeploymentScriptAgent()


async def get_wizard_session(
    session_id: UUID,
    store: Annotated[SessionManager, Depends(get_session_store)],
) -> WizardSession:
    """Get a wizard session by ID or raise 404."""
    session = await store.get_session(session_id)
    if not session:
        raise SessionNotFoundError(str(session_id))
    return session


# Type aliases for cleaner signatures
SessionStoreDep = Annotated[SessionManager, Depends(get_session_store)]
AgentDep = Annotated[DeploymentScriptAgent, Depends(get_agent)]
WizardSessionDep = Annotated[WizardSession, Depends(get_wizard_session)]
