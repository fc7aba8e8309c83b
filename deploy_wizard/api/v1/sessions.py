"""Wizard session endpoints."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Body, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from deploy_wizard.agents.deployment_agent import SCRIPT_FILENAME
from deploy_wizard.api.deps import AgentDep, SessionStoreDep, WizardSessionDep
from deploy_wizard.core.wizard import WizardSession
from deploy_wizard.models.deployment import DeploymentConfig, EnvVar

router = APIRouter()

MASK = "********"
SECRET_FIELDS = ("githubToken", "dbPassword", "adminPassword")


def masked_config(config: DeploymentConfig) -> dict[str, Any]:
    """Dump a config for display with credentials hidden."""
    data = config.model_dump(by_alias=True)
    for name in SECRET_FIELDS:
        if data[name]:
            data[name] = MASK
    for env_var in data["envVars"]:
        if env_var["value"]:
            env_var["value"] = MASK
    return data


class SessionCreate(BaseModel):
    """Request to start a wizard session."""

    config: dict[str, Any] = Field(default_factory=dict)


class EnvVarUpdate(BaseModel):
    """Partial update for one environment variable."""

    key: str | None = None
    value: str | None = None


class SessionResponse(BaseModel):
    """API response model for a wizard session."""

    session_id: UUID
    step: int
    step_name: str
    config: dict[str, Any]
    missing_fields: list[str] = Field(default_factory=list)
    busy: bool = False
    error: str | None = None
    result: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: WizardSession) -> "SessionResponse":
        """Create response from a wizard session."""
        return cls(
            session_id=session.id,
            step=int(session.step),
            step_name=session.step.name,
            config=masked_config(session.config),
            missing_fields=session.config.missing_fields(session.step),
            busy=session.busy,
            error=session.error,
            result=session.result.model_dump(by_alias=True) if session.result else None,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a wizard session",
)
async def create_session(
    store: SessionStoreDep,
    data: SessionCreate | None = None,
) -> SessionResponse:
    """Create a session, optionally pre-filled with configuration values."""
    config = DeploymentConfig()
    if data and data.config:
        config = config.apply_updates(data.config)
    session = await store.create_session(config)
    return SessionResponse.from_session(session)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get session state",
)
async def get_session(session: WizardSessionDep) -> SessionResponse:
    return SessionResponse.from_session(session)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard a session",
)
async def delete_session(session: WizardSessionDep, store: SessionStoreDep) -> None:
    await store.delete_session(session.id)


@router.patch(
    "/{session_id}/config",
    response_model=SessionResponse,
    summary="Update configuration fields",
)
async def update_config(
    session: WizardSessionDep,
    store: SessionStoreDep,
    updates: Annotated[dict[str, Any], Body()],
) -> SessionResponse:
    """Merge field updates into the session's configuration."""
    session.config = session.config.apply_updates(updates)
    await store.update_session(session)
    return SessionResponse.from_session(session)


@router.post(
    "/{session_id}/env-vars",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Append an environment variable",
)
async def add_env_var(
    session: WizardSessionDep,
    store: SessionStoreDep,
    data: EnvVar | None = None,
) -> SessionResponse:
    env_var = data or EnvVar()
    session.config.add_env_var(env_var.key, env_var.value)
    await store.update_session(session)
    return SessionResponse.from_session(session)


@router.put(
    "/{session_id}/env-vars/{index}",
    response_model=SessionResponse,
    summary="Update an environment variable",
)
async def update_env_var(
    session: WizardSessionDep,
    store: SessionStoreDep,
    index: int,
    data: EnvVarUpdate,
) -> SessionResponse:
    session.config.update_env_var(index, key=data.key, value=data.value)
    await store.update_session(session)
    return SessionResponse.from_session(session)


@router.delete(
    "/{session_id}/env-vars/{index}",
    response_model=SessionResponse,
    summary="Remove an environment variable",
)
async def remove_env_var(
    session: WizardSessionDep,
    store: SessionStoreDep,
    index: int,
) -> SessionResponse:
    session.config.remove_env_var(index)
    await store.update_session(session)
    return SessionResponse.from_session(session)


@router.post(
    "/{session_id}/next",
    response_model=SessionResponse,
    summary="Advance to the next step",
)
async def next_step(session: WizardSessionDep, store: SessionStoreDep) -> SessionResponse:
    session.next_step()
    await store.update_session(session)
    return SessionResponse.from_session(session)


@router.post(
    "/{session_id}/back",
    response_model=SessionResponse,
    summary="Return to the previous step",
)
async def previous_step(
    session: WizardSessionDep, store: SessionStoreDep
) -> SessionResponse:
    session.previous_step()
    await store.update_session(session)
    return SessionResponse.from_session(session)


@router.post(
    "/{session_id}/generate",
    response_model=SessionResponse,
    summary="Generate the deployment script",
    description="Sends the configuration to the generation provider. Only one request per session may be in flight.",
)
async def generate(
    session: WizardSessionDep,
    store: SessionStoreDep,
    agent: AgentDep,
) -> SessionResponse:
    try:
        await session.generate(agent)
    finally:
        await store.update_session(session)
    return SessionResponse.from_session(session)


@router.get(
    "/{session_id}/script",
    summary="Get the last generated script",
)
async def get_script(
    session: WizardSessionDep,
    download: Annotated[bool, Query()] = False,
) -> Any:
    """Return the last result, or the bash script as a file download."""
    if session.result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No deployment script has been generated for this session",
        )

    if download:
        return Response(
            content=session.result.bash_script,
            media_type="text/x-shellscript",
            headers={"Content-Disposition": f'attachment; filename="{SCRIPT_FILENAME}"'},
        )

    return session.result.model_dump(by_alias=True)
