"""Pytest configuration and fixtures."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from deploy_wizard.agents.deployment_agent import DeploymentScriptAgent
from deploy_wizard.api.deps import get_agent
from deploy_wizard.core.session import SessionManager, get_session_manager
from deploy_wizard.main import app
from deploy_wizard.models.deployment import DeploymentConfig, EnvVar
from deploy_wizard.services.generation import GenerationClient


class FakeGenerationClient(GenerationClient):
    """Generation client that returns canned text instead of calling a provider."""

    provider = "fake"

    def __init__(self, text: str | None = None, error: Exception | None = None):
        super().__init__(api_key="test-key", model="fake-model")
        self.text = text
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def _generate(self, system_instruction: str, prompt: str) -> str | None:
        self.calls.append((system_instruction, prompt))
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def generated_payload() -> dict[str, str]:
    """A complete reply from the generation provider."""
    return {
        "bashScript": "#!/bin/bash\nset -euo pipefail\napt-get update\n",
        "nginxConfig": "server {\n    listen 80;\n}\n",
        "gunicornConfig": "[Unit]\nDescription=gunicorn daemon\n",
        "explanation": "Installs packages, configures Postgres, Gunicorn and Nginx.",
    }


@pytest.fixture
def fake_client(generated_payload: dict[str, str]) -> FakeGenerationClient:
    return FakeGenerationClient(text=json.dumps(generated_payload))


@pytest.fixture
def agent(fake_client: FakeGenerationClient) -> DeploymentScriptAgent:
    return DeploymentScriptAgent(client_factory=lambda: fake_client)


@pytest.fixture
def complete_config() -> DeploymentConfig:
    """A configuration with every required field filled."""
    return DeploymentConfig(
        repo_url="https://github.com/u/p.git",
        github_token="ghp_abc",
        server_ip="203.0.113.1",
        ssh_user="deploy",
        domain_name="x.com",
        email="ops@x.com",
        db_password="db-secret",
        admin_email="admin@x.com",
        admin_password="admin-secret",
        env_vars=[
            EnvVar(key="DJANGO_SECRET_KEY", value="s3cr3t"),
            EnvVar(key="SENTRY_DSN", value="https://key@sentry.io/1"),
        ],
    )


@pytest.fixture
def session_manager() -> SessionManager:
    """Create a fresh session manager for tests."""
    return SessionManager()


@pytest.fixture
async def client(fake_client: FakeGenerationClient) -> AsyncClient:
    """Create an async test client with a fresh session store and a fake provider."""
    manager = get_session_manager()
    manager._sessions.clear()
    app.dependency_overrides[get_agent] = lambda: DeploymentScriptAgent(
        client_factory=lambda: fake_client
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    manager._sessions.clear()
