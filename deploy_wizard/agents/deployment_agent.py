"""Deployment Script Agent.

Turns a DeploymentConfig into a prompt, asks the hosted model for a
deployment bundle, and normalizes the JSON reply into a GeneratedScript.
"""

import json
import time
from typing import Any, Callable, Sequence

from deploy_wizard.agents.base import BaseAgent
from deploy_wizard.core.exceptions import ConfigurationError, GenerationError
from deploy_wizard.models.deployment import (
    DeploymentConfig,
    EnvVar,
    GeneratedScript,
    RawGeneratedScript,
)
from deploy_wizard.services.generation import GenerationClient, get_generation_client

SCRIPT_FILENAME = "deploy_app.sh"

SYSTEM_INSTRUCTION = """
You are an expert DevOps Engineer specializing in Django deployments on Ubuntu.
You write robust, idempotent, non-interactive bash scripts.
Target OS: Ubuntu 22.04 LTS or 24.04 LTS.
Key Focus: Security, Handling Edge Cases (line endings, permissions, missing settings), and "Zero-Touch" automation.
"""


def authenticated_repo_url(repo_url: str, github_token: str | None) -> str:
    """Embed the token as basic-auth credentials in an https:// URL.

    Only the literal ``https://`` prefix is rewritten. Anything else,
    such as an SSH remote, is returned unchanged.
    """
    if not github_token:
        return repo_url
    return repo_url.replace("https://", f"https://{github_token}@", 1)


def serialize_env_vars(env_vars: Sequence[EnvVar]) -> str:
    return "\n".join(f"{v.key}={v.value}" for v in env_vars)


def build_execution_command(ssh_user: str, server_ip: str) -> str:
    """One-liner that pipes the local script to bash on the server."""
    # Host key checking is off so the first connection doesn't prompt
    return (
        f'ssh -o StrictHostKeyChecking=no {ssh_user}@{server_ip} '
        f'"bash -s" < {SCRIPT_FILENAME}'
    )


def build_prompt(config: DeploymentConfig) -> str:
    """Build the task prompt, including the JSON output contract."""
    repo = authenticated_repo_url(config.repo_url, config.github_token)
    env_vars = serialize_env_vars(config.env_vars)
    site_root = f"/var/www/{config.domain_name}"

    return f"""
Create a highly robust "Zero-Touch" deployment script for a Django project on Ubuntu.

CONFIGURATION:
---------------------------------------------------
Repo: {repo}
Branch: {config.branch}
Python Version: {config.python_version}
Domain: {config.domain_name}
Server IP: {config.server_ip}
SSH User: {config.ssh_user}
App Name: {config.app_name}
WSGI: {config.wsgi_path}
Contact Email: {config.email}

Database:
- Name: {config.db_name}
- User: {config.db_user}
- Password: {config.db_password}

Superuser:
- User: {config.admin_user}
- Email: {config.admin_email}
- Pass: {config.admin_password}

Extra Env Vars:
{env_vars}
---------------------------------------------------

CRITICAL REQUIREMENTS:

1. **System Dependencies**:
   - Install: `pkg-config`, `libmysqlclient-dev` (for broad compatibility), `python3-pip`, `python3-venv`, `python3-dev`, `libpq-dev`, `postgresql`, `postgresql-contrib`, `nginx`, `curl`, `git`, `ufw`, `certbot`, `python3-certbot-nginx`.

2. **Git Safety**:
   - Run `git config --global --add safe.directory {site_root}` to prevent ownership errors.

3. **Application Setup & Settings Injection**:
   - Clone to `{site_root}`.
   - Create venv.
   - Install `requirements.txt`.
   - Force install: `gunicorn`, `psycopg2-binary`.
   - **Settings.py Modification**: Append a code block to the end of `settings.py` to FORCE production settings. Do not rely on the user having these set correctly.
     - Set `DEBUG = False`
     - Set `ALLOWED_HOSTS = ['{config.domain_name}', '{config.server_ip}', 'localhost', '127.0.0.1']`
     - Set `STATIC_ROOT = '{site_root}/static'`
     - Set `DATABASES` config using credentials provided.
   - Create `.env` file with user variables.

4. **Database & Migrations**:
   - Start Postgres.
   - Create DB/User idempotently.
   - Run `python manage.py migrate`.
   - Run `python manage.py collectstatic --noinput`.

5. **Superuser Creation**:
   - Use environment variables (`DJANGO_SUPERUSER_USERNAME`, etc.) to run `python manage.py createsuperuser --noinput`.

6. **Gunicorn with Socket Safety**:
   - Create directory `/run/gunicorn/` and assign ownership to the user that runs Gunicorn.
   - Assume the script runs as root for setup, but Gunicorn should run as `www-data` or the current user.
   - **Crucial**: Configure Gunicorn to bind to `unix:/run/gunicorn/{config.app_name}.sock`.
   - Ensure the systemd service file reflects this socket path.

7. **Nginx**:
   - Configure standard proxy to the unix socket above.
   - **Static Files**: configure `/static/` location to alias `{site_root}/static/` (MUST match the STATIC_ROOT set earlier).
   - Setup SSL with certbot.

8. **Formatting**:
   - Use quoted heredocs (e.g., `cat << 'EOF' > ...`) when writing config files to prevent bash variable expansion issues during script execution.
   - Handle line endings (use `sed -i 's/\\r$//'` on the generated file if needed, though usually fine via bash input).

OUTPUT JSON FORMAT:
{{
  "bashScript": "...",
  "nginxConfig": "...",
  "gunicornConfig": "...",
  "explanation": "..."
}}
"""


def _strip_code_fence(text: str) -> str:
    """Unwrap a JSON body the model put inside a markdown fence."""
    if "```json" in text:
        start = text.find("```json") + 7
        end = text.find("```", start)
        return text[start:end] if end != -1 else text[start:]
    if "```" in text:
        start = text.find("```") + 3
        end = text.find("```", start)
        return text[start:end] if end != -1 else text[start:]
    return text


def _load_json(text: str) -> Any:
    # Field values may contain fences of their own, so only unwrap on failure
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError:
        return json.loads(_strip_code_fence(text).strip())


def parse_generated_script(text: str, execution_command: str) -> GeneratedScript:
    """Parse the provider's JSON reply.

    Missing or empty fields get placeholders instead of failing the whole
    result. Text that is not a JSON object raises GenerationError.
    """
    try:
        data: Any = _load_json(text)
    except json.JSONDecodeError as e:
        raise GenerationError(
            "Response is not valid JSON", {"error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise GenerationError(
            "Response is not a JSON object", {"type": type(data).__name__}
        )

    raw = RawGeneratedScript.model_validate(data)
    return raw.to_script(execution_command)


class DeploymentScriptAgent(BaseAgent[DeploymentConfig, GeneratedScript]):
    """Agent that writes a Django deployment bundle for a server.

    This agent:
    1. Assembles the prompt from the deployment config
    2. Makes one request to the configured generation provider
    3. Parses and normalizes the JSON reply
    4. Adds the ssh command that runs the script on the server
    """

    def __init__(
        self,
        client_factory: Callable[[], GenerationClient] = get_generation_client,
    ):
        self._client_factory = client_factory
        super().__init__()

    @property
    def name(self) -> str:
        return "deployment_script"

    @property
    def description(self) -> str:
        return (
            "Generates a bash deployment script, nginx config and gunicorn unit "
            "for a Django project on Ubuntu"
        )

    @property
    def system_prompt(self) -> str:
        return SYSTEM_INSTRUCTION

    async def execute(self, input_data: DeploymentConfig) -> GeneratedScript:
        """Generate the deployment bundle.

        Raises:
            ConfigurationError: If the provider API key is missing.
            GenerationError: For any provider or parsing failure.
        """
        start_time = time.time()

        # Fails before any request is built when the key is missing
        client = self._client_factory()

        self.logger.info(
            "deployment_agent.started",
            provider=client.provider,
            domain=input_data.domain_name,
            server_ip=input_data.server_ip,
            env_var_count=len(input_data.env_vars),
        )

        prompt = build_prompt(input_data)
        execution_command = build_execution_command(
            input_data.ssh_user, input_data.server_ip
        )

        try:
            text = await client.generate(self.system_prompt, prompt)
            result = parse_generated_script(text, execution_command)
        except ConfigurationError:
            raise
        except Exception as e:
            self.logger.error(
                "deployment_agent.failed",
                provider=client.provider,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GenerationError(details={"provider": client.provider}) from e

        duration_ms = int((time.time() - start_time) * 1000)
        self.logger.info(
            "deployment_agent.completed",
            provider=client.provider,
            script_lines=len(result.bash_script.splitlines()),
            duration_ms=duration_ms,
        )

        return result
