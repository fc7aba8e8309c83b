"""Deployment configuration and generated script models."""

from enum import IntEnum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from deploy_wizard.core.exceptions import ValidationError

BASH_SCRIPT_PLACEHOLDER = "# Error generating script"
NGINX_CONFIG_PLACEHOLDER = "# Error generating nginx config"
GUNICORN_CONFIG_PLACEHOLDER = "# Error generating gunicorn config"
EXPLANATION_PLACEHOLDER = "No explanation provided."


class WizardStep(IntEnum):
    """Steps of the deployment wizard, in order."""

    PROJECT_DETAILS = 1
    SERVER_DETAILS = 2
    APP_CONFIG = 3
    GENERATION = 4


# Fields that must be non-empty before leaving each step
REQUIRED_FIELDS: dict[WizardStep, tuple[str, ...]] = {
    WizardStep.PROJECT_DETAILS: ("repo_url",),
    WizardStep.SERVER_DETAILS: ("domain_name", "server_ip"),
    WizardStep.APP_CONFIG: (
        "db_name",
        "db_user",
        "db_password",
        "email",
        "admin_password",
    ),
    WizardStep.GENERATION: (),
}


class CamelModel(BaseModel):
    """Base model exposing camelCase names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EnvVar(CamelModel):
    """A single extra environment variable for the deployed app."""

    key: str = ""
    value: str = ""


def default_env_vars() -> list[EnvVar]:
    return [EnvVar(key="DJANGO_SECRET_KEY")]


class DeploymentConfig(CamelModel):
    """Everything the wizard collects about the project and target server."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    # Step 1: Project
    repo_url: str = ""
    branch: str = "main"
    python_version: str = "3.10"
    github_token: str = ""  # Only needed for private repos

    # Step 2: Server
    server_ip: str = ""
    ssh_user: str = "root"
    domain_name: str = ""

    # Step 3: App Config
    app_name: str = "django_app"
    wsgi_path: str = "config.wsgi:application"
    email: str = ""  # Certbot contact

    # Database
    db_name: str = "django_db"
    db_user: str = "django_user"
    db_password: str = ""

    # Django admin
    admin_user: str = "admin"
    admin_email: str = ""
    admin_password: str = ""

    env_vars: list[EnvVar] = Field(default_factory=default_env_vars)

    @field_validator("github_token", mode="before")
    @classmethod
    def empty_token_for_none(cls, value: Any) -> Any:
        return "" if value is None else value

    def missing_fields(self, step: WizardStep) -> list[str]:
        """Return the camelCase names of required fields still empty.

        Requirements are cumulative: leaving a step needs every field
        required by that step and all earlier ones.
        """
        fields = type(self).model_fields
        missing = []
        for current in WizardStep:
            if current > step:
                break
            for name in REQUIRED_FIELDS[current]:
                if not getattr(self, name):
                    missing.append(fields[name].alias or name)
        return missing

    def apply_updates(self, updates: Mapping[str, Any]) -> "DeploymentConfig":
        """Return a new config with the given fields replaced.

        Keys may use either the camelCase or the snake_case spelling.
        """
        fields = type(self).model_fields
        aliases = {name: info.alias or name for name, info in fields.items()}
        merged = self.model_dump(by_alias=True)
        for key, value in updates.items():
            merged[aliases.get(key, key)] = value
        try:
            return type(self).model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid deployment configuration",
                {
                    "errors": e.errors(
                        include_url=False, include_context=False, include_input=False
                    )
                },
            ) from e

    def add_env_var(self, key: str = "", value: str = "") -> EnvVar:
        env_var = EnvVar(key=key, value=value)
        self.env_vars = [*self.env_vars, env_var]
        return env_var

    def update_env_var(
        self, index: int, key: str | None = None, value: str | None = None
    ) -> EnvVar:
        current = self._env_var_at(index)
        updated = EnvVar(
            key=current.key if key is None else key,
            value=current.value if value is None else value,
        )
        env_vars = list(self.env_vars)
        env_vars[index] = updated
        self.env_vars = env_vars
        return updated

    def remove_env_var(self, index: int) -> EnvVar:
        removed = self._env_var_at(index)
        self.env_vars = [v for i, v in enumerate(self.env_vars) if i != index]
        return removed

    def _env_var_at(self, index: int) -> EnvVar:
        if not 0 <= index < len(self.env_vars):
            raise ValidationError(
                f"No environment variable at index {index}",
                {"index": index, "count": len(self.env_vars)},
            )
        return self.env_vars[index]


class GeneratedScript(CamelModel):
    """Result of one successful generation. Replaced, never edited."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    bash_script: str
    nginx_config: str
    gunicorn_config: str
    explanation: str
    execution_command: str


class RawGeneratedScript(CamelModel):
    """The JSON object returned by the generation provider.

    Every field is optional. Falsy values are treated as missing and
    truthy non-string values are stringified.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    bash_script: str | None = None
    nginx_config: str | None = None
    gunicorn_config: str | None = None
    explanation: str | None = None

    @field_validator(
        "bash_script", "nginx_config", "gunicorn_config", "explanation", mode="before"
    )
    @classmethod
    def normalize_text(cls, value: Any) -> str | None:
        if not value:
            return None
        if not isinstance(value, str):
            return str(value)
        return value

    def to_script(self, execution_command: str) -> GeneratedScript:
        """Fill in placeholders for anything the provider left out."""
        return GeneratedScript(
            bash_script=self.bash_script or BASH_SCRIPT_PLACEHOLDER,
            nginx_config=self.nginx_config or NGINX_CONFIG_PLACEHOLDER,
            gunicorn_config=self.gunicorn_config or GUNICORN_CONFIG_PLACEHOLDER,
            explanation=self.explanation or EXPLANATION_PLACEHOLDER,
            execution_command=execution_command,
        )
