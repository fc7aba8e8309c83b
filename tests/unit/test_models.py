"""Unit tests for data models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from deploy_wizard.core.exceptions import ValidationError
from deploy_wizard.models.deployment import (
    BASH_SCRIPT_PLACEHOLDER,
    DeploymentConfig,
    EnvVar,
    GeneratedScript,
    RawGeneratedScript,
    WizardStep,
)


class TestDeploymentConfig:
    """Tests for DeploymentConfig."""

    def test_defaults(self):
        config = DeploymentConfig()

        assert config.repo_url == ""
        assert config.branch == "main"
        assert config.python_version == "3.10"
        assert config.github_token == ""
        assert config.ssh_user == "root"
        assert config.app_name == "django_app"
        assert config.wsgi_path == "config.wsgi:application"
        assert config.db_name == "django_db"
        assert config.db_user == "django_user"
        assert config.admin_user == "admin"

    def test_env_vars_seeded(self):
        config = DeploymentConfig()

        assert config.env_vars == [EnvVar(key="DJANGO_SECRET_KEY", value="")]

    def test_env_vars_not_shared_between_instances(self):
        first = DeploymentConfig()
        second = DeploymentConfig()
        first.add_env_var("DEBUG", "0")

        assert len(second.env_vars) == 1

    def test_accepts_camel_case(self):
        config = DeploymentConfig.model_validate(
            {"repoUrl": "https://github.com/u/p.git", "serverIp": "10.0.0.1"}
        )

        assert config.repo_url == "https://github.com/u/p.git"
        assert config.server_ip == "10.0.0.1"

    def test_dumps_camel_case(self):
        data = DeploymentConfig().model_dump(by_alias=True)

        assert "repoUrl" in data
        assert "wsgiPath" in data
        assert data["envVars"] == [{"key": "DJANGO_SECRET_KEY", "value": ""}]

    def test_null_token_is_empty(self):
        config = DeploymentConfig.model_validate({"githubToken": None})
        assert config.github_token == ""

    def test_rejects_unknown_fields(self):
        with pytest.raises(PydanticValidationError):
            DeploymentConfig.model_validate({"sshPort": 22})


class TestMissingFields:
    """Tests for per-step required field checks."""

    def test_project_details(self):
        config = DeploymentConfig()
        assert config.missing_fields(WizardStep.PROJECT_DETAILS) == ["repoUrl"]

    def test_server_details_is_cumulative(self):
        config = DeploymentConfig(repo_url="https://github.com/u/p.git")
        assert config.missing_fields(WizardStep.SERVER_DETAILS) == [
            "domainName",
            "serverIp",
        ]

    def test_app_config(self, complete_config: DeploymentConfig):
        config = complete_config.apply_updates(
            {"dbPassword": "", "email": "", "adminPassword": "", "dbUser": ""}
        )
        assert config.missing_fields(WizardStep.APP_CONFIG) == [
            "dbUser",
            "dbPassword",
            "email",
            "adminPassword",
        ]

    def test_complete(self, complete_config: DeploymentConfig):
        for step in WizardStep:
            assert complete_config.missing_fields(step) == []

    def test_optional_fields_not_required(self, complete_config: DeploymentConfig):
        config = complete_config.apply_updates(
            {"githubToken": "", "adminEmail": "", "envVars": []}
        )
        assert config.missing_fields(WizardStep.APP_CONFIG) == []


class TestApplyUpdates:
    """Tests for partial configuration updates."""

    def test_returns_new_instance(self):
        config = DeploymentConfig()
        updated = config.apply_updates({"repoUrl": "https://github.com/u/p.git"})

        assert updated is not config
        assert config.repo_url == ""
        assert updated.repo_url == "https://github.com/u/p.git"

    def test_snake_and_camel_keys(self):
        updated = DeploymentConfig().apply_updates(
            {"server_ip": "10.0.0.1", "domainName": "example.com"}
        )

        assert updated.server_ip == "10.0.0.1"
        assert updated.domain_name == "example.com"

    def test_env_vars_replaced(self):
        updated = DeploymentConfig().apply_updates(
            {"envVars": [{"key": "A", "value": "1"}, {"key": "A", "value": "2"}]}
        )

        assert [(v.key, v.value) for v in updated.env_vars] == [("A", "1"), ("A", "2")]

    def test_invalid_type(self):
        with pytest.raises(ValidationError) as exc_info:
            DeploymentConfig().apply_updates({"branch": ["main"]})

        assert exc_info.value.details["errors"]

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            DeploymentConfig().apply_updates({"sshPort": 22})


class TestEnvVarEditing:
    """Tests for index-based env var editing."""

    def test_add(self):
        config = DeploymentConfig()
        config.add_env_var("DEBUG", "0")

        assert [v.key for v in config.env_vars] == ["DJANGO_SECRET_KEY", "DEBUG"]

    def test_add_duplicate_key_kept(self):
        config = DeploymentConfig()
        config.add_env_var("DJANGO_SECRET_KEY", "other")

        assert len(config.env_vars) == 2

    def test_update_by_index(self):
        config = DeploymentConfig()
        config.add_env_var("DJANGO_SECRET_KEY", "first")
        config.update_env_var(1, value="second")

        assert config.env_vars[0].value == ""
        assert config.env_vars[1].value == "second"
        assert config.env_vars[1].key == "DJANGO_SECRET_KEY"

    def test_remove(self):
        config = DeploymentConfig()
        config.add_env_var("DEBUG", "0")
        removed = config.remove_env_var(0)

        assert removed.key == "DJANGO_SECRET_KEY"
        assert [v.key for v in config.env_vars] == ["DEBUG"]

    def test_remove_all(self):
        config = DeploymentConfig()
        config.remove_env_var(0)

        assert config.env_vars == []

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_out_of_range(self, index: int):
        config = DeploymentConfig()

        with pytest.raises(ValidationError):
            config.update_env_var(index, key="X")
        with pytest.raises(ValidationError):
            config.remove_env_var(index)


class TestGeneratedScript:
    """Tests for generated script models."""

    def test_frozen(self):
        script = GeneratedScript(
            bash_script="echo",
            nginx_config="server {}",
            gunicorn_config="[Unit]",
            explanation="done",
            execution_command="ssh",
        )

        with pytest.raises(PydanticValidationError):
            script.bash_script = "rm -rf /"

    def test_raw_to_script_fills_placeholders(self):
        raw = RawGeneratedScript.model_validate({"nginxConfig": "server {}"})
        script = raw.to_script("ssh root@1.2.3.4")

        assert script.bash_script == BASH_SCRIPT_PLACEHOLDER
        assert script.nginx_config == "server {}"
        assert script.execution_command == "ssh root@1.2.3.4"

    def test_wizard_step_order(self):
        assert list(WizardStep) == [
            WizardStep.PROJECT_DETAILS,
            WizardStep.SERVER_DETAILS,
            WizardStep.APP_CONFIG,
            WizardStep.GENERATION,
        ]
