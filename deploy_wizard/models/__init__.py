"""Data models for Deploy Wizard."""

from deploy_wizard.models.deployment import (
    DeploymentConfig,
    EnvVar,
    GeneratedScript,
    RawGeneratedScript,
    WizardStep,
)

__all__ = [
    "DeploymentConfig",
    "EnvVar",
    "GeneratedScript",
    "RawGeneratedScript",
    "WizardStep",
]
