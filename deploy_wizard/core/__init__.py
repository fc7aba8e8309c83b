"""Core functionality for Deploy Wizard."""

from deploy_wizard.core.exceptions import (
    ConfigurationError,
    DeployWizardError,
    GenerationError,
    SessionNotFoundError,
    ValidationError,
    WizardBusyError,
    WizardTransitionError,
)

__all__ = [
    "DeployWizardError",
    "ConfigurationError",
    "GenerationError",
    "SessionNotFoundError",
    "ValidationError",
    "WizardBusyError",
    "WizardTransitionError",
]
