"""Custom exceptions for Deploy Wizard."""

from typing import Any

GENERATION_FAILED_MESSAGE = "Failed to generate deployment script. Please try again."


class DeployWizardError(Exception):
    """Base exception for Deploy Wizard."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DeployWizardError):
    """Invalid input to the deployment configuration."""

    status_code = 400


class ConfigurationError(DeployWizardError):
    """Required service configuration is missing."""

    status_code = 502


class GenerationError(DeployWizardError):
    """The generation provider failed or returned unusable output."""

    status_code = 502

    def __init__(
        self,
        message: str = GENERATION_FAILED_MESSAGE,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class WizardTransitionError(DeployWizardError):
    """A wizard step change was refused."""

    status_code = 400

    def __init__(self, message: str, missing_fields: list[str] | None = None):
        details = {}
        if missing_fields:
            details["missing_fields"] = missing_fields
        super().__init__(message, details)
        self.missing_fields = missing_fields or []


class WizardBusyError(DeployWizardError):
    """A generation request is already in flight for the session."""

    status_code = 409

    def __init__(self, session_id: str):
        super().__init__(
            "A deployment script is already being generated for this session",
            {"session_id": session_id},
        )


class SessionNotFoundError(DeployWizardError):
    """Wizard session not found or expired."""

    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(
            f"Session not found: {session_id}",
            {"session_id": session_id},
        )
