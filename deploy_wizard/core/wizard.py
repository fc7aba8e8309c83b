"""Wizard state machine.

Four linear steps with no branching. Leaving APP_CONFIG is only possible
by generating a script; a failed generation leaves the wizard where it was.
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from deploy_wizard.agents.base import BaseAgent
from deploy_wizard.core.exceptions import (
    DeployWizardError,
    GENERATION_FAILED_MESSAGE,
    WizardBusyError,
    WizardTransitionError,
)
from deploy_wizard.models.deployment import (
    DeploymentConfig,
    GeneratedScript,
    WizardStep,
)
from deploy_wizard.utils.logging import get_logger

logger = get_logger(__name__)


class WizardSession(BaseModel):
    """One user's pass through the wizard."""

    id: UUID = Field(default_factory=uuid4)
    step: WizardStep = WizardStep.PROJECT_DETAILS
    config: DeploymentConfig = Field(default_factory=DeploymentConfig)

    # Last successful generation, kept when navigating back
    result: GeneratedScript | None = None
    error: str | None = None

    # At most one generation in flight per session
    busy: bool = False

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def next_step(self) -> WizardStep:
        """Move forward one step if the current step is complete."""
        self._ensure_idle()
        if self.step >= WizardStep.APP_CONFIG:
            raise WizardTransitionError(
                f"Cannot advance from {self.step.name} without generating a script"
            )

        missing = self.config.missing_fields(self.step)
        if missing:
            raise WizardTransitionError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        return self._move_to(WizardStep(self.step + 1))

    def previous_step(self) -> WizardStep:
        """Move back one step. The last result is kept."""
        self._ensure_idle()
        if self.step == WizardStep.PROJECT_DETAILS:
            raise WizardTransitionError("Already at the first step")
        return self._move_to(WizardStep(self.step - 1))

    async def generate(
        self, agent: BaseAgent[DeploymentConfig, GeneratedScript]
    ) -> GeneratedScript:
        """Run generation and move to GENERATION on success.

        On failure the message is stored in ``error``, the step stays at
        APP_CONFIG, and the error is re-raised.
        """
        if self.step != WizardStep.APP_CONFIG:
            raise WizardTransitionError(
                f"Scripts can only be generated from {WizardStep.APP_CONFIG.name}"
            )

        missing = self.config.missing_fields(WizardStep.APP_CONFIG)
        if missing:
            raise WizardTransitionError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        self._ensure_idle()

        self.busy = True
        self.error = None
        self.touch()

        # Snapshot so edits made while the request is in flight don't leak in
        config = self.config.model_copy(deep=True)

        try:
            result = await agent.execute(config)
        except DeployWizardError as e:
            self.error = e.message or GENERATION_FAILED_MESSAGE
            logger.warning(
                "wizard.generation_failed",
                session_id=str(self.id),
                error=self.error,
            )
            raise
        finally:
            self.busy = False
            self.touch()

        self.result = result
        if self.step == WizardStep.APP_CONFIG:
            self._move_to(WizardStep.GENERATION)
        return result

    def _ensure_idle(self) -> None:
        if self.busy:
            raise WizardBusyError(str(self.id))

    def _move_to(self, step: WizardStep) -> WizardStep:
        logger.info(
            "wizard.step_changed",
            session_id=str(self.id),
            from_step=self.step.name,
            to_step=step.name,
        )
        self.step = step
        self.touch()
        return step
