"""Base agent class for all AI agents."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from deploy_wizard.config import settings
from deploy_wizard.utils.logging import get_logger

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Base class for agents backed by a hosted model.

    All agents should inherit from this class and implement:
    - name: Agent identifier
    - description: What the agent does
    - system_prompt: Instructions for the model
    - execute(): Main execution logic
    """

    def __init__(self):
        self.logger = get_logger(f"agent.{self.name}")
        self._validate_config()

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent name/identifier."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this agent does."""
        pass

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """System prompt for the model."""
        pass

    def _validate_config(self) -> None:
        """Warn early when the provider credential is absent."""
        if not settings.generation_api_key:
            self.logger.warning(
                "api_key not set - agent will fail at runtime",
                provider=settings.generation_provider,
            )

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task.

        Args:
            input_data: Typed input for this agent

        Returns:
            Typed output from this agent
        """
        pass
