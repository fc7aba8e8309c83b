"""Clients for the hosted models that write deployment scripts.

Each client performs a single request: a system instruction plus a task
prompt in, raw response text out. There is no retry and no streaming.
"""

from abc import ABC, abstractmethod

from google import genai
from google.genai import types

from deploy_wizard.config import Settings, get_settings
from deploy_wizard.core.exceptions import ConfigurationError, GenerationError
from deploy_wizard.utils.logging import get_logger


class GenerationClient(ABC):
    """Base class for generation providers."""

    provider: str = ""
    api_key_env: str = ""

    def __init__(self, api_key: str, model: str):
        if not api_key:
            raise ConfigurationError(
                f"API key is missing. Please set the {self.api_key_env} environment variable.",
                {"provider": self.provider},
            )
        self.api_key = api_key
        self.model = model
        self.logger = get_logger(f"generation.{self.provider}")

    async def generate(self, system_instruction: str, prompt: str) -> str:
        """Send the prompt and return the response text.

        Raises:
            GenerationError: If the provider returns no text.
        """
        self.logger.info(
            "generation.request",
            model=self.model,
            prompt_length=len(prompt),
        )
        text = await self._generate(system_instruction, prompt)
        if not text or not text.strip():
            self.logger.error("generation.empty_response", model=self.model)
            raise GenerationError(
                f"Empty response from {self.provider}",
                {"provider": self.provider},
            )
        self.logger.info("generation.response", model=self.model, length=len(text))
        return text

    @abstractmethod
    async def _generate(self, system_instruction: str, prompt: str) -> str | None:
        pass


class GeminiGenerationClient(GenerationClient):
    """Google Gemini via the google-genai SDK, in JSON response mode."""

    provider = "gemini"
    api_key_env = "GEMINI_API_KEY"

    async def _generate(self, system_instruction: str, prompt: str) -> str | None:
        # The async client owns an HTTP session that has to be closed
        async with genai.Client(api_key=self.api_key).aio as client:
            response = await client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    response_mime_type="application/json",
                ),
            )
        return response.text


class ClaudeGenerationClient(GenerationClient):
    """Claude via claude-agent-sdk with tools disabled."""

    provider = "claude"
    api_key_env = "ANTHROPIC_API_KEY"

    async def _generate(self, system_instruction: str, prompt: str) -> str | None:
        from claude_agent_sdk import (
            AssistantMessage,
            ClaudeAgentOptions,
            ClaudeSDKClient,
            TextBlock,
        )

        options = ClaudeAgentOptions(
            system_prompt=system_instruction,
            model=self.model,
            allowed_tools=[],
            max_turns=1,
            permission_mode="plan",  # Read-only mode
            env={"ANTHROPIC_API_KEY": self.api_key},
        )

        response_text = ""
        async with ClaudeSDKClient(options=options) as client:
            await client.query(prompt)
            async for message in client.receive_response():
                if isinstance(message, AssistantMessage):
                    for block in message.content:
                        if isinstance(block, TextBlock):
                            response_text += block.text
        return response_text


def get_generation_client(settings: Settings | None = None) -> GenerationClient:
    """Build the client for the configured provider.

    Raises:
        ConfigurationError: If the provider's API key is not set.
    """
    settings = settings or get_settings()
    if settings.generation_provider == "claude":
        return ClaudeGenerationClient(settings.anthropic_api_key, settings.claude_model)
    return GeminiGenerationClient(settings.gemini_api_key, settings.gemini_model)
