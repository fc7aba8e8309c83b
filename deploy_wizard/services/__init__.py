"""Services for Deploy Wizard."""

from deploy_wizard.services.generation import (
    ClaudeGenerationClient,
    GeminiGenerationClient,
    GenerationClient,
    get_generation_client,
)

__all__ = [
    "ClaudeGenerationClient",
    "GeminiGenerationClient",
    "GenerationClient",
    "get_generation_client",
]
