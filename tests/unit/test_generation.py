"""Unit tests for generation provider clients."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from deploy_wizard.config import Settings
from deploy_wizard.core.exceptions import ConfigurationError, GenerationError
from deploy_wizard.services.generation import (
    ClaudeGenerationClient,
    GeminiGenerationClient,
    get_generation_client,
)


@pytest.fixture
def mock_genai():
    """Patch the google-genai module used by the Gemini client."""
    with patch("deploy_wizard.services.generation.genai") as mock_module:
        aio = mock_module.Client.return_value.aio
        aio.__aenter__ = AsyncMock(return_value=aio)
        aio.__aexit__ = AsyncMock(return_value=None)
        aio.models.generate_content = AsyncMock(
            return_value=MagicMock(text='{"bashScript": "echo"}')
        )
        yield mock_module


class TestGetGenerationClient:
    """Tests for provider selection."""

    def test_gemini_is_default(self):
        client = get_generation_client(Settings(gemini_api_key="key"))

        assert isinstance(client, GeminiGenerationClient)
        assert client.model == "gemini-2.5-flash"

    def test_claude_provider(self):
        client = get_generation_client(
            Settings(generation_provider="claude", anthropic_api_key="key")
        )

        assert isinstance(client, ClaudeGenerationClient)
        assert client.provider == "claude"

    def test_missing_gemini_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_generation_client(Settings(gemini_api_key=""))

        assert exc_info.value.details == {"provider": "gemini"}

    def test_missing_anthropic_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_generation_client(
                Settings(generation_provider="claude", anthropic_api_key="")
            )

        assert "ANTHROPIC_API_KEY" in exc_info.value.message


class TestGeminiGenerationClient:
    """Tests for GeminiGenerationClient."""

    @pytest.mark.asyncio
    async def test_generate_sends_json_mode_request(self, mock_genai):
        client = GeminiGenerationClient(api_key="key", model="gemini-2.5-flash")

        text = await client.generate("system text", "prompt text")

        assert text == '{"bashScript": "echo"}'
        mock_genai.Client.assert_called_once_with(api_key="key")

        generate_content = mock_genai.Client.return_value.aio.models.generate_content
        generate_content.assert_awaited_once()
        kwargs = generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "prompt text"
        assert kwargs["config"].system_instruction == "system text"
        assert kwargs["config"].response_mime_type == "application/json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "  \n"])
    async def test_empty_response_raises(self, mock_genai, text):
        mock_genai.Client.return_value.aio.models.generate_content.return_value = (
            MagicMock(text=text)
        )
        client = GeminiGenerationClient(api_key="key", model="gemini-2.5-flash")

        with pytest.raises(GenerationError):
            await client.generate("system", "prompt")

    @pytest.mark.asyncio
    async def test_sdk_errors_propagate(self, mock_genai):
        mock_genai.Client.return_value.aio.models.generate_content.side_effect = (
            RuntimeError("permission denied")
        )
        client = GeminiGenerationClient(api_key="key", model="gemini-2.5-flash")

        with pytest.raises(RuntimeError, match="permission denied"):
            await client.generate("system", "prompt")

    @pytest.mark.asyncio
    async def test_async_client_is_closed(self, mock_genai):
        client = GeminiGenerationClient(api_key="key", model="gemini-2.5-flash")

        await client.generate("system", "prompt")

        mock_genai.Client.return_value.aio.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_async_client_is_closed_on_error(self, mock_genai):
        aio = mock_genai.Client.return_value.aio
        aio.models.generate_content.side_effect = RuntimeError("quota exceeded")
        client = GeminiGenerationClient(api_key="key", model="gemini-2.5-flash")

        with pytest.raises(RuntimeError):
            await client.generate("system", "prompt")

        aio.__aexit__.assert_awaited_once()
