"""Base agent class for the Gemini-backed agents."""

from abc import ABC
from typing import Any, Optional

from google.genai import types


class BaseAgent(ABC):
    """Base class for all AI agents using Google Gemini."""

    def __init__(
        self,
        name: str,
        instructions: str,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        client: Any = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ):
        """Initialize the agent.

        Args:
            name: Agent name
            instructions: System instructions for the agent
            model: Google model to use
            api_key: Gemini API key (falls back to settings)
            client: Pre-built ``genai.Client``, mainly for tests
            temperature: Sampling temperature
            max_output_tokens: Response length cap
        """
        self.name = name
        self.instructions = instructions
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client = client

    def _get_client(self):
        """Get or create the Gemini client."""
        if self._client is None:
            from google import genai

            api_key = self.api_key
            if api_key is None:
                from core.config import settings

                api_key = settings.google_api_key
            self._client = genai.Client(api_key=api_key)
        return self._client

    async def run(
        self,
        contents: Any,
        json_response: bool = False,
    ) -> str:
        """Run the agent on a prompt (or a list of prompt parts).

        Args:
            contents: Prompt text or a list of ``types.Part``/strings
            json_response: Ask the model for a JSON response body

        Returns:
            Agent response text
        """
        client = self._get_client()

        config = types.GenerateContentConfig(
            system_instruction=self.instructions,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json" if json_response else None,
        )
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )

        return response.text or ""
