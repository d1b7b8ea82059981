"""Completion service client using native Google AI."""
from typing import List, Optional

from google import genai
from google.genai import types

from .models import ChatMessage
from spendwise.utils.logger import get_logger
from spendwise.utils.exceptions import RetryableCompletionError

logger = get_logger()


class CompletionClient:
    """Sends role-tagged chat turns to Gemini and returns the reply text."""

    def __init__(self, api_key: str, client: Optional[genai.Client] = None):
        """
        Initialize completion client.

        Args:
            api_key: Google AI API key
            client: Pre-built SDK client (optional)
        """
        self.client = client or genai.Client(api_key=api_key)

    async def complete(
        self,
        model: str,
        messages: List[ChatMessage],
        temperature: float,
        max_tokens: int
    ) -> str:
        """
        Request a single text completion.

        Args:
            model: Model identifier
            messages: Ordered chat turns; system turns become the system instruction
            temperature: Sampling temperature
            max_tokens: Output token budget

        Returns:
            Reply text, empty string when the service sent none

        Raises:
            RetryableCompletionError: Transport, quota or SDK failure
        """
        system_instruction = "\n\n".join(m.content for m in messages if m.role == "system")
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)]
            )
            for m in messages
            if m.role != "system"
        ]
        config = types.GenerateContentConfig(
            system_instruction=system_instruction or None,
            temperature=temperature,
            max_output_tokens=max_tokens
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config
            )
            text = response.text
        except Exception as e:
            logger.error(f"Completion request to {model} failed: {e}")
            raise RetryableCompletionError(f"Completion request failed: {e}") from e

        if not text:
            logger.warning(f"Completion from {model} returned empty response")
            return ""
        return text.strip()
