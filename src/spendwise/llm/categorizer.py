"""LLM-based expense categorization."""
from typing import List

from .client import CompletionClient
from .models import ChatMessage
from spendwise.utils.logger import get_logger

logger = get_logger()

CATEGORIES = [
    "Food",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Bills",
    "Healthcare",
    "Other",
]


class ExpenseCategorizer:
    """Assigns one of the fixed categories to an expense description."""

    def __init__(
        self,
        client: CompletionClient,
        model_name: str,
        temperature: float = 0.0,
        max_tokens: int = 8
    ):
        self.client = client
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def categorize(self, description: str) -> str:
        """
        Categorize an expense description.

        Args:
            description: Free-text expense description

        Returns:
            Category name; "Other" when the reply is not an exact category
        """
        try:
            reply = await self.client.complete(
                self.model_name,
                self._build_messages(description),
                self.temperature,
                self.max_tokens
            )
        except Exception as e:
            logger.error(f"Categorization failed for '{description}': {e}")
            return "Other"

        category = reply.strip()
        if category in CATEGORIES:
            return category

        # Fallback to "Other"
        logger.warning(f"Invalid category '{category}' for '{description}', using 'Other'")
        return "Other"

    @staticmethod
    def _build_messages(description: str) -> List[ChatMessage]:
        return [
            ChatMessage(
                role="system",
                content=f"Return only one category: {', '.join(CATEGORIES)}."
            ),
            ChatMessage(role="user", content=description),
        ]
