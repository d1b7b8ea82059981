"""LLM-based spending insight generation."""
import json
import time
from typing import List

from .client import CompletionClient
from .content import GENERATION_FAILED, fallback_insights
from .models import ChatMessage, ExpenseAggregation, Insight, Outcome
from .parsing import parse_insight_array
from spendwise.utils.logger import get_logger

logger = get_logger()

SYSTEM_PROMPT = """You are a financial AI analyst. Analyze expense data and return ONLY a valid JSON array of 3-4 insights. Each insight must have:
- type: "warning" (for high spending alerts), "success" (for positive patterns), "tip" (for savings opportunities), or "info" (for general information)
- title: A concise, actionable title (e.g., "High Transportation Costs", "Potential Savings on Food")
- message: A detailed summary with specific amounts, timeframes, and categories (e.g., "You spent $183 on Transportation in the last 4 days, with $133 on gas alone.")
- action: A specific, actionable suggestion (e.g., "Consider carpooling, public transport, or fuel-efficient routes to reduce gas expenses.")
- confidence: A number between 0.5 and 1.0

Return ONLY the JSON array, no markdown, no code blocks, no explanation."""


class InsightGenerator:
    """Turns an expense aggregation into typed insights via the completion service."""

    def __init__(
        self,
        client: CompletionClient,
        model_name: str,
        temperature: float = 0.5,
        max_tokens: int = 1200
    ):
        self.client = client
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, aggregation: ExpenseAggregation) -> Outcome[List[Insight]]:
        """
        Generate insights for an aggregation.

        Args:
            aggregation: Summary of the user's recent expenses

        Returns:
            Outcome with the parsed insights, or the single "AI Unavailable"
            insight when the call or the parse fails
        """
        try:
            reply = await self.client.complete(
                self.model_name,
                self._build_messages(aggregation),
                self.temperature,
                self.max_tokens
            )
            items = parse_insight_array(reply)
        except Exception as e:
            logger.error(f"Insight generation failed: {e}")
            return Outcome.fallback(fallback_insights(GENERATION_FAILED), e)

        stamp = int(time.time() * 1000)
        insights = [
            Insight(
                id=f"ai-{stamp}-{index}",
                type=item["type"],
                title=item["title"],
                message=item["message"],
                action=item["action"],
                confidence=item["confidence"]
            )
            for index, item in enumerate(items)
        ]

        logger.info(f"Generated {len(insights)} insights from {aggregation.total_expenses} expenses")
        return Outcome.success(insights)

    @staticmethod
    def _build_messages(aggregation: ExpenseAggregation) -> List[ChatMessage]:
        summary = json.dumps(aggregation.to_prompt_dict(), indent=2, ensure_ascii=False)
        return [
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=f"Analyze this expense data and generate financial insights:\n{summary}"
            ),
        ]
