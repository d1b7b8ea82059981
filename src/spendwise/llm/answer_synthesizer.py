"""Narrative answers expanding a single insight."""
import json
from typing import List

from .client import CompletionClient
from .content import ANSWER_FALLBACK, EMPTY_ANSWER
from .models import ChatMessage, ExpenseAggregation, Insight, Outcome
from .parsing import sanitize_answer
from spendwise.utils.logger import get_logger

logger = get_logger()

SYSTEM_PROMPT = (
    "You are a financial advisor. Write a concise paragraph (maximum 6-7 lines) with "
    "actionable advice. Use paragraph format only - NO numbered lists, NO bullet points, "
    "NO markdown formatting, NO bold text, NO headings. Write in flowing sentences. "
    "Include specific amounts and timeframes when relevant. Be direct and practical."
)


def build_question(insight: Insight) -> str:
    """Question text for an insight: title, message and optional action."""
    return f"{insight.title}: {insight.message} {insight.action or ''}".strip()


class AnswerSynthesizer:
    """Asks the completion service to elaborate one insight as plain prose."""

    def __init__(
        self,
        client: CompletionClient,
        model_name: str,
        temperature: float = 0.6,
        max_tokens: int = 150,
        max_lines: int = 7
    ):
        self.client = client
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_lines = max_lines

    async def answer(self, insight: Insight, aggregation: ExpenseAggregation) -> Outcome[str]:
        """
        Produce a short paragraph for an insight.

        Args:
            insight: Insight to elaborate
            aggregation: Same aggregation the insight was generated from

        Returns:
            Outcome with the sanitized paragraph, or "Unable to process right now."
        """
        try:
            reply = await self.client.complete(
                self.model_name,
                self._build_messages(build_question(insight), aggregation),
                self.temperature,
                self.max_tokens
            )
            if not reply.strip():
                return Outcome.success(EMPTY_ANSWER)
            return Outcome.success(sanitize_answer(reply, self.max_lines))
        except Exception as e:
            logger.error(f"Answer synthesis failed for insight {insight.id}: {e}")
            return Outcome.fallback(ANSWER_FALLBACK, e)

    def _build_messages(self, question: str, aggregation: ExpenseAggregation) -> List[ChatMessage]:
        summary = json.dumps(aggregation.to_prompt_dict(compact=True), indent=2, ensure_ascii=False)
        return [
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=(
                    f"Expense Data: {summary}\n\n"
                    f"Question/Insight: {question}\n\n"
                    f"Provide a concise paragraph analysis ({self.max_lines - 1}-{self.max_lines} "
                    "lines maximum) with specific recommendations and potential savings. "
                    "Write in paragraph format only - no lists, no bullets, no formatting."
                )
            ),
        ]
