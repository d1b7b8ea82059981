"""Insights orchestrator for the per-request pipeline."""
import asyncio
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Mapping, Optional

from spendwise.config import AppSettings
from spendwise.llm import (
    Aggregator,
    AnswerSynthesizer,
    CompletionClient,
    ExpenseAggregation,
    ExpenseRecord,
    Insight,
    InsightGenerator
)
from spendwise.llm.content import NO_DATA, TOTAL_FAILURE, fallback_insights
from spendwise.storage import IdentityResolver, RecordStore, StoredRecord
from spendwise.utils.logger import get_logger, set_user_context
from spendwise.utils.exceptions import AuthenticationError

logger = get_logger()


def to_expense_record(row: StoredRecord) -> ExpenseRecord:
    """Convert a stored row into the pipeline's expense record."""
    return ExpenseRecord(
        id=row.id,
        amount=row.amount,
        category=row.category or "Other",
        description=row.text,
        date=row.date
    )


class InsightsOrchestrator:
    """Fetches recent expenses, generates insights and attaches answers."""

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        record_store: RecordStore,
        insight_generator: InsightGenerator,
        answer_synthesizer: AnswerSynthesizer,
        aggregator: Optional[Aggregator] = None,
        lookback_days: int = 30,
        max_records: int = 50,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        """
        Initialize orchestrator.

        Args:
            identity_resolver: Maps the caller's session to a user id
            record_store: Source of the user's expense records
            insight_generator: First completion step
            answer_synthesizer: Per-insight completion step
            aggregator: Expense aggregator (default instance if omitted)
            lookback_days: Size of the record window
            max_records: Maximum records fetched per request
            clock: Current time provider
        """
        self.identity_resolver = identity_resolver
        self.record_store = record_store
        self.insight_generator = insight_generator
        self.answer_synthesizer = answer_synthesizer
        self.aggregator = aggregator or Aggregator()
        self.lookback_days = lookback_days
        self.max_records = max_records
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        identity_resolver: IdentityResolver,
        record_store: RecordStore,
        client: CompletionClient
    ) -> "InsightsOrchestrator":
        """Wire the pipeline from application settings."""
        return cls(
            identity_resolver=identity_resolver,
            record_store=record_store,
            insight_generator=InsightGenerator(
                client,
                settings.llm_model_name,
                temperature=settings.insight_temperature,
                max_tokens=settings.insight_max_tokens
            ),
            answer_synthesizer=AnswerSynthesizer(
                client,
                settings.llm_model_name,
                temperature=settings.answer_temperature,
                max_tokens=settings.answer_max_tokens,
                max_lines=settings.answer_max_lines
            ),
            lookback_days=settings.lookback_days,
            max_records=settings.max_records
        )

    async def get_insights(self, session: Mapping[str, Any]) -> List[Insight]:
        """
        Build the insight list for the calling user.

        Args:
            session: Caller session handed to the identity resolver

        Returns:
            Ordered, non-empty list of insights

        Raises:
            AuthenticationError: The caller could not be identified
        """
        try:
            user_id = await asyncio.to_thread(self.identity_resolver.resolve, session)
            if not user_id:
                raise AuthenticationError("User not authenticated")

            set_user_context(user_id)
            return await self._build_insights(user_id)
        except AuthenticationError:
            raise
        except Exception as e:
            logger.error(f"Error getting AI insights: {e}")
            return fallback_insights(TOTAL_FAILURE)
        finally:
            set_user_context(None)

    async def _build_insights(self, user_id: str) -> List[Insight]:
        since = self.clock() - timedelta(days=self.lookback_days)
        rows = await asyncio.to_thread(
            self.record_store.fetch_recent, user_id, since, self.max_records
        )

        if not rows:
            logger.info("No recent expenses, returning onboarding insights")
            return fallback_insights(NO_DATA)

        aggregation = self.aggregator.aggregate([to_expense_record(row) for row in rows])

        generated = await self.insight_generator.generate(aggregation)
        if generated.degraded:
            logger.warning(f"Insight generation degraded: {generated.error}")

        # Fan out one answer per insight; gather keeps the input order
        return list(await asyncio.gather(
            *(self._with_answer(insight, aggregation) for insight in generated.value)
        ))

    async def _with_answer(self, insight: Insight, aggregation: ExpenseAggregation) -> Insight:
        try:
            outcome = await self.answer_synthesizer.answer(insight, aggregation)
        except Exception as e:
            logger.error(f"Error generating answer for insight {insight.id}: {e}")
            return insight

        if outcome.degraded:
            logger.warning(f"Answer for insight {insight.id} fell back: {outcome.error}")
        return replace(insight, ai_answer=outcome.value)
