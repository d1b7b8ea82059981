"""Fixed insight content used instead of generated output."""
from dataclasses import replace
from typing import Dict, List, Tuple

from .models import Insight

NO_DATA = "no-data"
GENERATION_FAILED = "generation-failed"
TOTAL_FAILURE = "total-failure"

FALLBACK_INSIGHTS: Dict[str, Tuple[Insight, ...]] = {
    NO_DATA: (
        Insight(
            id="welcome-1",
            type="info",
            title="Welcome to Spendwise!",
            message=(
                "Start adding your expenses to get personalized AI insights "
                "about your spending patterns."
            ),
            action="Add your first expense",
            confidence=1.0,
        ),
        Insight(
            id="welcome-2",
            type="tip",
            title="Track Regularly",
            message=(
                "For best results, try to log expenses daily. This helps our AI "
                "provide more accurate insights."
            ),
            action="Set daily reminders",
            confidence=1.0,
        ),
    ),
    GENERATION_FAILED: (
        Insight(
            id="fallback",
            type="info",
            title="AI Unavailable",
            message="Try again later.",
            confidence=0.5,
        ),
    ),
    TOTAL_FAILURE: (
        Insight(
            id="error-1",
            type="warning",
            title="Insights Temporarily Unavailable",
            message=(
                "We're having trouble analyzing your expenses right now. "
                "Please try again in a few minutes."
            ),
            action="Retry analysis",
            confidence=0.5,
        ),
    ),
}

ANSWER_FALLBACK = "Unable to process right now."
EMPTY_ANSWER = "No answer available."


def fallback_insights(scenario: str) -> List[Insight]:
    """Return fresh copies of the fixed insights for a scenario."""
    return [replace(insight) for insight in FALLBACK_INSIGHTS[scenario]]
