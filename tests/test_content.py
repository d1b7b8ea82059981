"""Tests for the fixed insight table."""
import unittest

from spendwise.llm.content import (
    ANSWER_FALLBACK,
    FALLBACK_INSIGHTS,
    GENERATION_FAILED,
    NO_DATA,
    TOTAL_FAILURE,
    fallback_insights
)


class TestFallbackInsights(unittest.TestCase):
    """Test fallback content table."""

    def test_scenarios(self):
        self.assertEqual([i.id for i in FALLBACK_INSIGHTS[NO_DATA]], ["welcome-1", "welcome-2"])
        self.assertEqual(FALLBACK_INSIGHTS[GENERATION_FAILED][0].title, "AI Unavailable")
        self.assertEqual(FALLBACK_INSIGHTS[TOTAL_FAILURE][0].type, "warning")
        self.assertEqual(ANSWER_FALLBACK, "Unable to process right now.")

    def test_every_entry_well_formed(self):
        for scenario, insights in FALLBACK_INSIGHTS.items():
            self.assertTrue(insights, scenario)
            for insight in insights:
                self.assertIn(insight.type, ("warning", "info", "success", "tip"))
                self.assertTrue(0.0 <= insight.confidence <= 1.0)
                self.assertTrue(insight.title and insight.message)

    def test_copies_are_independent(self):
        """Mutating a returned insight leaves the table untouched."""
        insight = fallback_insights(NO_DATA)[0]
        insight.ai_answer = "changed"

        self.assertIsNone(FALLBACK_INSIGHTS[NO_DATA][0].ai_answer)
        self.assertIsNone(fallback_insights(NO_DATA)[0].ai_answer)

    def test_to_dict_omits_empty_optionals(self):
        data = fallback_insights(GENERATION_FAILED)[0].to_dict()
        self.assertEqual(data, {
            "id": "fallback",
            "type": "info",
            "title": "AI Unavailable",
            "message": "Try again later.",
            "confidence": 0.5,
        })


if __name__ == "__main__":
    unittest.main()
