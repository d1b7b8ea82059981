"""Tests for per-insight answer synthesis."""
import unittest

from spendwise.llm.aggregator import Aggregator
from spendwise.llm.answer_synthesizer import AnswerSynthesizer, build_question
from spendwise.llm.models import ExpenseRecord, Insight


class FakeCompletionClient:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, model, messages, temperature, max_tokens):
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error:
            raise self.error
        return self.reply


INSIGHT = Insight(
    id="ai-1-0",
    type="warning",
    title="High Food Costs",
    message="You spent $60 on food.",
    action="Cook at home",
    confidence=0.9,
)


def sample_aggregation():
    return Aggregator().aggregate([
        ExpenseRecord("1", 60, "Food", "Groceries", "2025-05-01T10:00:00.000Z"),
    ])


class TestAnswerSynthesizer(unittest.IsolatedAsyncioTestCase):
    """Test AnswerSynthesizer functionality."""

    async def test_answer_sanitized(self):
        """Markdown in the reply is flattened to plain prose."""
        client = FakeCompletionClient("## Plan\n**Cut** takeout.\n1. Cook twice a week")
        synthesizer = AnswerSynthesizer(client, "test-model")

        outcome = await synthesizer.answer(INSIGHT, sample_aggregation())

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.value, "Plan\nCut takeout.\nCook twice a week")

    async def test_long_answer_truncated(self):
        client = FakeCompletionClient("\n".join(f"Sentence {i}." for i in range(10)))
        synthesizer = AnswerSynthesizer(client, "test-model")

        outcome = await synthesizer.answer(INSIGHT, sample_aggregation())

        self.assertEqual(outcome.value, " ".join(f"Sentence {i}." for i in range(7)))

    async def test_error_returns_sentinel(self):
        """Any failure yields exactly the fallback sentence."""
        synthesizer = AnswerSynthesizer(FakeCompletionClient(error=RuntimeError("boom")), "test-model")

        outcome = await synthesizer.answer(INSIGHT, sample_aggregation())

        self.assertEqual(outcome.value, "Unable to process right now.")
        self.assertTrue(outcome.degraded)

    async def test_empty_reply(self):
        synthesizer = AnswerSynthesizer(FakeCompletionClient("   "), "test-model")
        outcome = await synthesizer.answer(INSIGHT, sample_aggregation())
        self.assertEqual(outcome.value, "No answer available.")

    async def test_request_shape(self):
        client = FakeCompletionClient("Fine.")
        synthesizer = AnswerSynthesizer(client, "test-model", temperature=0.6, max_tokens=150)

        await synthesizer.answer(INSIGHT, sample_aggregation())

        call = client.calls[0]
        self.assertEqual(call["temperature"], 0.6)
        self.assertEqual(call["max_tokens"], 150)
        system, user = call["messages"]
        self.assertIn("NO bullet points", system.content)
        self.assertIn("High Food Costs: You spent $60 on food. Cook at home", user.content)
        self.assertIn('"totalAmount": 60.0', user.content)
        self.assertNotIn('"dateGroups"', user.content)

    def test_build_question_without_action(self):
        insight = Insight(id="x", type="info", title="T", message="M.", confidence=0.5)
        self.assertEqual(build_question(insight), "T: M.")


if __name__ == "__main__":
    unittest.main()
