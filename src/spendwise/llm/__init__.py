"""LLM processing module."""
from .models import (
    ChatMessage,
    ExpenseAggregation,
    ExpenseRecord,
    Insight,
    NormalizedExpense,
    Outcome
)
from .aggregator import Aggregator
from .client import CompletionClient
from .insight_generator import InsightGenerator
from .answer_synthesizer import AnswerSynthesizer
from .categorizer import ExpenseCategorizer

__all__ = [
    "ChatMessage",
    "ExpenseAggregation",
    "ExpenseRecord",
    "Insight",
    "NormalizedExpense",
    "Outcome",
    "Aggregator",
    "CompletionClient",
    "InsightGenerator",
    "AnswerSynthesizer",
    "ExpenseCategorizer"
]
