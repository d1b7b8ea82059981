"""Insights orchestration module."""
from .insights import InsightsOrchestrator, to_expense_record

__all__ = ["InsightsOrchestrator", "to_expense_record"]
