"""Data models for insight generation."""
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

INSIGHT_TYPES = ("warning", "info", "success", "tip")

T = TypeVar("T")


@dataclass(frozen=True)
class ExpenseRecord:
    """Expense data as handed to the pipeline."""
    id: str
    amount: Any
    category: str
    description: str
    date: Union[date, datetime, str]


@dataclass(frozen=True)
class NormalizedExpense:
    """Expense reduced to what the completion prompts need."""
    amount: Decimal
    category: str
    description: str
    day: str  # YYYY-MM-DD


@dataclass
class ExpenseAggregation:
    """Summary statistics over a batch of expense records."""
    total_amount: Decimal
    category_totals: Dict[str, Decimal]
    category_counts: Dict[str, int]
    date_groups: Dict[str, Decimal]  # day -> amount
    total_expenses: int
    expenses: List[NormalizedExpense]

    def to_prompt_dict(self, compact: bool = False) -> Dict[str, Any]:
        """
        JSON-ready view of the aggregation.

        Args:
            compact: Drop category counts and daily totals (answer prompts)

        Returns:
            Dict with camelCase keys and float amounts
        """
        payload: Dict[str, Any] = {
            "totalAmount": float(self.total_amount),
            "categoryTotals": {k: float(v) for k, v in self.category_totals.items()},
        }
        if not compact:
            payload["categoryCounts"] = dict(self.category_counts)
        payload["totalExpenses"] = self.total_expenses
        if not compact:
            payload["dateGroups"] = {k: float(v) for k, v in self.date_groups.items()}
        payload["expenses"] = [
            {
                "amount": float(exp.amount),
                "category": exp.category,
                "description": exp.description,
                "date": exp.day,
            }
            for exp in self.expenses
        ]
        return payload


@dataclass
class Insight:
    """A single generated observation about spending."""
    id: str
    type: str
    title: str
    message: str
    confidence: float
    action: Optional[str] = None
    ai_answer: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["aiAnswer"] = data.pop("ai_answer")
        # Optional fields are omitted rather than sent as null
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class ChatMessage:
    """Role-tagged turn sent to the completion service."""
    role: str  # system | user | assistant
    content: str


@dataclass
class Outcome(Generic[T]):
    """Either a computed value or the fallback that stands in for it."""
    value: T
    error: Optional[BaseException] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, error: BaseException) -> "Outcome[T]":
        return cls(value=value, error=error)
