"""Expense aggregation module."""
from collections import defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, List, Sequence

from dateutil.parser import isoparse

from .models import ExpenseRecord, ExpenseAggregation, NormalizedExpense
from spendwise.utils.logger import get_logger

logger = get_logger()


class Aggregator:
    """Aggregates expense records by category and calendar day."""

    def aggregate(self, records: Sequence[ExpenseRecord]) -> ExpenseAggregation:
        """
        Build summary statistics in one pass over the records.

        Args:
            records: Expense records, any order

        Returns:
            ExpenseAggregation object (zeroed when records is empty)
        """
        total = Decimal("0")
        category_totals = defaultdict(Decimal)
        category_counts = defaultdict(int)
        date_groups = defaultdict(Decimal)
        expenses: List[NormalizedExpense] = []

        for record in records:
            amount = self.to_amount(record.amount)
            day = self.to_day(record.date)

            total += amount
            category_totals[record.category] += amount
            category_counts[record.category] += 1
            date_groups[day] += amount
            expenses.append(NormalizedExpense(
                amount=amount,
                category=record.category,
                description=record.description,
                day=day
            ))

        logger.debug(
            f"Aggregated {len(expenses)} expenses into {len(category_totals)} categories "
            f"over {len(date_groups)} days"
        )

        return ExpenseAggregation(
            total_amount=total,
            category_totals=dict(category_totals),
            category_counts=dict(category_counts),
            date_groups=dict(date_groups),
            total_expenses=len(expenses),
            expenses=expenses
        )

    @staticmethod
    def to_amount(value: Any) -> Decimal:
        """Convert an amount to Decimal; malformed or non-finite values count as 0."""
        if isinstance(value, bool):
            return Decimal("0")
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            logger.debug(f"Malformed amount {value!r}, counting as 0")
            return Decimal("0")
        if not amount.is_finite():
            logger.debug(f"Non-finite amount {value!r}, counting as 0")
            return Decimal("0")
        return amount

    @staticmethod
    def to_day(value: Any) -> str:
        """
        Calendar day (YYYY-MM-DD) of a record date, in UTC.

        Aware datetimes are converted to UTC first; naive ones are taken as UTC.
        """
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()

        text = str(value).strip()
        try:
            parsed = isoparse(text)
        except (ValueError, OverflowError):
            logger.debug(f"Unparseable date {text!r}, keeping its date part")
            return text.split("T")[0]
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date().isoformat()
