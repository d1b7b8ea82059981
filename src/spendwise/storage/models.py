"""Data models for stored expenses."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class StoredRecord:
    """Expense row as kept by a record store."""
    id: str
    user_id: str
    amount: float
    category: Optional[str]
    text: str
    date: datetime
    created_at: Optional[datetime] = None
