"""Expense record store using SQLite."""
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .models import StoredRecord
from spendwise.utils.logger import get_logger
from spendwise.utils.exceptions import DataSourceError

logger = get_logger()


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SQLiteRecordStore:
    """Local database of users and their expense records."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    external_id TEXT UNIQUE NOT NULL,
                    created_at TEXT
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS records (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    amount REAL NOT NULL,
                    category TEXT,
                    text TEXT NOT NULL,
                    date TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_records_user ON records(user_id, created_at)")
            conn.commit()

    def find_user(self, external_id: str) -> Optional[str]:
        """Return the internal id for an external identity without provisioning it."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT id FROM users WHERE external_id = ?", (external_id,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise DataSourceError(f"Failed to look up user {external_id}: {e}") from e
        return row[0] if row else None

    def get_or_create_user(self, external_id: str) -> str:
        """Return the internal id for an external identity, provisioning it on first sight."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT id FROM users WHERE external_id = ?", (external_id,))
                row = cursor.fetchone()
                if row:
                    return row[0]

                user_id = uuid.uuid4().hex
                cursor.execute(
                    "INSERT INTO users (id, external_id, created_at) VALUES (?, ?, ?)",
                    (user_id, external_id, datetime.now(timezone.utc).isoformat())
                )
                conn.commit()
        except sqlite3.Error as e:
            raise DataSourceError(f"Failed to resolve user {external_id}: {e}") from e

        logger.info(f"Provisioned user {user_id} for {external_id}")
        return user_id

    def add_record(
        self,
        user_id: str,
        amount: float,
        text: str,
        category: Optional[str] = None,
        date: Optional[datetime] = None,
        created_at: Optional[datetime] = None
    ) -> StoredRecord:
        """Insert an expense record for a user."""
        now = datetime.now(timezone.utc)
        record = StoredRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            amount=float(amount),
            category=category,
            text=text,
            date=_to_utc(date) if date else now,
            created_at=_to_utc(created_at) if created_at else now
        )
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT INTO records (id, user_id, amount, category, text, date, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    record.id,
                    record.user_id,
                    record.amount,
                    record.category,
                    record.text,
                    record.date.isoformat(timespec="microseconds"),
                    record.created_at.isoformat(timespec="microseconds")
                ))
                conn.commit()
        except sqlite3.Error as e:
            raise DataSourceError(f"Failed to store record: {e}") from e
        return record

    def fetch_recent(self, user_id: str, since: datetime, limit: int) -> List[StoredRecord]:
        """Records created at or after `since`, newest first."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT id, user_id, amount, category, text, date, created_at FROM records "
                    "WHERE user_id = ? AND created_at >= ? ORDER BY created_at DESC LIMIT ?",
                    (user_id, _to_utc(since).isoformat(timespec="microseconds"), limit)
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise DataSourceError(f"Failed to fetch records for {user_id}: {e}") from e

        # r: (id, user_id, amount, category, text, date, created_at)
        return [
            StoredRecord(
                id=r[0],
                user_id=r[1],
                amount=r[2],
                category=r[3],
                text=r[4],
                date=datetime.fromisoformat(r[5]),
                created_at=datetime.fromisoformat(r[6])
            )
            for r in rows
        ]

    def clear(self, user_id: Optional[str] = None) -> int:
        """Delete records for one user, or all records."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            if user_id:
                cursor.execute("DELETE FROM records WHERE user_id = ?", (user_id,))
            else:
                cursor.execute("DELETE FROM records")
            conn.commit()
            return cursor.rowcount
