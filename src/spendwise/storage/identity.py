"""Session-based identity resolution."""
from typing import Any, Mapping, Optional

from .record_store import SQLiteRecordStore


class SessionIdentityResolver:
    """Maps a session's external user id to an internal user id."""

    def __init__(self, store: SQLiteRecordStore):
        self.store = store

    def resolve(self, session: Mapping[str, Any]) -> Optional[str]:
        external_id = session.get("user_id") if session else None
        if not isinstance(external_id, str) or not external_id.strip():
            return None
        return self.store.get_or_create_user(external_id.strip())
