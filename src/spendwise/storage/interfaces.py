"""Collaborator interfaces consumed by the insights orchestrator."""
from datetime import datetime
from typing import Any, List, Mapping, Optional, Protocol

from .models import StoredRecord


class IdentityResolver(Protocol):
    def resolve(self, session: Mapping[str, Any]) -> Optional[str]:
        """Return the internal user id for a session, or None."""
        ...


class RecordStore(Protocol):
    def fetch_recent(self, user_id: str, since: datetime, limit: int) -> List[StoredRecord]:
        """Records created at or after `since`, newest first, at most `limit`."""
        ...
