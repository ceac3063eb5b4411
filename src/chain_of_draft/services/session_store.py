import copy
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict

from ..models import SessionRecord

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore(ABC):
    """Keyed persistence for session records.

    Implementations hand out and accept independent copies: mutating a record
    returned by ``get`` (or passed to ``set``) never changes stored state.
    """

    @abstractmethod
    async def get(self, session_id: str) -> SessionRecord | None:
        """Return a copy of the record for session_id, or None if missing."""

    @abstractmethod
    async def set(self, session_id: str, record: SessionRecord) -> None:
        """Store a copy of record under session_id."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Remove session_id. Missing keys are ignored."""

    @abstractmethod
    async def cleanup(self, max_age_seconds: float) -> None:
        """Evict every record not accessed within max_age_seconds."""

    async def close(self) -> None:
        """Release backend resources. No-op by default."""


class InMemorySessionStore(SessionStore):
    """Process-local store backed by a dict."""

    def __init__(self) -> None:
        self._sessions: Dict[str, SessionRecord] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    async def get(self, session_id: str) -> SessionRecord | None:
        record = self._sessions.get(session_id)
        if record is None:
            return None
        return copy.deepcopy(record)

    async def set(self, session_id: str, record: SessionRecord) -> None:
        self._sessions[session_id] = copy.deepcopy(record)

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def cleanup(self, max_age_seconds: float) -> None:
        cutoff = utcnow() - timedelta(seconds=max_age_seconds)
        expired = [
            sid
            for sid, record in self._sessions.items()
            if record.metadata.last_accessed < cutoff
        ]
        for sid in expired:
            del self._sessions[sid]
            logger.info("Cleaned up expired session: %s", sid)
