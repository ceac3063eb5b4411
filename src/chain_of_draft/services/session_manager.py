import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict

from ..errors import SessionCapacityError
from ..models import SessionMetadata, SessionRecord
from .session_store import SessionStore, utcnow

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSION_AGE_SECONDS = 24 * 60 * 60
DEFAULT_MAX_SESSION_SIZE_BYTES = 5 * 1024 * 1024


def serialized_size(data: Any) -> int:
    """UTF-8 byte length of the canonical JSON form of data."""
    text = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return len(text.encode("utf-8"))


class SessionManager:
    """Applies age and size policy on top of a SessionStore.

    Every record returned is a copy owned by the caller; changes only reach the
    store through ``update_session``. Concurrent writers to one key get
    last-write-wins semantics.
    """

    def __init__(
        self,
        store: SessionStore,
        max_session_age: float | None = None,
        max_session_size: int | None = None,
        cleanup_interval: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self.max_session_age = max_session_age or DEFAULT_MAX_SESSION_AGE_SECONDS
        self.max_session_size = max_session_size or DEFAULT_MAX_SESSION_SIZE_BYTES
        self._cleanup_interval = cleanup_interval or None
        self._clock = clock
        self._cleanup_task: asyncio.Task | None = None
        self._destroyed = False
        self._ensure_cleanup_task()

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def cleanup_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    def _ensure_cleanup_task(self) -> None:
        """Start the eviction loop once an event loop is available."""
        if self._cleanup_interval is None or self._destroyed:
            return
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Not inside a loop yet; the first session call starts it.
            return
        self._cleanup_task = loop.create_task(self._run_cleanup_loop())

    async def _run_cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self._cleanup_interval)
            try:
                await self.cleanup()
            except Exception as e:
                logger.error("Session cleanup failed: %s", e, exc_info=True)

    async def get_session(self, session_id: str) -> SessionRecord:
        """Return the session for session_id, creating an empty one on a miss."""
        self._ensure_cleanup_task()
        record = await self._store.get(session_id)
        if record is None:
            return await self._create_session(session_id)

        record.metadata.last_accessed = max(self._clock(), record.metadata.last_accessed)
        await self._store.set(session_id, record)
        return record

    async def _create_session(self, session_id: str) -> SessionRecord:
        now = self._clock()
        record = SessionRecord(
            data={},
            metadata=SessionMetadata(created=now, last_accessed=now, size=0, version=1),
        )
        await self._store.set(session_id, record)
        logger.info("Created new session: %s", session_id)
        return record

    async def update_session(self, session_id: str, data: Dict[str, Any]) -> None:
        """Replace the payload for session_id.

        Raises:
            SessionCapacityError: serialized data is larger than max_session_size.
                The stored payload is left unchanged.
        """
        record = await self.get_session(session_id)
        new_size = serialized_size(data)
        if new_size > self.max_session_size:
            raise SessionCapacityError(self.max_session_size, new_size)

        record.data = data
        record.metadata.last_accessed = max(self._clock(), record.metadata.last_accessed)
        record.metadata.size = new_size
        await self._store.set(session_id, record)

    async def delete_session(self, session_id: str) -> None:
        await self._store.delete(session_id)
        logger.info("Deleted session: %s", session_id)

    async def cleanup(self) -> None:
        """Evict sessions idle for longer than max_session_age."""
        await self._store.cleanup(self.max_session_age)

    def destroy(self) -> None:
        """Stop the eviction loop. Call during shutdown."""
        self._destroyed = True
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            self._cleanup_task = None
