import json
import logging
from datetime import timedelta
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ..errors import SessionStoreError
from ..models import SessionRecord
from .session_store import SessionStore, utcnow

logger = logging.getLogger(__name__)


class RedisSessionStore(SessionStore):
    """Durable session store: one JSON document per key in Redis.

    Records are serialized on every write and parsed on every read, which
    gives the same copy isolation as the in-memory store. When ttl_seconds is
    set, Redis expires idle keys on its own; ``cleanup`` still sweeps the
    prefix so the age policy holds without a TTL.
    """

    def __init__(
        self,
        url: str,
        key_prefix: str = "session:",
        ttl_seconds: int | None = None,
    ) -> None:
        """Create a store for the given URL (e.g. redis://localhost:6379/0)."""
        self._url = url
        self._prefix = key_prefix
        self._ttl = ttl_seconds
        self._client: Redis | None = None

    async def connect(self) -> None:
        """Establish connection to Redis. Idempotent."""
        if self._client is not None:
            return
        self._client = Redis.from_url(
            self._url,
            decode_responses=True,
        )
        try:
            await self._client.ping()
            logger.info("Redis connection established: %s", self._url.split("@")[-1])
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Redis ping failed: %s", e)
            await self._client.aclose()
            self._client = None
            raise SessionStoreError(f"Redis unavailable: {e}") from e

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("Redis connection closed")

    @property
    def client(self) -> Redis | None:
        """Return the underlying Redis client, or None if not connected."""
        return self._client

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    async def _require_client(self) -> Redis:
        if self._client is None:
            await self.connect()
        return self._client

    async def get(self, session_id: str) -> SessionRecord | None:
        client = await self._require_client()
        try:
            raw = await client.get(self._key(session_id))
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Redis get %s failed: %s", session_id, e)
            raise SessionStoreError(f"Failed to load session {session_id}") from e
        if raw is None:
            return None
        return self._parse(session_id, raw)

    async def set(self, session_id: str, record: SessionRecord) -> None:
        client = await self._require_client()
        payload = json.dumps(record.to_dict())
        try:
            if self._ttl is not None and self._ttl > 0:
                await client.setex(self._key(session_id), self._ttl, payload)
            else:
                await client.set(self._key(session_id), payload)
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Redis set %s failed: %s", session_id, e)
            raise SessionStoreError(f"Failed to store session {session_id}") from e

    async def delete(self, session_id: str) -> None:
        client = await self._require_client()
        try:
            await client.delete(self._key(session_id))
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Redis delete %s failed: %s", session_id, e)
            raise SessionStoreError(f"Failed to delete session {session_id}") from e

    async def cleanup(self, max_age_seconds: float) -> None:
        client = await self._require_client()
        cutoff = utcnow() - timedelta(seconds=max_age_seconds)
        try:
            async for key in client.scan_iter(match=f"{self._prefix}*"):
                raw = await client.get(key)
                if raw is None:
                    continue
                session_id = key[len(self._prefix):]
                record = self._parse(session_id, raw)
                if record is None or record.metadata.last_accessed < cutoff:
                    await client.delete(key)
                    logger.info("Cleaned up expired session: %s", session_id)
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Redis cleanup failed: %s", e)
            raise SessionStoreError("Session cleanup failed") from e

    @staticmethod
    def _parse(session_id: str, raw: Any) -> SessionRecord | None:
        try:
            return SessionRecord.from_dict(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Invalid session data for %s: %s", session_id, e)
            return None
