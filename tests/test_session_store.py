from datetime import timedelta

import pytest

from chain_of_draft.models import SessionMetadata, SessionRecord
from chain_of_draft.services.session_store import InMemorySessionStore, utcnow


def _record(age_seconds: float = 0, data=None) -> SessionRecord:
    stamp = utcnow() - timedelta(seconds=age_seconds)
    return SessionRecord(
        data=data if data is not None else {"history": [{"draft_number": 1}]},
        metadata=SessionMetadata(created=stamp, last_accessed=stamp),
    )


@pytest.mark.asyncio
async def test_get_missing_returns_none() -> None:
    """get returns None for an unknown key."""
    store = InMemorySessionStore()
    assert await store.get("nope") is None


@pytest.mark.asyncio
async def test_get_returns_independent_copy() -> None:
    """Mutating a record returned by get does not change the stored record."""
    store = InMemorySessionStore()
    await store.set("s1", _record())

    first = await store.get("s1")
    first.data["history"].append({"draft_number": 2})
    first.metadata.size = 999

    second = await store.get("s1")
    assert second.data["history"] == [{"draft_number": 1}]
    assert second.metadata.size == 0


@pytest.mark.asyncio
async def test_set_stores_independent_copy() -> None:
    """Mutating a record after set does not change the stored record."""
    store = InMemorySessionStore()
    record = _record()
    await store.set("s1", record)
    record.data["history"].clear()

    stored = await store.get("s1")
    assert stored.data["history"] == [{"draft_number": 1}]


@pytest.mark.asyncio
async def test_delete_removes_and_ignores_missing() -> None:
    store = InMemorySessionStore()
    await store.set("s1", _record())
    await store.delete("s1")
    await store.delete("never-existed")
    assert await store.get("s1") is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_cleanup_evicts_only_stale_records(caplog: pytest.LogCaptureFixture) -> None:
    """cleanup removes records older than max_age and logs each eviction."""
    store = InMemorySessionStore()
    await store.set("old", _record(age_seconds=7200))
    await store.set("fresh", _record(age_seconds=10))

    with caplog.at_level("INFO"):
        await store.cleanup(3600)

    assert "old" not in store
    assert "fresh" in store
    assert "Cleaned up expired session: old" in caplog.text
