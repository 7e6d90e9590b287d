"""
Tests for the key-value store primitives.
"""

import asyncio

from samudra.db import kv_store
from samudra.models.kv import KVEntry


async def test_set_and_get_value(session):
    await kv_store.set_value(session, "project_1", {"name": "Chilika"})
    await session.commit()

    assert await kv_store.get_value(session, "project_1") == {"name": "Chilika"}
    assert await kv_store.get_value(session, "project_missing") is None
    assert await kv_store.get_value(session, "project_missing", 0) == 0


async def test_overwrite_bumps_version(session):
    await kv_store.set_value(session, "mrv_1", {"status": "pending_ml_processing"})
    first = await kv_store.get_entry(session, "mrv_1")

    await kv_store.set_value(session, "mrv_1", {"status": "approved"})
    second = await kv_store.get_entry(session, "mrv_1")

    assert first.version == 1
    assert second.version == 2
    assert second.value == {"status": "approved"}


async def test_compare_and_set_rejects_stale_version(session):
    await kv_store.set_value(session, "credit_a", {"ownerId": None})
    entry = await kv_store.get_entry(session, "credit_a")

    assert await kv_store.compare_and_set(session, "credit_a", entry.version, {"ownerId": "buyer_1"})
    # A second writer still holding the old version loses
    assert not await kv_store.compare_and_set(session, "credit_a", entry.version, {"ownerId": "buyer_2"})

    assert await kv_store.get_value(session, "credit_a") == {"ownerId": "buyer_1"}


async def test_compare_and_set_missing_key(session):
    assert not await kv_store.compare_and_set(session, "credit_none", 1, {"ownerId": "buyer_1"})


async def test_get_by_prefix_orders_and_escapes(session):
    await kv_store.set_value(session, "project_b", {"n": 2})
    await kv_store.set_value(session, "project_a", {"n": 1})
    await kv_store.set_value(session, "projectXc", {"n": 3})
    await kv_store.set_value(session, "mrv_a", {"n": 4})

    entries = await kv_store.get_by_prefix(session, "project_")

    # "_" is literal, so projectXc is not a match
    assert [e.key for e in entries] == ["project_a", "project_b"]
    assert [e.value["n"] for e in entries] == [1, 2]


async def test_delete_key(session):
    await kv_store.set_value(session, "project_1", {"name": "Pulicat"})

    assert await kv_store.delete_key(session, "project_1")
    assert not await kv_store.delete_key(session, "project_1")
    assert await kv_store.get_entry(session, "project_1") is None


async def test_increment_counter(session):
    assert await kv_store.increment_counter(session, "total_credits_issued", 87) == 87
    assert await kv_store.increment_counter(session, "total_credits_issued", 13) == 100
    await session.commit()

    assert await kv_store.get_value(session, "total_credits_issued") == 100


async def test_ensure_keys_keeps_existing_values(session):
    await kv_store.set_value(session, "total_credits_retired", 40)

    await kv_store.ensure_keys(session, {"total_credits_retired": 0, "chain_height": 0})
    await kv_store.ensure_keys(session, {"chain_height": 5})

    assert await kv_store.get_value(session, "total_credits_retired") == 40
    assert await kv_store.get_value(session, "chain_height") == 0


async def _increment_and_commit(session_factory, amount):
    async with session_factory() as db_session:
        total = await kv_store.increment_counter(db_session, "total_credits_issued", amount)
        await db_session.commit()
        return total


async def test_concurrent_increments_from_separate_sessions(session_factory):
    totals = await asyncio.gather(
        _increment_and_commit(session_factory, 87),
        _increment_and_commit(session_factory, 64),
    )

    async with session_factory() as db_session:
        assert await kv_store.get_value(db_session, "total_credits_issued") == 151
    assert max(totals) == 151
    assert min(totals) in (87, 64)


async def test_writes_are_timestamped_in_utc(session):
    assert KVEntry(key="project_x").updated_at.tzinfo is not None

    await kv_store.set_value(session, "project_x", {"name": "Pulicat"})
    await kv_store.set_value(session, "project_x", {"name": "Pulicat Lagoon"})
    await session.commit()

    assert (await kv_store.get_entry(session, "project_x")).version == 2
