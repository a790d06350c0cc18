"""
Tests for the SQLite record store.

Covers upsert/get/remove semantics, ascending key order, and
durability across a close and reopen of the same database file.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.storage import MessageRecord, create_record_store, open_record_store


def make_record(message_id: str, **overrides) -> MessageRecord:
    fields = {
        "title": f"title {message_id}",
        "body": f"body {message_id}",
        "attachment_url": "",
        "created_at": datetime(2024, 1, 15, 10, 0, 0, 123000, tzinfo=timezone.utc),
        "updated_at": None,
    }
    fields.update(overrides)
    return MessageRecord(id=message_id, **fields)


@pytest.mark.asyncio
async def test_get_missing_returns_none(store):
    assert await store.get("nope") is None


@pytest.mark.asyncio
async def test_insert_then_get_round_trip(store):
    record = make_record(
        "m-1",
        attachment_url="https://example.com/a.png",
        updated_at=datetime(2024, 1, 16, 8, 30, 0, 500000, tzinfo=timezone.utc),
    )

    await store.insert(record.id, record)

    assert await store.get("m-1") == record


@pytest.mark.asyncio
async def test_insert_is_upsert_returning_previous(store):
    first = make_record("m-1", body="first")
    second = make_record("m-1", body="second")

    assert await store.insert("m-1", first) is None
    previous = await store.insert("m-1", second)

    assert previous == first
    assert await store.get("m-1") == second
    assert await store.count() == 1


@pytest.mark.asyncio
async def test_remove_returns_removed_value_once(store):
    record = make_record("m-1")
    await store.insert(record.id, record)

    assert await store.remove("m-1") == record
    assert await store.remove("m-1") is None
    assert await store.get("m-1") is None


@pytest.mark.asyncio
async def test_remove_missing_returns_none(store):
    assert await store.remove("never-stored") is None


@pytest.mark.asyncio
async def test_values_in_ascending_key_order(store):
    for key in ["c", "a", "B", "b", "a1"]:
        await store.insert(key, make_record(key))

    keys = [record.id for record in await store.values()]

    # Code point order: uppercase sorts before lowercase
    assert keys == ["B", "a", "a1", "b", "c"]


@pytest.mark.asyncio
async def test_values_is_a_snapshot(store):
    await store.insert("a", make_record("a"))
    snapshot = await store.values()

    await store.insert("b", make_record("b"))
    await store.remove("a")

    assert [record.id for record in snapshot] == ["a"]
    assert [record.id for record in await store.values()] == ["b"]


@pytest.mark.asyncio
async def test_repeated_values_calls_are_identical(store):
    for key in ["x", "y", "z"]:
        await store.insert(key, make_record(key))

    assert await store.values() == await store.values()


@pytest.mark.asyncio
async def test_empty_store(store):
    assert await store.values() == []
    assert await store.count() == 0
    assert await store.ping() is True


@pytest.mark.asyncio
async def test_timestamps_read_back_as_utc(store):
    await store.insert("m-1", make_record("m-1"))

    record = await store.get("m-1")

    assert record.created_at.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_insert_rejects_mismatched_key(store):
    with pytest.raises(ValueError):
        await store.insert("other-id", make_record("m-1"))


@pytest.mark.asyncio
async def test_survives_reopen(test_settings):
    """Data and order are identical after the store is closed and reopened."""
    records = [make_record(key) for key in ["k2", "k3", "k1"]]

    async with open_record_store(test_settings) as store:
        for record in records:
            await store.insert(record.id, record)
        await store.remove("k3")
        before = await store.values()

    async with open_record_store(test_settings) as reopened:
        after = await reopened.values()

    assert [record.id for record in after] == ["k1", "k2"]
    assert after == before


@pytest.mark.asyncio
async def test_setup_is_idempotent(test_settings):
    store = create_record_store(test_settings)
    await store.setup()
    await store.setup()
    try:
        await store.insert("a", make_record("a"))
        assert await store.count() == 1
    finally:
        await store.close()
        await store.close()


@pytest.mark.asyncio
async def test_use_before_setup_raises(test_settings):
    store = create_record_store(test_settings)

    with pytest.raises(RuntimeError):
        await store.get("a")



def test_from_dict_requires_created_at():
    with pytest.raises(KeyError):
        MessageRecord.from_dict({"id": "x", "title": "t"})

    with pytest.raises(ValueError):
        MessageRecord.from_dict({"id": "x", "created_at": None})


def test_from_dict_parses_iso_timestamps():
    record = MessageRecord.from_dict(
        {"id": "x", "created_at": "2024-01-15T10:00:00+00:00", "updated_at": None}
    )

    assert record.created_at == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
    assert record.updated_at is None

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
