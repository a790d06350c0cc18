"""
Tests for message search.

The pure filter is checked directly; MessageSearch is checked against
a real SQLite store for ordering.
"""

import pytest

from core.storage import MessageRecord, create_record_store
from manager.errors import InvalidInputError
from manager.search import MessageSearch, search_messages


def record(message_id: str, title: str = "", body: str = "") -> MessageRecord:
    return MessageRecord(id=message_id, title=title, body=body)


RECORDS = [
    record("1", title="Hello there", body="general"),
    record("2", title="Notice", body="Say HELLO to the new team"),
    record("3", title="Lunch", body="Pizza on Friday"),
    record("4", title="hell", body="o"),
]


def test_matches_title_or_body_case_insensitively():
    matches = search_messages(RECORDS, "hello")
    assert [m.id for m in matches] == ["1", "2"]


def test_uppercase_query_matches_lowercase_text():
    assert [m.id for m in search_messages(RECORDS, "PIZZA")] == ["3"]


def test_does_not_match_across_title_and_body():
    assert search_messages([RECORDS[3]], "hello") == []


def test_no_matches_returns_empty_list():
    assert search_messages(RECORDS, "nonexistent") == []


def test_whitespace_query_is_a_real_query():
    assert [m.id for m in search_messages(RECORDS, " ")] == ["1", "2", "3"]


def test_attachment_url_is_not_searched():
    rec = MessageRecord(id="1", attachment_url="https://hello.example")
    assert search_messages([rec], "hello") == []


@pytest.mark.parametrize("query", ["", None])
def test_empty_query_is_invalid(query):
    with pytest.raises(InvalidInputError, match="Query parameter is required."):
        search_messages(RECORDS, query)


@pytest.mark.asyncio
async def test_store_search_preserves_key_order(store):
    for rec in [
        record("c", body="meeting room"),
        record("a", title="Meeting"),
        record("b", title="nothing here"),
    ]:
        await store.insert(rec.id, rec)

    matches = await MessageSearch(store).search("MEETING")

    assert [m.id for m in matches] == ["a", "c"]


@pytest.mark.asyncio
async def test_store_search_empty_query_skips_store(test_settings):
    # Never set up: any read would raise RuntimeError instead
    store = create_record_store(test_settings)

    for query in ["", None]:
        with pytest.raises(InvalidInputError):
            await MessageSearch(store).search(query)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
