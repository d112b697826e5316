"""Coach Streamer: chunked chat replies and insights over a mocked LLM.

Tests cover:
    - Chat chunks are exactly chat_chunk_size (last may be short); done carries full text
    - Insights use insights_chunk_size
    - No entries -> fixed message then done, no LLM call
    - Journal context loaded for the authenticated account only
    - Upstream failure propagates as AnthropicAPIError
"""

import pytest

from journal_coach.core.coach_prompts import NO_ENTRIES_MESSAGE
from journal_coach.core.errors import AnthropicAPIError
from journal_coach.services.coach_stream import CoachStreamer
from tests.services.fakes import FakeJournalService
from tests.services.mock_anthropic import MockAnthropicClient

ENTRY = {
    "id": "e1", "account_id": "acct-1", "title": "Gratitude",
    "content": "Thankful for a calm morning.", "mood": "calm", "tags": [],
    "created_at": "2025-01-01T08:00:00",
}


async def _collect(events):
    return [e async for e in events]


async def test_chat_reply_chunked_by_five():
    client = MockAnthropicClient([["Keep ", "going, you", "'re close!"]])
    streamer = CoachStreamer(client, FakeJournalService([ENTRY]), chat_chunk_size=5)
    events = await _collect(streamer.stream_reply("acct-1", "I ran today", []))

    chunks = [e["content"] for e in events if e["type"] == "chunk"]
    assert all(len(c) == 5 for c in chunks[:-1])
    assert "".join(chunks) == "Keep going, you're close!"
    assert events[-1] == {"type": "done", "content": "Keep going, you're close!"}


async def test_chat_uses_account_journal_and_history():
    journal = FakeJournalService([ENTRY, {**ENTRY, "id": "e2", "account_id": "acct-2",
                                          "title": "Someone else's"}])
    client = MockAnthropicClient([["ok"]])
    streamer = CoachStreamer(client, journal)
    history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
    await _collect(streamer.stream_reply("acct-1", "next", history))

    assert journal.calls == [("list_recent", "acct-1", 20)]
    call = client.calls[0]
    assert "Gratitude" in call["system"]
    assert "Someone else's" not in call["system"]
    assert call["messages"][-1] == {"role": "user", "content": "next"}
    assert call["context"].account_id == "acct-1"


async def test_insights_chunked_by_hundred():
    text = "Theme: gratitude. " * 20
    client = MockAnthropicClient([[text[:7], text[7:150], text[150:]]])
    streamer = CoachStreamer(client, FakeJournalService([ENTRY]), insights_chunk_size=100)
    events = await _collect(streamer.stream_insights("acct-1"))

    chunks = [e["content"] for e in events if e["type"] == "chunk"]
    assert [len(c) for c in chunks] == [100, 100, 100, 60]
    assert events[-1]["content"] == text


async def test_insights_without_entries_skips_llm():
    client = MockAnthropicClient([])
    streamer = CoachStreamer(client, FakeJournalService())
    events = await _collect(streamer.stream_insights("acct-1"))

    assert events == [
        {"type": "chunk", "content": NO_ENTRIES_MESSAGE},
        {"type": "done", "content": NO_ENTRIES_MESSAGE},
    ]
    assert client.calls == []


async def test_upstream_failure_propagates_after_partial_output():
    client = MockAnthropicClient([["Hello there, ", "friend"]], fail_after=1)
    streamer = CoachStreamer(client, FakeJournalService([ENTRY]), chat_chunk_size=5)
    seen = []
    with pytest.raises(AnthropicAPIError):
        async for event in streamer.stream_reply("acct-1", "hi"):
            seen.append(event)
    assert [e["content"] for e in seen] == ["Hello", " ther"]
    assert all(e["type"] == "chunk" for e in seen)
