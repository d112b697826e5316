"""Coach Streamer: chat replies and journal insights streamed as fixed-size chunks.

Invariants:
    - Yields {"type": "chunk", "content"} events then exactly one {"type": "done"}
    - Chunk sizes come from settings (chat vs insights); concatenated chunks == done.content
    - No entries -> insights yields the fixed NO_ENTRIES_MESSAGE then done (no LLM call)
    - AnthropicAPIError propagates to the route, which owns the SSE error envelope

Design Decisions:
    - LLM deltas re-chunked via achunk_fragments: clients render at a steady
      cadence regardless of upstream delta sizes
"""

import logging
from collections.abc import AsyncIterator

from journal_coach.core.coach_prompts import (
    INSIGHTS_SYSTEM_PROMPT,
    NO_ENTRIES_MESSAGE,
    build_chat_messages,
    build_chat_system,
    build_insights_messages,
)
from journal_coach.core.domain_types import AccountId
from journal_coach.core.errors import ErrorContext
from journal_coach.core.repository_protocols import JournalService
from journal_coach.core.stream_chunker import achunk_fragments
from journal_coach.infrastructure.anthropic_client import ResilientAnthropicClient

logger = logging.getLogger(__name__)

CHAT_CONTEXT_ENTRIES = 20
INSIGHTS_CONTEXT_ENTRIES = 30


class CoachStreamer:
    """Streams coach output for one account."""

    def __init__(
        self,
        client: ResilientAnthropicClient,
        journal: JournalService,
        chat_chunk_size: int = 5,
        insights_chunk_size: int = 100,
    ):
        self.client = client
        self.journal = journal
        self.chat_chunk_size = chat_chunk_size
        self.insights_chunk_size = insights_chunk_size

    async def stream_reply(
        self, account_id: AccountId, message: str, history: list[dict] | None = None,
    ) -> AsyncIterator[dict]:
        entries = await self.journal.list_recent(account_id, CHAT_CONTEXT_ENTRIES)
        fragments = self.client.stream_text(
            system=build_chat_system(entries),
            messages=build_chat_messages(message, history),
            context=ErrorContext(account_id=account_id),
        )
        async for event in self._chunked(fragments, self.chat_chunk_size, account_id):
            yield event

    async def stream_insights(self, account_id: AccountId) -> AsyncIterator[dict]:
        entries = await self.journal.list_recent(account_id, INSIGHTS_CONTEXT_ENTRIES)
        if not entries:
            logger.info("No journal entries for insights", extra={"account_id": account_id})
            yield {"type": "chunk", "content": NO_ENTRIES_MESSAGE}
            yield {"type": "done", "content": NO_ENTRIES_MESSAGE}
            return
        fragments = self.client.stream_text(
            system=INSIGHTS_SYSTEM_PROMPT,
            messages=build_insights_messages(entries),
            context=ErrorContext(account_id=account_id),
        )
        async for event in self._chunked(fragments, self.insights_chunk_size, account_id):
            yield event

    async def _chunked(
        self, fragments: AsyncIterator[str], chunk_size: int, account_id: AccountId,
    ) -> AsyncIterator[dict]:
        parts: list[str] = []
        async for chunk in achunk_fragments(fragments, chunk_size):
            parts.append(chunk)
            yield {"type": "chunk", "content": chunk}
        logger.info(
            "Coach stream complete",
            extra={"account_id": account_id, "chunk_count": len(parts)},
        )
        yield {"type": "done", "content": "".join(parts)}
