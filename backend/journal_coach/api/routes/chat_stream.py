"""Chat Stream Routes: SSE coach replies and journal insights.

Invariants:
    - Events are forwarded in order as `data:` frames
    - Any JournalCoachError mid-stream -> error event then done(error=true);
      the stream never ends without a done event
    - Client disconnect is normal teardown (logged, not raised)
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from journal_coach.api.dependencies import get_coach_streamer, get_current_account
from journal_coach.api.routes.stream_helpers import SSE_HEADERS, done_event, sse_line
from journal_coach.core.domain_types import AccountId
from journal_coach.core.errors import JournalCoachError
from journal_coach.schemas.chat import ChatMessageRequest
from journal_coach.services.coach_stream import CoachStreamer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


async def _forward(events: AsyncIterator[dict], account_id: AccountId):
    try:
        async for event in events:
            yield sse_line(event)
    except JournalCoachError as e:
        logger.error(
            "Coach stream failed: %s", e.message,
            extra={"account_id": account_id, "error_code": e.code},
        )
        yield sse_line(e.to_sse_event())
        yield sse_line(done_event(error=True))
    except asyncio.CancelledError:
        logger.info("Client disconnected from coach stream", extra={"account_id": account_id})
        return


@router.post("/message/stream")
async def stream_message(
    body: ChatMessageRequest,
    account_id: AccountId = Depends(get_current_account),
    streamer: CoachStreamer = Depends(get_coach_streamer),
):
    """Stream a coach reply to one chat message."""
    history = [turn.model_dump() for turn in body.history]
    return StreamingResponse(
        _forward(streamer.stream_reply(account_id, body.message, history), account_id),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/insights/stream")
async def stream_insights(
    account_id: AccountId = Depends(get_current_account),
    streamer: CoachStreamer = Depends(get_coach_streamer),
):
    """Stream an insight report over recent journal entries."""
    return StreamingResponse(
        _forward(streamer.stream_insights(account_id), account_id),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
