"""Push Channel: authenticated server-push stream announcing capabilities + heartbeats.

Invariants:
    - Unauthenticated callers never get a channel (open_channel returns None)
    - The announcement is the first frame and is sent exactly once
    - Heartbeats only follow the announcement, one per interval
    - After close() or disconnect nothing further is written
    - The heartbeat task never outlives the channel: release() cancels it
      synchronously on every exit path (normal, close, disconnect)

Design Decisions:
    - HeartbeatTimer as an async context manager: acquire on connect, release
      on exit, so teardown does not depend on the peer behaving
    - Frames are plain SSE strings: data frame for the announcement, comment
      frame for heartbeats (ignored by EventSource clients)
    - Tool invocation over this channel is not supported; tools go through /mcp/rpc
"""

import asyncio
import copy
import json
import logging
from collections.abc import AsyncIterator

from journal_coach.core.domain_types import AccountId
from journal_coach.core.rpc_envelope import JSONRPC_VERSION, extract_bearer_credential
from journal_coach.services.credential_store import CredentialStore
from journal_coach.services.rpc_gateway import CAPABILITIES, SERVER_INFO
from journal_coach.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)

HEARTBEAT_FRAME = ": heartbeat\n\n"


def data_frame(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


class HeartbeatTimer:
    """Periodic tick source backed by one asyncio task."""

    def __init__(self, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        self._ticks: asyncio.Queue[bool] = asyncio.Queue(maxsize=1)
        self._task: asyncio.Task | None = None
        self._released = False

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __aenter__(self) -> "HeartbeatTimer":
        self._task = asyncio.create_task(self._run())
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()

    def release(self) -> None:
        """Cancel the tick task and wake any waiter. Idempotent."""
        if self._released:
            return
        self._released = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if not self._ticks.full():
            self._ticks.put_nowait(False)

    async def next_tick(self) -> bool:
        """Wait for the next tick. False once the timer has been released."""
        if self._released and self._ticks.empty():
            return False
        return await self._ticks.get()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            # a slow consumer gets one pending tick, not a backlog
            if not self._ticks.full():
                self._ticks.put_nowait(True)


class PushChannel:
    """One authenticated push connection."""

    def __init__(
        self,
        account_id: AccountId,
        registry: ToolRegistry,
        heartbeat_seconds: float = 30.0,
    ):
        self.account_id = account_id
        self._registry = registry
        self._heartbeat_seconds = heartbeat_seconds
        self._timer: HeartbeatTimer | None = None
        self._closed = False
        self._announced = False

    @property
    def closed(self) -> bool:
        return self._closed

    def announcement(self) -> dict:
        return {
            "jsonrpc": JSONRPC_VERSION,
            "method": "initialize",
            "params": {
                "serverInfo": dict(SERVER_INFO),
                "capabilities": copy.deepcopy(CAPABILITIES),
                "tools": self._registry.to_wire(),
            },
        }

    def close(self) -> None:
        self._closed = True
        if self._timer is not None:
            self._timer.release()

    async def events(self) -> AsyncIterator[str]:
        """Yield SSE frames: announcement once, then heartbeats until closed."""
        if self._closed or self._announced:
            return
        self._announced = True
        logger.info("Push channel opened", extra={"account_id": self.account_id})
        yield data_frame(self.announcement())
        try:
            async with HeartbeatTimer(self._heartbeat_seconds) as timer:
                self._timer = timer
                while not self._closed:
                    if not await timer.next_tick() or self._closed:
                        break
                    yield HEARTBEAT_FRAME
        except asyncio.CancelledError:
            logger.info(
                "Client disconnected from push channel",
                extra={"account_id": self.account_id},
            )
            return
        finally:
            self._closed = True
            self._timer = None
        logger.info("Push channel closed", extra={"account_id": self.account_id})


async def open_channel(
    store: CredentialStore,
    registry: ToolRegistry,
    api_key_header: str | None,
    authorization: str | None,
    heartbeat_seconds: float = 30.0,
) -> PushChannel | None:
    """Authenticate the caller; None means respond 401 and emit nothing."""
    secret = extract_bearer_credential(api_key_header, authorization)
    if secret is None:
        return None
    try:
        account_id = await store.authenticate(secret)
    except Exception as e:
        logger.error("Credential check failed: %s", e, exc_info=True)
        account_id = None
    if account_id is None:
        logger.warning("Rejected push channel: invalid API key")
        return None
    return PushChannel(account_id, registry, heartbeat_seconds)
