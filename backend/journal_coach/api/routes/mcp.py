"""MCP Routes: JSON-RPC endpoint, push channel, and unauthenticated probes.

Invariants:
    - POST /mcp/rpc always answers HTTP 200 with a JSON-RPC envelope
    - GET /mcp/sse answers 401 (no event) for missing/invalid keys
    - GET /mcp/tools returns exactly what tools/list returns
    - Routes hold no logic beyond transport: gateway/channel do the work
"""

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import StreamingResponse

from journal_coach.api.dependencies import (
    get_credential_store, get_rpc_gateway, get_tool_registry,
)
from journal_coach.api.routes.stream_helpers import SSE_HEADERS
from journal_coach.config import get_settings
from journal_coach.core.errors import AuthenticationError
from journal_coach.services.credential_store import CredentialStore
from journal_coach.services.push_channel import open_channel
from journal_coach.services.rpc_gateway import SERVER_INFO, RpcGateway
from journal_coach.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/mcp", tags=["mcp"])


@router.post("/rpc")
async def rpc(
    request: Request,
    gateway: RpcGateway = Depends(get_rpc_gateway),
    x_api_key: str | None = Header(None),
    authorization: str | None = Header(None),
):
    """Single JSON-RPC 2.0 request -> response envelope."""
    try:
        body = await request.json()
    except ValueError:
        body = None
    return await gateway.handle(body, x_api_key, authorization)


@router.get("/sse")
async def push_stream(
    store: CredentialStore = Depends(get_credential_store),
    registry: ToolRegistry = Depends(get_tool_registry),
    x_api_key: str | None = Header(None),
    authorization: str | None = Header(None),
):
    """Server-push channel: capability announcement, then heartbeats."""
    channel = await open_channel(
        store, registry, x_api_key, authorization,
        heartbeat_seconds=get_settings().mcp_heartbeat_seconds,
    )
    if channel is None:
        raise AuthenticationError("Valid API key required")

    async def event_generator():
        try:
            async for frame in channel.events():
                yield frame
        except asyncio.CancelledError:
            logger.info(
                "Client disconnected from push stream",
                extra={"account_id": channel.account_id},
            )
            return
        finally:
            channel.close()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/health")
async def mcp_health():
    return {
        "status": "ok",
        "server": SERVER_INFO["name"],
        "version": SERVER_INFO["version"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/tools")
async def list_tools(registry: ToolRegistry = Depends(get_tool_registry)):
    """Unauthenticated catalog probe; same list as tools/list."""
    return {"tools": registry.to_wire()}
