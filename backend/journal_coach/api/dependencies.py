"""API Dependencies: FastAPI providers wiring services to the request scope.

Invariants:
    - Services get a fresh DB session per request (get_db); nothing request-scoped is cached
    - The tool registry is read from app.state (built once at app construction)
    - Account sessions: HS256 JWT bearer, `sub` claim is the account id; anything
      else -> AuthenticationError (401)

Design Decisions:
    - Anthropic client is a process-wide lazy singleton: connection pooling is
      shared across requests
    - Credential-management and chat routes authenticate with account sessions;
      only /mcp/* accepts API keys
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from journal_coach.config import get_settings
from journal_coach.core.domain_types import AccountId
from journal_coach.core.errors import AuthenticationError
from journal_coach.infrastructure.anthropic_client import ResilientAnthropicClient
from journal_coach.infrastructure.credential_repository import SqlCredentialRepository
from journal_coach.infrastructure.database import get_db
from journal_coach.infrastructure.domain_repositories import (
    SqlCategoryService, SqlGoalService, SqlJournalService,
)
from journal_coach.services.coach_stream import CoachStreamer
from journal_coach.services.credential_store import CredentialStore
from journal_coach.services.rpc_gateway import RpcGateway
from journal_coach.services.tool_dispatch import ToolDispatcher
from journal_coach.services.tools_registry import ToolRegistry

_bearer = HTTPBearer(auto_error=False)
_anthropic_client: ResilientAnthropicClient | None = None


def get_tool_registry(request: Request) -> ToolRegistry:
    return request.app.state.tool_registry


def get_credential_store(db: AsyncSession = Depends(get_db)) -> CredentialStore:
    return CredentialStore(
        SqlCredentialRepository(db),
        hash_rounds=get_settings().api_key_hash_rounds,
    )


def get_tool_dispatcher(
    db: AsyncSession = Depends(get_db),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolDispatcher:
    return ToolDispatcher(
        registry,
        goals=SqlGoalService(db),
        journal=SqlJournalService(db),
        categories=SqlCategoryService(db),
    )


def get_rpc_gateway(
    store: CredentialStore = Depends(get_credential_store),
    registry: ToolRegistry = Depends(get_tool_registry),
    dispatcher: ToolDispatcher = Depends(get_tool_dispatcher),
) -> RpcGateway:
    return RpcGateway(store, registry, dispatcher)


def get_anthropic_client() -> ResilientAnthropicClient:
    """Shared Anthropic client singleton."""
    global _anthropic_client
    if _anthropic_client is None:
        settings = get_settings()
        _anthropic_client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            model=settings.coach_model,
            max_tokens=settings.coach_max_tokens,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )
    return _anthropic_client


def get_coach_streamer(
    db: AsyncSession = Depends(get_db),
    client: ResilientAnthropicClient = Depends(get_anthropic_client),
) -> CoachStreamer:
    settings = get_settings()
    return CoachStreamer(
        client,
        SqlJournalService(db),
        chat_chunk_size=settings.chat_chunk_size,
        insights_chunk_size=settings.insights_chunk_size,
    )


async def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> AccountId:
    """Resolve the account from a signed session token."""
    if credentials is None:
        raise AuthenticationError()
    settings = get_settings()
    try:
        claims = jwt.decode(
            credentials.credentials,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
        )
    except JWTError:
        raise AuthenticationError("Invalid or expired session token")
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise AuthenticationError("Session token has no subject")
    return AccountId(subject)
