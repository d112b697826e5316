"""RPC Gateway: authenticated JSON-RPC 2.0 front door for voice-agent tool calls.

Invariants:
    - Credential checked before any routing: missing -> -32000, invalid -> -32001
    - Every response echoes the request id and carries exactly one of result/error
    - Tool-level failures live inside `result` (isError: true), never in `error`
    - Unexpected faults -> -32603 with str(exc); tracebacks only in logs
    - handle() never raises

Design Decisions:
    - Lookup table keyed by RpcMethod: unknown methods cannot fall through
    - Stateless per request: collaborators injected, nothing cached between calls
"""

import copy
import json
import logging
from typing import Any

from journal_coach.core.domain_types import AccountId, RpcErrorCode, RpcMethod
from journal_coach.core.rpc_envelope import (
    MalformedEnvelopeError,
    RpcError,
    RpcRequest,
    error_response,
    extract_bearer_credential,
    parse_request,
    request_id_of,
    success_response,
)
from journal_coach.services.credential_store import CredentialStore
from journal_coach.services.tool_dispatch import ToolDispatcher
from journal_coach.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_INFO = {"name": "journal-mcp-server", "version": "1.0.0"}
CAPABILITIES = {"tools": {}}


class InvalidParamsError(ValueError):
    """Known method, unusable params (e.g. tools/call without a name)."""


class RpcGateway:
    """Authenticates, routes, and wraps one JSON-RPC request."""

    def __init__(
        self,
        credential_store: CredentialStore,
        registry: ToolRegistry,
        dispatcher: ToolDispatcher,
    ):
        self._store = credential_store
        self._registry = registry
        self._dispatcher = dispatcher
        self._routes = {
            RpcMethod.INITIALIZE: self._initialize,
            RpcMethod.TOOLS_LIST: self._tools_list,
            RpcMethod.TOOLS_CALL: self._tools_call,
        }

    async def handle(
        self,
        body: Any,
        api_key_header: str | None = None,
        authorization: str | None = None,
    ) -> dict[str, Any]:
        """Process one decoded request body. Always returns a response envelope."""
        request_id = request_id_of(body)

        secret = extract_bearer_credential(api_key_header, authorization)
        if secret is None:
            return error_response(request_id, RpcError(
                RpcErrorCode.CREDENTIAL_REQUIRED, "API key required",
            ))
        try:
            account_id = await self._store.authenticate(secret)
        except Exception as e:
            logger.error("Credential check failed: %s", e, exc_info=True)
            account_id = None
        if account_id is None:
            logger.warning("Rejected RPC request: invalid API key")
            return error_response(request_id, RpcError(
                RpcErrorCode.INVALID_CREDENTIAL, "Invalid API key",
            ))

        try:
            request = parse_request(body)
        except MalformedEnvelopeError as e:
            return error_response(request_id, RpcError(
                RpcErrorCode.INTERNAL_ERROR, str(e),
            ))

        method = RpcMethod.parse(request.method)
        if method is None:
            label = request.method if isinstance(request.method, str) else None
            return error_response(request_id, RpcError(
                RpcErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {label}" if label else "Method not found",
                data={"method": label},
            ))

        extra = {"rpc_method": method.value, "account_id": account_id}
        try:
            result = await self._routes[method](request, account_id)
        except InvalidParamsError as e:
            logger.warning("Invalid params: %s", e, extra=extra)
            return error_response(request_id, RpcError(
                RpcErrorCode.INTERNAL_ERROR, "Invalid params", data={"detail": str(e)},
            ))
        except Exception as e:
            logger.error("RPC handling failed: %s", e, extra=extra, exc_info=True)
            return error_response(request_id, RpcError(
                RpcErrorCode.INTERNAL_ERROR, str(e) or type(e).__name__,
            ))
        logger.info("RPC request handled", extra=extra)
        return success_response(request_id, result)

    async def _initialize(self, request: RpcRequest, account_id: AccountId) -> dict:
        return {
            "serverInfo": dict(SERVER_INFO),
            "capabilities": copy.deepcopy(CAPABILITIES),
        }

    async def _tools_list(self, request: RpcRequest, account_id: AccountId) -> dict:
        return {"tools": self._registry.to_wire()}

    async def _tools_call(self, request: RpcRequest, account_id: AccountId) -> dict:
        name = request.params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("params.name must be a non-empty string")
        outcome = await self._dispatcher.invoke(
            name, request.params.get("arguments"), account_id,
        )
        result: dict[str, Any] = {
            "content": [{"type": "text", "text": json.dumps(outcome.payload)}],
        }
        if outcome.is_error:
            result["isError"] = True
        return result
