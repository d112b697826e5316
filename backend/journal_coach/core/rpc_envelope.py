"""RPC Envelope: JSON-RPC 2.0 request parsing and response construction.

Invariants:
    - Response id is the request id, unchanged (string, number, or None)
    - Every response carries exactly one of `result` or `error`
    - Error codes come from RpcErrorCode only
    - extract_bearer_credential: X-API-Key wins over Authorization
"""

from dataclasses import dataclass, field
from typing import Any

from journal_coach.core.domain_types import RpcErrorCode

JSONRPC_VERSION = "2.0"

RequestId = str | int | float | None


@dataclass(frozen=True)
class RpcRequest:
    """Parsed request envelope. `method` is kept raw for error reporting."""
    id: RequestId
    method: Any
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RpcError:
    code: RpcErrorCode
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        error = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class MalformedEnvelopeError(ValueError):
    """Body is not a JSON object."""


def request_id_of(body: Any) -> RequestId:
    """Best-effort id extraction so even rejected envelopes echo it."""
    if isinstance(body, dict):
        value = body.get("id")
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return value
    return None


def parse_request(body: Any) -> RpcRequest:
    """Parse a decoded JSON body into an RpcRequest."""
    if not isinstance(body, dict):
        raise MalformedEnvelopeError("Invalid request envelope")
    params = body.get("params")
    return RpcRequest(
        id=request_id_of(body),
        method=body.get("method"),
        params=params if isinstance(params, dict) else {},
    )


def success_response(request_id: RequestId, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: RequestId, error: RpcError) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error.to_dict()}


def extract_bearer_credential(
    api_key_header: str | None, authorization: str | None,
) -> str | None:
    """Pick the bearer secret from either accepted carrier."""
    if api_key_header and api_key_header.strip():
        return api_key_header.strip()
    if authorization and authorization.strip():
        value = authorization.strip()
        if value[:7].lower() == "bearer ":
            value = value[7:].strip()
        return value or None
    return None
