"""RPC Envelope: request parsing, id echo, response shapes, credential extraction."""

import pytest

from journal_coach.core.domain_types import RpcErrorCode
from journal_coach.core.rpc_envelope import (
    MalformedEnvelopeError, RpcError, error_response, extract_bearer_credential,
    parse_request, request_id_of, success_response,
)


@pytest.mark.parametrize("request_id", ["abc", 7, 1.5, None])
def test_request_id_round_trips(request_id):
    body = {"jsonrpc": "2.0", "id": request_id, "method": "tools/list"}
    assert request_id_of(body) == request_id
    assert success_response(request_id_of(body), {})["id"] == request_id


def test_bool_and_object_ids_are_not_echoed():
    assert request_id_of({"id": True}) is None
    assert request_id_of({"id": {"nested": 1}}) is None
    assert request_id_of(["not", "an", "object"]) is None


def test_parse_request_defaults_params():
    request = parse_request({"id": 1, "method": "tools/call", "params": "junk"})
    assert request.method == "tools/call"
    assert request.params == {}


def test_parse_request_rejects_non_object():
    with pytest.raises(MalformedEnvelopeError):
        parse_request([1, 2, 3])


def test_responses_carry_exactly_one_of_result_or_error():
    ok = success_response(1, {"tools": []})
    err = error_response(1, RpcError(RpcErrorCode.METHOD_NOT_FOUND, "Method not found: x"))
    assert "result" in ok and "error" not in ok
    assert "error" in err and "result" not in err
    assert ok["jsonrpc"] == err["jsonrpc"] == "2.0"


def test_error_data_only_when_present():
    bare = RpcError(RpcErrorCode.INVALID_CREDENTIAL, "Invalid API key").to_dict()
    assert bare == {"code": -32001, "message": "Invalid API key"}
    with_data = RpcError(RpcErrorCode.METHOD_NOT_FOUND, "m", data={"method": "x"}).to_dict()
    assert with_data["data"] == {"method": "x"}


def test_api_key_header_takes_precedence():
    assert extract_bearer_credential("jrnl_key", "Bearer other") == "jrnl_key"


def test_bearer_prefix_stripped_case_insensitively():
    assert extract_bearer_credential(None, "Bearer jrnl_abc") == "jrnl_abc"
    assert extract_bearer_credential(None, "bearer jrnl_abc") == "jrnl_abc"
    assert extract_bearer_credential(None, "jrnl_abc") == "jrnl_abc"


@pytest.mark.parametrize("api_key,authorization", [
    (None, None), ("", ""), ("   ", None), (None, "Bearer "),
])
def test_missing_credential_returns_none(api_key, authorization):
    assert extract_bearer_credential(api_key, authorization) is None
