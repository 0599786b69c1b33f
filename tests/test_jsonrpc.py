"""Unit tests for JSON-RPC parsing and the method dispatch table."""
import asyncio
import json

import pytest

from widget_mcp.jsonrpc import (
    ErrorCode,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    JSONRPCException,
    JSONRPCHandler,
    JSONRPCRequest,
    JSONRPCResponse,
    MethodNotFoundError,
    is_notification,
    parse_message,
)


@pytest.mark.asyncio
async def test_jsonrpc_method_not_found():
    """Test that non-existent methods return METHOD_NOT_FOUND error."""
    handler = JSONRPCHandler()

    request = JSONRPCRequest(
        method="nonexistent_method",
        params={},
        id=1
    )

    response = await handler.handle_request(request)

    assert response.error is not None
    assert response.error.code == ErrorCode.METHOD_NOT_FOUND
    assert "nonexistent_method" in response.error.message
    assert response.result is None
    assert "result" not in response.to_dict()


@pytest.mark.asyncio
async def test_jsonrpc_successful_call():
    """Test successful method execution."""
    handler = JSONRPCHandler()

    async def test_method(params):
        return {"result": "success", "input": params}

    handler.register_method("test", test_method)

    request = JSONRPCRequest(
        method="test",
        params={"key": "value"},
        id=1
    )

    response = await handler.handle_request(request)

    assert response.error is None
    assert response.result == {"result": "success", "input": {"key": "value"}}
    assert response.id == 1


@pytest.mark.asyncio
async def test_jsonrpc_raised_error_keeps_its_code():
    """JSONRPCException subclasses choose the error envelope."""
    handler = JSONRPCHandler()

    async def error_method(params):
        raise InvalidParamsError("Resource not found: x", data={"uri": "x"})

    handler.register_method("error_test", error_method)

    response = await handler.handle_request(
        JSONRPCRequest(method="error_test", params={}, id="abc")
    )

    assert response.error.code == ErrorCode.INVALID_PARAMS
    assert response.error.message == "Resource not found: x"
    assert response.error.data == {"uri": "x"}
    assert response.id == "abc"


@pytest.mark.asyncio
async def test_jsonrpc_internal_error():
    """Test that unexpected exceptions return INTERNAL_ERROR."""
    handler = JSONRPCHandler()

    async def crash_method(params):
        raise RuntimeError("Something went wrong")

    handler.register_method("crash", crash_method)

    request = JSONRPCRequest(
        method="crash",
        params={},
        id=3
    )

    response = await handler.handle_request(request)

    assert response.error is not None
    assert response.error.code == ErrorCode.INTERNAL_ERROR
    assert response.error.data == {"details": "Something went wrong"}


@pytest.mark.asyncio
async def test_jsonrpc_value_error_is_internal():
    """Malformed params that blow up inside a handler are internal errors."""
    handler = JSONRPCHandler()

    async def picky_method(params):
        return int(params["count"])

    handler.register_method("picky", picky_method)

    response = await handler.handle_request(
        JSONRPCRequest(method="picky", params={"count": "many"}, id=5)
    )

    assert response.error.code == ErrorCode.INTERNAL_ERROR


@pytest.mark.asyncio
async def test_jsonrpc_timeout_is_internal_error():
    handler = JSONRPCHandler()

    async def slow_method(params):
        await asyncio.wait_for(asyncio.sleep(1), timeout=0.01)

    handler.register_method("slow", slow_method)

    response = await handler.handle_request(JSONRPCRequest(method="slow", id=6))

    assert response.error.code == ErrorCode.INTERNAL_ERROR
    assert "timed out" in response.error.message


@pytest.mark.asyncio
async def test_jsonrpc_no_params():
    """Test method call with no params (None)."""
    handler = JSONRPCHandler()

    async def no_params_method(params):
        assert params == {}
        return {"status": "ok"}

    handler.register_method("no_params", no_params_method)

    request = JSONRPCRequest(
        method="no_params",
        params=None,
        id=4
    )

    response = await handler.handle_request(request)

    assert response.error is None
    assert response.result == {"status": "ok"}


def test_error_codes():
    """Test that error codes are correctly defined."""
    assert ErrorCode.PARSE_ERROR == -32700
    assert ErrorCode.INVALID_REQUEST == -32600
    assert ErrorCode.METHOD_NOT_FOUND == -32601
    assert ErrorCode.INVALID_PARAMS == -32602
    assert ErrorCode.INTERNAL_ERROR == -32603


@pytest.mark.parametrize("exc_class, code", [
    (InvalidRequestError, -32600),
    (MethodNotFoundError, -32601),
    (InvalidParamsError, -32602),
    (InternalError, -32603),
])
def test_exception_classes_carry_their_code(exc_class, code):
    error = exc_class("boom", data={"field": "x"}).to_error()

    assert error.code == code
    assert error.message == "boom"
    assert error.data == {"field": "x"}


def test_exception_code_override():
    assert JSONRPCException("custom", code=-32000).to_error().code == -32000


def test_is_notification():
    assert is_notification("notifications/initialized")
    assert not is_notification("tools/list")
    assert JSONRPCRequest(method="notifications/initialized", has_id=False).is_notification


class TestParseMessage:
    """Test envelope validation before dispatch."""

    def test_valid_request(self):
        parsed = parse_message(b'{"jsonrpc": "2.0", "id": 7, "method": "tools/list"}')

        assert isinstance(parsed, JSONRPCRequest)
        assert parsed.id == 7
        assert parsed.method == "tools/list"
        assert parsed.params is None
        assert parsed.has_id

    def test_invalid_json_is_parse_error_with_null_id(self):
        parsed = parse_message(b"{bad")

        assert isinstance(parsed, JSONRPCResponse)
        assert parsed.to_dict()["id"] is None
        assert parsed.to_dict()["error"]["code"] == ErrorCode.PARSE_ERROR

    def test_empty_body_is_parse_error(self):
        parsed = parse_message(b"")

        assert parsed.error.code == ErrorCode.PARSE_ERROR

    def test_non_object_is_invalid_request(self):
        parsed = parse_message(b"[1, 2, 3]")

        assert parsed.error.code == ErrorCode.INVALID_REQUEST
        assert parsed.to_dict()["id"] is None

    def test_deep_nesting_is_parse_error(self):
        parsed = parse_message("[" * 200000 + "]" * 200000)

        assert parsed.error.code == ErrorCode.PARSE_ERROR
        assert parsed.to_dict()["id"] is None

    @pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity", "1e999"])
    def test_non_finite_numbers_are_parse_errors(self, token):
        parsed = parse_message(f'{{"jsonrpc": "2.0", "id": {token}, "method": "ping"}}')

        assert parsed.error.code == ErrorCode.PARSE_ERROR
        json.dumps(parsed.to_dict(), allow_nan=False)

    def test_finite_float_id_is_accepted(self):
        parsed = parse_message(b'{"jsonrpc": "2.0", "id": 1.5, "method": "ping"}')

        assert isinstance(parsed, JSONRPCRequest)
        assert parsed.id == 1.5

    def test_invalid_id_is_rejected_before_version(self):
        parsed = parse_message(b'{"jsonrpc": "1.0", "id": {"n": 1}, "method": "ping"}')

        assert parsed.error.code == ErrorCode.INVALID_REQUEST
        assert "id must be" in parsed.error.message
        assert parsed.to_dict()["id"] is None

    @pytest.mark.parametrize("version", ["1.0", 2.0, None, ""])
    def test_wrong_version_echoes_id(self, version):
        body = {"jsonrpc": version, "id": "req-9", "method": "initialize"}
        parsed = parse_message(json.dumps(body))

        assert parsed.error.code == ErrorCode.INVALID_REQUEST
        assert parsed.to_dict()["id"] == "req-9"

    def test_missing_version_and_id_omits_id(self):
        parsed = parse_message(b'{"method": "initialize"}')

        data = parsed.to_dict()
        assert data["error"]["code"] == ErrorCode.INVALID_REQUEST
        assert "id" not in data

    def test_missing_method_is_invalid_request(self):
        parsed = parse_message(b'{"jsonrpc": "2.0", "id": 1}')

        assert parsed.error.code == ErrorCode.INVALID_REQUEST
        assert parsed.id == 1

    def test_non_object_params_is_invalid_params(self):
        parsed = parse_message(b'{"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": [1]}')

        assert parsed.error.code == ErrorCode.INVALID_PARAMS

    def test_notification_without_id(self):
        parsed = parse_message(b'{"jsonrpc": "2.0", "method": "notifications/initialized"}')

        assert isinstance(parsed, JSONRPCRequest)
        assert not parsed.has_id
        assert parsed.is_notification


class TestResponseRendering:
    def test_null_id_is_kept(self):
        response = JSONRPCResponse(id=None, result={})

        assert response.to_dict() == {"jsonrpc": "2.0", "id": None, "result": {}}

    def test_absent_id_is_dropped(self):
        request = JSONRPCRequest(method="x", has_id=False)
        response = JSONRPCResponse.for_request(request, result={"ok": True})

        assert response.to_dict() == {"jsonrpc": "2.0", "result": {"ok": True}}

    def test_error_drops_empty_data(self):
        response = parse_message(b"nope")

        assert "data" not in response.to_dict()["error"]
