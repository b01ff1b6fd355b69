"""Tests for error taxonomy and envelopes."""

from assistants_mcp.protocol.errors import (
    MCPError,
    create_enhanced_error,
    error_response,
    format_provider_error,
    success_response,
    to_error_response,
    to_mcp_error,
)
from assistants_mcp.protocol.messages import ErrorCode, LegacyErrorCode


class TestEnhancedErrors:
    """Test legacy code mapping."""

    def test_unauthorized_maps_to_internal_error(self):
        error = create_enhanced_error(LegacyErrorCode.UNAUTHORIZED, "bad key", {"keyLength": 3})
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.data["originalCode"] == -32001
        assert error.data["category"] == "authentication"
        assert error.data["keyLength"] == 3

    def test_not_found_and_rate_limited_map_to_invalid_params(self):
        for legacy in (LegacyErrorCode.NOT_FOUND, LegacyErrorCode.RATE_LIMITED):
            assert create_enhanced_error(legacy, "x").code == ErrorCode.INVALID_PARAMS
        assert create_enhanced_error(LegacyErrorCode.FORBIDDEN, "x").code == ErrorCode.INTERNAL_ERROR

    def test_unmapped_code_passes_through(self):
        error = create_enhanced_error(-32099, "custom")
        assert error.code == -32099
        assert error.data is None


class TestProviderErrors:
    def test_rate_limit(self):
        error = format_provider_error(429, {"error": {"message": "slow down"}}, "GET /assistants")
        assert error.code == ErrorCode.INVALID_PARAMS
        assert error.data["originalCode"] == LegacyErrorCode.RATE_LIMITED
        assert error.data["retryAfter"] == "60s"
        assert error.data["httpStatus"] == 429

    def test_not_found(self):
        error = format_provider_error(404)
        assert error.message == "Resource not found. Please check the ID and try again."
        assert error.data["originalCode"] == LegacyErrorCode.NOT_FOUND

    def test_server_error_uses_remote_message(self):
        error = format_provider_error(500, {"error": {"message": "server exploded"}})
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.message == "server exploded"
        assert format_provider_error(502).message == "HTTP 502: Request failed"


class TestEnvelopes:
    """Test JSON-RPC envelopes."""

    def test_success_keeps_null_id(self):
        assert success_response(None, {"ok": True}) == {"jsonrpc": "2.0", "id": None, "result": {"ok": True}}

    def test_error_omits_missing_data(self):
        assert error_response(4, ErrorCode.PARSE_ERROR, "Parse error") == {
            "jsonrpc": "2.0",
            "id": 4,
            "error": {"code": -32700, "message": "Parse error"},
        }

    def test_to_mcp_error_passthrough(self):
        error = MCPError(ErrorCode.INVALID_PARAMS, "nope")
        assert to_mcp_error(error) is error

    def test_to_mcp_error_debug_stack(self):
        try:
            raise ValueError("broken")
        except ValueError as e:
            plain = to_mcp_error(e, 9)
            debug = to_mcp_error(e, 9, debug=True)

        assert plain.code == ErrorCode.INTERNAL_ERROR
        assert plain.data["requestId"] == 9
        assert plain.data["originalError"] == {"type": "ValueError", "message": "broken"}
        assert "timestamp" in plain.data
        assert "ValueError: broken" in debug.data["originalError"]["stack"]

    def test_to_error_response(self):
        response = to_error_response(KeyError("k"), "r1")
        assert response["id"] == "r1"
        assert response["error"]["code"] == ErrorCode.INTERNAL_ERROR

    def test_with_context(self):
        error = MCPError(ErrorCode.INVALID_PARAMS, "bad", {"a": 1})
        enriched = error.with_context(b=2)
        assert enriched.data == {"a": 1, "b": 2}
        assert error.data == {"a": 1}
        assert enriched.__cause__ is error
