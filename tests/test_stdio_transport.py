"""Tests for the stdio transport adapter."""

import asyncio
import io
import json
import sys
import pytest

from assistants_mcp.protocol.messages import ErrorCode
from assistants_mcp.transport import StdioTransportAdapter


async def echo_dispatch(request):
    return {"jsonrpc": "2.0", "id": request.id, "result": {"method": request.method}}


class TestSerialize:
    def test_no_raw_line_breaks(self):
        line = StdioTransportAdapter.serialize({"text": "a\nb\r\nc\rd"})
        assert "\n" not in line and "\r" not in line

    def test_embedded_newlines_in_strings_are_escaped(self):
        assert json.loads(StdioTransportAdapter.serialize({"text": "a\nb"})) == {"text": "a\nb"}


class TestProcessLine:
    """Test one line at a time."""

    @pytest.mark.asyncio
    async def test_blank_line_is_ignored(self):
        adapter = StdioTransportAdapter()
        assert await adapter.process_line("   \n", echo_dispatch) is None

    @pytest.mark.asyncio
    async def test_parse_error(self):
        adapter = StdioTransportAdapter()
        response = await adapter.process_line("{not json", echo_dispatch)

        assert response["id"] is None
        assert response["error"]["code"] == ErrorCode.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_wrong_jsonrpc_version(self):
        adapter = StdioTransportAdapter()
        response = await adapter.process_line('{"jsonrpc": "1.0", "id": 3, "method": "x"}', echo_dispatch)

        assert response["id"] == 3
        assert response["error"]["code"] == ErrorCode.INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_notification_gets_no_response(self):
        adapter = StdioTransportAdapter()
        line = '{"jsonrpc": "2.0", "method": "notifications/initialized"}'
        assert await adapter.process_line(line, echo_dispatch) is None

    @pytest.mark.asyncio
    async def test_dispatch(self):
        adapter = StdioTransportAdapter()
        response = await adapter.process_line('{"jsonrpc": "2.0", "id": 1, "method": "ping"}', echo_dispatch)
        assert response == {"jsonrpc": "2.0", "id": 1, "result": {"method": "ping"}}

    @pytest.mark.asyncio
    async def test_dispatch_failure_becomes_internal_error(self):
        async def failing(request):
            raise RuntimeError("dispatch broke")

        adapter = StdioTransportAdapter()
        response = await adapter.process_line('{"jsonrpc": "2.0", "id": 2, "method": "x"}', failing)
        assert response["id"] == 2
        assert response["error"]["code"] == ErrorCode.INTERNAL_ERROR


class TestServe:
    """Test the read loop against an in-memory stream."""

    @pytest.mark.asyncio
    async def test_serve_until_eof(self, router):
        output = io.StringIO()
        adapter = StdioTransportAdapter(output=output)
        reader = asyncio.StreamReader()
        reader.feed_data(b'{"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}\n')
        reader.feed_data(b"\n")
        reader.feed_data(b"garbage\n")
        reader.feed_data(b'{"jsonrpc": "2.0", "method": "notifications/initialized"}\n')
        reader.feed_data(b'{"jsonrpc": "2.0", "id": 2, "method": "resources/read", "params": {"uri": "docs://best-practices"}}\n')
        reader.feed_eof()

        await adapter.serve(router.handle_request, reader=reader)

        lines = output.getvalue().splitlines()
        assert len(lines) == 3
        responses = [json.loads(line) for line in lines]
        assert responses[0]["result"]["serverInfo"]["name"] == "openai-assistants-mcp"
        assert responses[1]["error"]["code"] == ErrorCode.PARSE_ERROR
        assert responses[2]["id"] == 2
        assert "\n" in responses[2]["result"]["contents"][0]["text"]

    @pytest.mark.asyncio
    async def test_stop(self):
        adapter = StdioTransportAdapter(output=io.StringIO())
        reader = asyncio.StreamReader()

        task = asyncio.ensure_future(adapter.serve(echo_dispatch, reader=reader))
        await asyncio.sleep(0)
        adapter.stop()
        await asyncio.wait_for(task, timeout=1)

    def test_emit_internal_error(self):
        output = io.StringIO()
        adapter = StdioTransportAdapter(output=output)
        adapter.emit_internal_error(RuntimeError("escaped"))

        response = json.loads(output.getvalue())
        assert response["id"] is None
        assert response["error"] == {"code": -32603, "message": "Internal error: escaped"}


class TestOversizedInput:
    """Test lines longer than the reader limit."""

    @pytest.mark.asyncio
    async def test_oversized_line_does_not_stop_serving(self, router):
        output = io.StringIO()
        adapter = StdioTransportAdapter(output=output)
        reader = asyncio.StreamReader(limit=64 * 1024)
        big = json.dumps({
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/call",
            "params": {
                "name": "message-create",
                "arguments": {"thread_id": "thread_abc123def456ghi789jkl012", "role": "user", "content": "x" * 70000},
            },
        })
        reader.feed_data(big.encode() + b"\n")
        reader.feed_data(b'{"jsonrpc": "2.0", "id": 2, "method": "initialize", "params": {}}\n')
        reader.feed_eof()

        await adapter.serve(router.handle_request, reader=reader)

        responses = [json.loads(line) for line in output.getvalue().splitlines()]
        assert len(responses) == 2
        assert responses[0]["id"] is None
        assert responses[0]["error"]["code"] == ErrorCode.INVALID_REQUEST
        assert responses[0]["error"]["message"] == "Request too large"
        assert responses[1]["id"] == 2
        assert "result" in responses[1]

    def test_default_limit_is_large(self):
        assert StdioTransportAdapter().max_message_bytes >= 16 * 1024 * 1024
        assert StdioTransportAdapter(max_message_bytes=1024).max_message_bytes == 1024


class TestSafetyNets:
    """Test escaped exceptions are reported on the output stream."""

    def test_loop_exception_handler(self):
        output = io.StringIO()
        adapter = StdioTransportAdapter(output=output)

        adapter._handle_loop_exception(None, {"exception": RuntimeError("task blew up"), "message": "x"})

        [line] = output.getvalue().splitlines()
        response = json.loads(line)
        assert response["id"] is None
        assert response["error"]["code"] == -32603
        assert "task blew up" in response["error"]["message"]

    def test_loop_exception_handler_without_exception(self):
        output = io.StringIO()
        StdioTransportAdapter(output=output)._handle_loop_exception(None, {"message": "callback failed"})
        assert json.loads(output.getvalue())["error"]["message"] == "Internal error: callback failed"

    def test_excepthook(self):
        output = io.StringIO()
        adapter = StdioTransportAdapter(output=output)

        adapter._excepthook(ValueError, ValueError("uncaught"), None)

        response = json.loads(output.getvalue())
        assert response["error"] == {"code": -32603, "message": "Internal error: uncaught"}

    @pytest.mark.asyncio
    async def test_install_and_remove(self):
        loop = asyncio.get_running_loop()
        original_hook = sys.excepthook
        adapter = StdioTransportAdapter(output=io.StringIO())

        adapter.install_safety_nets(loop)
        try:
            assert sys.excepthook == adapter._excepthook
            assert loop.get_exception_handler() == adapter._handle_loop_exception
        finally:
            adapter.remove_safety_nets(loop)

        assert sys.excepthook is original_hook
        assert loop.get_exception_handler() is None
