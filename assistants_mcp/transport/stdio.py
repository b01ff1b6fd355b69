"""Standard I/O transport adapter for MCP."""

import asyncio
import json
import signal
import sys
from typing import Any, Awaitable, Callable, Dict, Optional, TextIO
import structlog
from pydantic import ValidationError

from ..protocol.errors import MCPError, RequestId, error_response
from ..protocol.messages import ErrorCode, MCPMethods, MCPRequest
from .base import AdapterCapability, TransportAdapter, TransportError

logger = structlog.get_logger()

Dispatch = Callable[[MCPRequest], Awaitable[Dict[str, Any]]]

DEFAULT_MAX_MESSAGE_BYTES = 16 * 1024 * 1024


def _recover_id(payload: Any) -> RequestId:
    if isinstance(payload, dict):
        request_id = payload.get("id")
        if isinstance(request_id, (int, str)) and not isinstance(request_id, bool):
            return request_id
    return None


class StdioTransportAdapter(TransportAdapter):
    """Newline-delimited JSON-RPC over stdin/stdout."""

    name = "stdio"
    capabilities = frozenset(
        {AdapterCapability.PREPROCESS, AdapterCapability.POSTPROCESS, AdapterCapability.FORMAT_ERROR}
    )

    def __init__(
        self,
        debug: bool = False,
        output: Optional[TextIO] = None,
        max_message_bytes: int = DEFAULT_MAX_MESSAGE_BYTES,
    ):
        self.debug = debug
        self.max_message_bytes = max_message_bytes
        self.output = output or sys.stdout
        self._stop: Optional[asyncio.Event] = None
        self._previous_excepthook = None

    async def preprocess(self, request: MCPRequest) -> MCPRequest:
        if request.jsonrpc != "2.0":
            raise MCPError(ErrorCode.INVALID_REQUEST, "Invalid JSON-RPC version")
        if self.debug:
            logger.debug("Processing request", method=request.method, request_id=request.id)
        return request

    async def postprocess(self, response: Dict[str, Any]) -> Dict[str, Any]:
        if self.debug:
            logger.debug("Sending response", request_id=response.get("id"))
        return response

    def format_error(self, error: MCPError, request_id: RequestId) -> Dict[str, Any]:
        if self.debug:
            logger.debug("Request failed", code=error.code, error=error.message, data=error.data)
        return super().format_error(error, request_id)

    def parse_line(self, line: str) -> Optional[MCPRequest]:
        """Parse one input line. Blank lines yield None."""
        text = line.strip()
        if not text:
            return None

        try:
            payload = json.loads(text)
        except ValueError as e:
            raise TransportError(ErrorCode.PARSE_ERROR, "Parse error", {"details": str(e)}) from e

        request_id = _recover_id(payload)
        if not isinstance(payload, dict):
            raise TransportError(ErrorCode.INVALID_REQUEST, "Invalid Request: expected a JSON object")
        if payload.get("jsonrpc") != "2.0":
            raise TransportError(
                ErrorCode.INVALID_REQUEST,
                "Invalid Request: jsonrpc must be \"2.0\"",
                {"received": payload.get("jsonrpc")},
                request_id=request_id,
            )
        try:
            return MCPRequest.model_validate(payload)
        except ValidationError as e:
            raise TransportError(
                ErrorCode.INVALID_REQUEST,
                "Invalid Request",
                {"details": e.errors(include_url=False, include_input=False)},
                request_id=request_id,
            ) from e

    @staticmethod
    def serialize(response: Dict[str, Any]) -> str:
        """Serialize a response to a single line without raw line breaks."""
        text = json.dumps(response, ensure_ascii=False, default=str)
        return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")

    def write_response(self, response: Dict[str, Any]) -> None:
        self.output.write(self.serialize(response) + "\n")
        self.output.flush()

    async def process_line(self, line: str, dispatch: Dispatch) -> Optional[Dict[str, Any]]:
        """Turn one input line into the response to write, if any."""
        try:
            request = self.parse_line(line)
        except TransportError as e:
            logger.warning("Rejected input line", code=e.code, error=e.message)
            return self.format_error(e, e.request_id)

        if request is None:
            return None
        if request.id is None and request.method.startswith(MCPMethods.NOTIFICATION_PREFIX):
            logger.debug("Notification received", method=request.method)
            return None

        try:
            return await dispatch(request)
        except Exception as e:
            logger.exception("Dispatch failed", method=request.method)
            return error_response(request.id, ErrorCode.INTERNAL_ERROR, f"Internal error: {e}")

    def emit_internal_error(self, error: BaseException) -> None:
        """Report an escaped exception on the output stream instead of crashing."""
        try:
            self.write_response(
                error_response(None, ErrorCode.INTERNAL_ERROR, f"Internal error: {error}")
            )
        except (OSError, ValueError) as e:
            logger.error("Failed to report internal error", error=str(e))

    def _handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        error = context.get("exception") or RuntimeError(context.get("message", "Unknown error"))
        logger.error("Unhandled exception in event loop", error=str(error))
        self.emit_internal_error(error)

    def _excepthook(self, exc_type, exc_value, exc_traceback) -> None:
        if issubclass(exc_type, KeyboardInterrupt) and self._previous_excepthook:
            self._previous_excepthook(exc_type, exc_value, exc_traceback)
            return
        logger.error("Uncaught exception", error=str(exc_value), type=exc_type.__name__)
        self.emit_internal_error(exc_value)

    def stop(self) -> None:
        """Ask the serving loop to exit after the current line."""
        if self._stop is not None:
            self._stop.set()

    def install_safety_nets(self, loop: asyncio.AbstractEventLoop) -> None:
        """Route escaped exceptions to the output and stop cleanly on SIGTERM/SIGINT."""
        loop.set_exception_handler(self._handle_loop_exception)
        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._excepthook

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
            except (NotImplementedError, RuntimeError):
                signal.signal(sig, lambda signum, frame: loop.call_soon_threadsafe(self._on_signal, signum))

    def remove_safety_nets(self, loop: asyncio.AbstractEventLoop) -> None:
        loop.set_exception_handler(None)
        if self._previous_excepthook is not None:
            sys.excepthook = self._previous_excepthook
            self._previous_excepthook = None
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                signal.signal(sig, signal.SIG_DFL)

    def _on_signal(self, signum: int) -> None:
        logger.info("Received shutdown signal", signal=signal.Signals(signum).name)
        self.stop()

    async def _open_stdin(self, loop: asyncio.AbstractEventLoop) -> asyncio.StreamReader:
        reader = asyncio.StreamReader(limit=self.max_message_bytes)
        protocol = asyncio.StreamReaderProtocol(reader)
        await loop.connect_read_pipe(lambda: protocol, sys.stdin)
        return reader

    async def serve(self, dispatch: Dispatch, reader: Optional[asyncio.StreamReader] = None) -> None:
        """Read requests line by line until EOF or a stop request."""
        loop = asyncio.get_running_loop()
        self._stop = asyncio.Event()
        owns_stdin = reader is None
        if owns_stdin:
            reader = await self._open_stdin(loop)
            self.install_safety_nets(loop)

        logger.info("Stdio transport ready")
        try:
            while not self._stop.is_set():
                read_task = asyncio.ensure_future(reader.readline())
                stop_task = asyncio.ensure_future(self._stop.wait())
                done, _ = await asyncio.wait({read_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
                if read_task not in done:
                    read_task.cancel()
                    break
                stop_task.cancel()

                try:
                    line = read_task.result()
                except (ValueError, asyncio.LimitOverrunError) as e:
                    # The reader has already discarded the oversized line
                    logger.warning("Input line too large", error=str(e), limit=self.max_message_bytes)
                    self.write_response(
                        error_response(
                            None,
                            ErrorCode.INVALID_REQUEST,
                            "Request too large",
                            {"maxBytes": self.max_message_bytes},
                        )
                    )
                    continue
                if not line:
                    logger.info("Stdin closed")
                    break

                response = await self.process_line(line.decode("utf-8", errors="replace"), dispatch)
                if response is not None:
                    self.write_response(response)
        finally:
            if owns_stdin:
                self.remove_safety_nets(loop)
            logger.info("Stdio transport stopped")


LocalDevTransportAdapter = StdioTransportAdapter
