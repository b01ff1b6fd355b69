"""OpenAI Assistants API provider."""

from typing import Any, Dict, Optional
import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..protocol.errors import MCPError, format_provider_error
from ..protocol.messages import ErrorCode
from .base import Provider
from .registry import ProviderRegistry

logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://api.openai.com/v1"


def _query(request: Optional[Dict[str, Any]], keys=("limit", "order", "after", "before")) -> Dict[str, Any]:
    request = request or {}
    return {key: request[key] for key in keys if request.get(key) is not None}


def _body(request: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {key: value for key, value in (request or {}).items() if value is not None}


class OpenAIProvider(Provider):
    """Provider backed by the OpenAI Assistants v2 REST API."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise MCPError(ErrorCode.INVALID_PARAMS, "API key is required for the OpenAI provider")
        self.config = config or {}
        self.base_url = base_url.rstrip("/")

        timeout = httpx.Timeout(
            connect=self.config.get("connect_timeout", 10.0),
            read=self.config.get("read_timeout", 60.0),
            write=self.config.get("write_timeout", 10.0),
            pool=self.config.get("pool_timeout", 10.0),
        )
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "OpenAI-Beta": "assistants=v2",
            },
            limits=httpx.Limits(
                max_keepalive_connections=self.config.get("max_keepalive", 20),
                max_connections=self.config.get("max_connections", 100),
            ),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        return await self._client.request(method, path, json=json, params=params or None)

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Perform a request and decode the JSON body."""
        context = f"{method} {path}"
        try:
            response = await self._send(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error("Provider request failed", context=context, error=str(e))
            raise MCPError(
                ErrorCode.INTERNAL_ERROR,
                f"Request failed: {e}",
                {"context": context},
            ) from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"raw": response.text}
            logger.warning(
                "Provider returned an error",
                context=context,
                status_code=response.status_code,
            )
            raise format_provider_error(response.status_code, body, context)

        logger.debug("Provider request completed", context=context, status_code=response.status_code)
        return response.json()

    # Assistants
    async def create_assistant(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/assistants", json=_body(request))

    async def list_assistants(self, request: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._request("GET", "/assistants", params=_query(request))

    async def get_assistant(self, assistant_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/assistants/{assistant_id}")

    async def update_assistant(self, assistant_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/assistants/{assistant_id}", json=_body(request))

    async def delete_assistant(self, assistant_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/assistants/{assistant_id}")

    # Threads
    async def create_thread(self, request: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._request("POST", "/threads", json=_body(request))

    async def get_thread(self, thread_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/threads/{thread_id}")

    async def update_thread(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/threads/{thread_id}", json=_body(request))

    async def delete_thread(self, thread_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/threads/{thread_id}")

    # Messages
    async def create_message(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/threads/{thread_id}/messages", json=_body(request))

    async def list_messages(
        self, thread_id: str, request: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        params = _query(request, ("limit", "order", "after", "before", "run_id"))
        return await self._request("GET", f"/threads/{thread_id}/messages", params=params)

    async def get_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/threads/{thread_id}/messages/{message_id}")

    async def update_message(
        self, thread_id: str, message_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/threads/{thread_id}/messages/{message_id}", json=_body(request)
        )

    async def delete_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/threads/{thread_id}/messages/{message_id}")

    # Runs
    async def create_run(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/threads/{thread_id}/runs", json=_body(request))

    async def list_runs(
        self, thread_id: str, request: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return await self._request("GET", f"/threads/{thread_id}/runs", params=_query(request))

    async def get_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/threads/{thread_id}/runs/{run_id}")

    async def update_run(
        self, thread_id: str, run_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/threads/{thread_id}/runs/{run_id}", json=_body(request)
        )

    async def cancel_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/threads/{thread_id}/runs/{run_id}/cancel")

    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/threads/{thread_id}/runs/{run_id}/submit_tool_outputs",
            json=_body(request),
        )

    # Run steps
    async def list_run_steps(
        self, thread_id: str, run_id: str, request: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/threads/{thread_id}/runs/{run_id}/steps", params=_query(request)
        )

    async def get_run_step(self, thread_id: str, run_id: str, step_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/threads/{thread_id}/runs/{run_id}/steps/{step_id}")


def create_openai_registry(
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
    config: Optional[Dict[str, Any]] = None,
) -> ProviderRegistry:
    """Build a provider registry holding a single default OpenAI provider."""
    registry = ProviderRegistry(default_provider=OpenAIProvider.name)
    registry.register(OpenAIProvider.name, OpenAIProvider(api_key, base_url, config), default=True)
    return registry
