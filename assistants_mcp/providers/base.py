"""Provider interface for the remote Assistants API."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class Provider(ABC):
    """Abstract remote API used by tool handlers.

    Every operation is a coroutine returning the decoded JSON payload of the
    remote service. Implementations raise ``MCPError`` for remote failures.
    """

    name: str = "provider"

    # Assistants
    @abstractmethod
    async def create_assistant(self, request: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def list_assistants(self, request: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_assistant(self, assistant_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_assistant(self, assistant_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def delete_assistant(self, assistant_id: str) -> Dict[str, Any]:
        pass

    # Threads
    @abstractmethod
    async def create_thread(self, request: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_thread(self, thread_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_thread(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> Dict[str, Any]:
        pass

    # Messages
    @abstractmethod
    async def create_message(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def list_messages(
        self, thread_id: str, request: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_message(
        self, thread_id: str, message_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def delete_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        pass

    # Runs
    @abstractmethod
    async def create_run(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def list_runs(
        self, thread_id: str, request: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_run(
        self, thread_id: str, run_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def cancel_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]:
        pass

    # Run steps
    @abstractmethod
    async def list_run_steps(
        self, thread_id: str, run_id: str, request: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_run_step(self, thread_id: str, run_id: str, step_id: str) -> Dict[str, Any]:
        pass

    async def aclose(self) -> None:
        """Release any resources held by the provider."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
