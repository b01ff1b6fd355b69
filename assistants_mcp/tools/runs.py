"""Run and run-step tools."""

from typing import Any, Dict

from .base import ToolContext, ToolHandler
from .validation import (
    validate_id,
    validate_list_params,
    validate_metadata,
    validate_model,
    validate_string,
    validate_tool_outputs,
)

RUN_FIELDS = (
    "assistant_id",
    "model",
    "instructions",
    "additional_instructions",
    "tools",
    "metadata",
    "temperature",
    "top_p",
    "max_prompt_tokens",
    "max_completion_tokens",
)


def _thread_and_run(arguments: Dict[str, Any]) -> None:
    validate_id(arguments.get("thread_id"), "thread", "thread_id")
    validate_id(arguments.get("run_id"), "run", "run_id")


class RunCreateTool(ToolHandler):
    """Start a run of an assistant on a thread."""

    @property
    def name(self) -> str:
        return "run-create"

    @property
    def category(self) -> str:
        return "run"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_id(arguments.get("assistant_id"), "assistant", "assistant_id")
        if arguments.get("model") is not None:
            validate_model(arguments["model"])
        for key in ("instructions", "additional_instructions"):
            validate_string(arguments.get(key), key)
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {key: arguments[key] for key in RUN_FIELDS if key in arguments}
        return await provider.create_run(arguments["thread_id"], request)


class RunListTool(ToolHandler):
    @property
    def name(self) -> str:
        return "run-list"

    @property
    def category(self) -> str:
        return "run"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_list_params(arguments)

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {key: value for key, value in arguments.items() if key != "thread_id"}
        return await provider.list_runs(arguments["thread_id"], request)


class RunGetTool(ToolHandler):
    @property
    def name(self) -> str:
        return "run-get"

    @property
    def category(self) -> str:
        return "run"

    def validate(self, arguments: Dict[str, Any]) -> None:
        _thread_and_run(arguments)

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.get_run(arguments["thread_id"], arguments["run_id"])


class RunUpdateTool(ToolHandler):
    @property
    def name(self) -> str:
        return "run-update"

    @property
    def category(self) -> str:
        return "run"

    def validate(self, arguments: Dict[str, Any]) -> None:
        _thread_and_run(arguments)
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.update_run(
            arguments["thread_id"], arguments["run_id"], {"metadata": arguments.get("metadata")}
        )


class RunCancelTool(ToolHandler):
    @property
    def name(self) -> str:
        return "run-cancel"

    @property
    def category(self) -> str:
        return "run"

    def validate(self, arguments: Dict[str, Any]) -> None:
        _thread_and_run(arguments)

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.cancel_run(arguments["thread_id"], arguments["run_id"])


class RunSubmitToolOutputsTool(ToolHandler):
    """Submit function-call outputs for a run that requires action."""

    @property
    def name(self) -> str:
        return "run-submit-tool-outputs"

    @property
    def category(self) -> str:
        return "run"

    def validate(self, arguments: Dict[str, Any]) -> None:
        _thread_and_run(arguments)
        validate_tool_outputs(arguments.get("tool_outputs"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.submit_tool_outputs(
            arguments["thread_id"], arguments["run_id"], {"tool_outputs": arguments["tool_outputs"]}
        )


class RunStepListTool(ToolHandler):
    @property
    def name(self) -> str:
        return "run-step-list"

    @property
    def category(self) -> str:
        return "run-step"

    def validate(self, arguments: Dict[str, Any]) -> None:
        _thread_and_run(arguments)
        validate_list_params(arguments)

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {
            key: value for key, value in arguments.items() if key not in ("thread_id", "run_id")
        }
        return await provider.list_run_steps(arguments["thread_id"], arguments["run_id"], request)


class RunStepGetTool(ToolHandler):
    @property
    def name(self) -> str:
        return "run-step-get"

    @property
    def category(self) -> str:
        return "run-step"

    def validate(self, arguments: Dict[str, Any]) -> None:
        _thread_and_run(arguments)
        validate_id(arguments.get("step_id"), "step", "step_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.get_run_step(
            arguments["thread_id"], arguments["run_id"], arguments["step_id"]
        )


def create_run_tools() -> Dict[str, ToolHandler]:
    tools = [
        RunCreateTool(),
        RunListTool(),
        RunGetTool(),
        RunUpdateTool(),
        RunCancelTool(),
        RunSubmitToolOutputsTool(),
        RunStepListTool(),
        RunStepGetTool(),
    ]
    return {tool.name: tool for tool in tools}
