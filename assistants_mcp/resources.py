"""Read-only MCP resources: assistant templates, documentation and workflow examples."""

from typing import Any, Dict, List, Optional

from .protocol.messages import ResourceDefinition

RESOURCES: Dict[str, ResourceDefinition] = {
    resource.uri: resource
    for resource in (
        ResourceDefinition(
            uri="assistant://templates/coding-assistant",
            name="Coding Assistant Template",
            description=(
                "Template for a coding assistant with code review, debugging and "
                "programming guidance capabilities"
            ),
            mime_type="application/json",
        ),
        ResourceDefinition(
            uri="assistant://templates/data-analyst",
            name="Data Analyst Template",
            description="Template for a data analysis assistant with statistical and visualization capabilities",
            mime_type="application/json",
        ),
        ResourceDefinition(
            uri="assistant://templates/customer-support",
            name="Customer Support Template",
            description="Template for a customer support assistant with friendly and helpful responses",
            mime_type="application/json",
        ),
        ResourceDefinition(
            uri="docs://openai-assistants-api",
            name="Assistants API Reference",
            description="API reference with ID formats, parameters and examples",
            mime_type="text/markdown",
        ),
        ResourceDefinition(
            uri="docs://best-practices",
            name="Best Practices Guide",
            description="Guidelines for usage, performance, security and cost",
            mime_type="text/markdown",
        ),
        ResourceDefinition(
            uri="docs://troubleshooting/common-issues",
            name="Troubleshooting Guide",
            description="Common issues and solutions when working with the Assistants API",
            mime_type="text/markdown",
        ),
        ResourceDefinition(
            uri="examples://workflows/basic-workflow",
            name="Basic Workflow Example",
            description="Step-by-step workflow: create an assistant, a thread, a message and a run",
            mime_type="text/markdown",
        ),
        ResourceDefinition(
            uri="examples://workflows/advanced-workflow",
            name="Advanced Workflow Example",
            description="Workflow with function tool calls, custom instructions and error handling",
            mime_type="text/markdown",
        ),
        ResourceDefinition(
            uri="examples://workflows/batch-processing",
            name="Batch Processing Workflow",
            description="Processing several tasks concurrently with one assistant",
            mime_type="text/markdown",
        ),
    )
}

API_REFERENCE = """# Assistants API Reference

## Identifier formats
Every identifier is a prefix followed by 24 alphanumeric characters.

| Object    | Prefix    | Example                              |
|-----------|-----------|--------------------------------------|
| Assistant | `asst_`   | `asst_abc123def456ghi789jkl012`      |
| Thread    | `thread_` | `thread_abc123def456ghi789jkl012`    |
| Message   | `msg_`    | `msg_abc123def456ghi789jkl012`       |
| Run       | `run_`    | `run_abc123def456ghi789jkl012`       |
| Run step  | `step_`   | `step_abc123def456ghi789jkl012`      |
| Tool call | `call_`   | `call_abc123def456ghi789jkl012`      |

## Supported models
`gpt-4o`, `gpt-4o-mini`, `gpt-4`, `gpt-4-turbo`, `gpt-3.5-turbo` and their dated variants.

## List parameters
- `limit`: 1-100, default 20
- `order`: `asc` or `desc` (default)
- `after` / `before`: object IDs used as cursors

## Run statuses
`queued`, `in_progress`, `requires_action`, `cancelling`, `cancelled`,
`failed`, `completed`, `incomplete`, `expired`.
"""

BEST_PRACTICES = """# Best Practices Guide

## Assistant design
- Write specific instructions that define the role, tone and limits of the assistant.
- Enable only the tools the assistant needs.
- Use `metadata` (at most 16 entries) to tag assistants by team, version or purpose.

## Threads
- Use one thread per conversation and reuse it for follow-up messages.
- Delete threads that hold sensitive data once they are no longer needed.

## Runs
- Poll `run-get` until the run reaches a terminal status.
- When a run is `requires_action`, submit every requested tool output or cancel the run.

## Cost and performance
- Prefer smaller models for simple tasks.
- Keep instructions short; they are sent with every run.
"""

TROUBLESHOOTING = """# Troubleshooting Guide

## Rate limiting (`429 Too Many Requests`)
Back off exponentially and retry. The error data carries `retryAfter`.

## Authentication failures (`401`)
Check that the API key in the request path is complete and active.

## Invalid identifiers
IDs must use the right prefix followed by 24 alphanumeric characters,
for example `thread_abc123def456ghi789jkl012`.

## Runs stuck in `requires_action`
Submit outputs for every tool call listed in `required_action`, or cancel the run.

## Resource not found (`404`)
The object was deleted or belongs to another project. List the parent
collection to find valid IDs.
"""

BASIC_WORKFLOW = """# Basic Workflow

1. `assistant-create` with `model` and `instructions`; keep the returned `asst_` ID.
2. `thread-create` to open a conversation; keep the `thread_` ID.
3. `message-create` with `role: "user"` and your question.
4. `run-create` with the thread and assistant IDs.
5. `run-get` until `status` is `completed`.
6. `message-list` on the thread to read the reply.
"""

ADVANCED_WORKFLOW = """# Advanced Workflow

1. Create an assistant with a `function` tool describing your API.
2. Create a thread and post the user request.
3. Start a run with `additional_instructions` for this request only.
4. When the run reports `requires_action`, read the tool calls from
   `required_action.submit_tool_outputs.tool_calls`.
5. Execute each call and send the results with `run-submit-tool-outputs`.
6. Inspect `run-step-list` to audit what the assistant did.
7. On failure, `run-cancel` the run and report the error to the user.
"""

BATCH_PROCESSING = """# Batch Processing Workflow

1. Create one assistant for the task.
2. Create one thread per item to process.
3. Post each item as a message and start a run per thread.
4. Poll all runs concurrently, respecting rate limits.
5. Collect the final messages and delete the threads afterwards.
"""

RESOURCE_CONTENT: Dict[str, Any] = {
    "assistant://templates/coding-assistant": {
        "model": "gpt-4",
        "name": "Expert Coding Assistant",
        "description": "Code review, debugging, architecture guidance and programming best practices.",
        "instructions": (
            "You are an expert coding assistant. Review code for correctness, clarity and "
            "security, explain bugs and their fixes, and give commented examples."
        ),
        "tools": [{"type": "code_interpreter"}, {"type": "file_search"}],
        "metadata": {"category": "development", "use_case": "code_assistance", "expertise_level": "expert"},
    },
    "assistant://templates/data-analyst": {
        "model": "gpt-4",
        "name": "Data Analyst Assistant",
        "description": "An expert assistant for data analysis, visualization and statistical insights",
        "instructions": (
            "You are an expert data analyst. Analyse datasets, find patterns and trends, "
            "build visualizations and explain the statistical basis of your conclusions."
        ),
        "tools": [{"type": "code_interpreter"}, {"type": "file_search"}],
        "metadata": {"category": "analytics", "use_case": "data_analysis", "expertise_level": "expert"},
    },
    "assistant://templates/customer-support": {
        "model": "gpt-3.5-turbo",
        "name": "Customer Support Assistant",
        "description": "A friendly and helpful customer support assistant",
        "instructions": (
            "You are a customer support assistant. Be friendly and professional, understand "
            "the issue quickly and offer clear next steps."
        ),
        "tools": [{"type": "file_search"}],
        "metadata": {"category": "support", "use_case": "customer_service", "expertise_level": "professional"},
    },
    "docs://openai-assistants-api": API_REFERENCE,
    "docs://best-practices": BEST_PRACTICES,
    "docs://troubleshooting/common-issues": TROUBLESHOOTING,
    "examples://workflows/basic-workflow": BASIC_WORKFLOW,
    "examples://workflows/advanced-workflow": ADVANCED_WORKFLOW,
    "examples://workflows/batch-processing": BATCH_PROCESSING,
}


def get_all_resources() -> List[ResourceDefinition]:
    return list(RESOURCES.values())


def get_resource(uri: str) -> Optional[ResourceDefinition]:
    return RESOURCES.get(uri)


def get_resource_content(uri: str) -> Any:
    return RESOURCE_CONTENT.get(uri)


def get_resources_by_category(category: str) -> List[ResourceDefinition]:
    """Resources whose URI or name mentions ``category``."""
    wanted = category.lower()
    return [
        resource
        for resource in RESOURCES.values()
        if wanted in resource.uri or wanted in resource.name.lower()
    ]
