"""Prompt templates and message generation."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..protocol.messages import PromptArgument, PromptDefinition

# {{key || 'default'}}
_DEFAULT_PLACEHOLDER = re.compile(r"{{\s*([\w-]+?)\s*\|\|\s*'([^']*)'\s*}}")
# {{#if key}}...{{/if}}
_CONDITIONAL_BLOCK = re.compile(r"{{#if\s+([\w-]+)\s*}}(.*?){{/if}}", re.DOTALL)


@dataclass
class PromptTemplate:
    """A prompt definition plus the text it expands to."""
    name: str
    title: str
    description: str
    content: str
    arguments: List[PromptArgument] = field(default_factory=list)
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_definition(self) -> PromptDefinition:
        return PromptDefinition(
            name=self.name,
            title=self.title,
            description=self.description,
            arguments=self.arguments,
        )

    def required_arguments(self) -> List[str]:
        return [argument.name for argument in self.arguments if argument.required]

    def render(self, arguments: Dict[str, str]) -> str:
        """Substitute ``arguments`` into the template text."""

        def conditional(match: "re.Match[str]") -> str:
            return match.group(2) if arguments.get(match.group(1)) else ""

        text = _CONDITIONAL_BLOCK.sub(conditional, self.content)
        for key, value in arguments.items():
            text = re.sub(r"{{\s*" + re.escape(key) + r"\s*}}", lambda _: value, text)
        return _DEFAULT_PLACEHOLDER.sub(
            lambda match: arguments.get(match.group(1)) or match.group(2), text
        )

    def generate_messages(self, arguments: Optional[Dict[str, str]] = None) -> List[Dict[str, object]]:
        return [{"role": "user", "content": {"type": "text", "text": self.render(arguments or {})}}]


def _arg(name: str, description: str, required: bool = False) -> PromptArgument:
    return PromptArgument(name=name, description=description, required=required)


PROMPT_TEMPLATES: Dict[str, PromptTemplate] = {
    template.name: template
    for template in (
        PromptTemplate(
            name="create-coding-assistant",
            title="Create Coding Assistant",
            description="Generate a specialized coding assistant with custom instructions and tools",
            arguments=[
                _arg("specialization", 'Programming specialization (e.g., "Python web development")', True),
                _arg("experience_level", "Target experience level (beginner, intermediate, expert)"),
                _arg("additional_tools", "Additional tools to enable (code_interpreter, file_search)"),
            ],
            content=(
                "Create a specialized coding assistant for {{specialization}}. The assistant should be "
                "designed for {{experience_level || 'intermediate'}} developers and include "
                "{{additional_tools || 'code_interpreter'}} tools. Please provide the complete assistant "
                "configuration including name, description, instructions and tools."
            ),
            category="assistant",
            tags=["coding", "development", "assistant"],
        ),
        PromptTemplate(
            name="create-data-analyst",
            title="Create Data Analyst Assistant",
            description="Generate a data analysis assistant with statistical and visualization capabilities",
            arguments=[
                _arg("domain", 'Data analysis domain (e.g., "business intelligence", "marketing")', True),
                _arg("tools_focus", "Primary tools focus (python, r, sql, visualization)"),
            ],
            content=(
                "Create a data analyst assistant specialized in {{domain}} with a focus on "
                "{{tools_focus || 'python'}}. The assistant should be capable of data analysis, "
                "statistical modeling and creating visualizations. Include appropriate tools and "
                "detailed instructions for data analysis workflows."
            ),
            category="assistant",
            tags=["data", "analytics", "statistics", "assistant"],
        ),
        PromptTemplate(
            name="create-writing-assistant",
            title="Create Writing Assistant",
            description="Generate a professional writing assistant for content creation and editing",
            arguments=[
                _arg("writing_type", 'Type of writing (e.g., "technical documentation", "marketing copy")', True),
                _arg("tone", "Preferred writing tone (professional, casual, academic, creative)"),
                _arg("audience", "Target audience (general public, technical experts, students, customers)"),
            ],
            content=(
                "Create a writing assistant specialized in {{writing_type}} with a "
                "{{tone || 'professional'}} tone for {{audience || 'general public'}}. The assistant "
                "should help with content creation, editing, proofreading and style optimization. "
                "Include file_search tools for research and reference materials."
            ),
            category="assistant",
            tags=["writing", "content", "editing", "assistant"],
        ),
        PromptTemplate(
            name="create-conversation-thread",
            title="Create Conversation Thread",
            description="Set up a new conversation thread with initial context and metadata",
            arguments=[
                _arg("purpose", 'Purpose of the conversation (e.g., "code review", "writing help")', True),
                _arg("context", "Initial context or background information"),
                _arg("user_id", "User identifier for tracking"),
            ],
            content=(
                "Create a new conversation thread for {{purpose}}. Set up appropriate metadata including "
                "user_id: \"{{user_id || 'anonymous'}}\", session_type: \"{{purpose}}\", and timestamp."
                "{{#if context}}\n\nContext: {{context}}{{/if}}"
            ),
            category="thread",
            tags=["thread", "conversation", "setup"],
        ),
        PromptTemplate(
            name="organize-thread-messages",
            title="Organize Thread Messages",
            description="Analyze and organize messages in a thread for better conversation flow",
            arguments=[
                _arg("thread_id", "Thread ID to analyze", True),
                _arg("organization_type", "How to organize (chronological, by_topic, by_importance)"),
            ],
            content=(
                "Analyze and organize the messages in thread {{thread_id}} using "
                "{{organization_type || 'chronological'}} organization. Provide a summary of the "
                "conversation flow and suggest any improvements for better structure."
            ),
            category="thread",
            tags=["thread", "organization", "messages"],
        ),
        PromptTemplate(
            name="explain-code",
            title="Explain Code",
            description="Provide detailed explanation of how code works",
            arguments=[
                _arg("code", "Code to explain", True),
                _arg("language", "Programming language"),
                _arg("detail_level", "Level of detail (basic, intermediate, advanced)"),
            ],
            content=(
                "Explain how this {{language || 'auto-detect'}} code works at a "
                "{{detail_level || 'intermediate'}} level:\n\n```\n{{code}}\n```\n\n"
                "Break down the logic, explain key concepts, and describe what each part does."
            ),
            category="analysis",
            tags=["code", "explanation", "education"],
        ),
        PromptTemplate(
            name="review-code",
            title="Code Review",
            description="Perform comprehensive code review with suggestions for improvement",
            arguments=[
                _arg("code", "Code to review", True),
                _arg("language", "Programming language"),
                _arg("focus_areas", "Specific areas to focus on (security, performance, readability)"),
            ],
            content=(
                "Please review this {{language || 'auto-detect'}} code focusing on "
                "{{focus_areas || 'all aspects'}}:\n\n```\n{{code}}\n```\n\n"
                "Provide feedback on code quality, potential issues, and suggestions for improvement."
            ),
            category="analysis",
            tags=["code", "review", "quality"],
        ),
        PromptTemplate(
            name="configure-assistant-run",
            title="Configure Assistant Run",
            description="Set up optimal run configuration for an assistant based on the task",
            arguments=[
                _arg("task_type", "Type of task (code_review, data_analysis, writing, general_qa)", True),
                _arg("complexity", "Task complexity (simple, moderate, complex)"),
                _arg("time_sensitivity", "Time sensitivity (low, medium, high)"),
            ],
            content=(
                "Configure an optimal assistant run for a {{task_type}} task with "
                "{{complexity || 'moderate'}} complexity and {{time_sensitivity || 'medium'}} time "
                "sensitivity. Recommend appropriate model, temperature, max_tokens, and tool_choice settings."
            ),
            category="run",
            tags=["run", "configuration", "optimization"],
        ),
        PromptTemplate(
            name="debug-run-issues",
            title="Debug Run Issues",
            description="Analyze and troubleshoot assistant run problems",
            arguments=[
                _arg("run_id", "Run ID that has issues", True),
                _arg("issue_description", "Description of the observed issue", True),
                _arg("run_status", "Current run status (failed, cancelled, requires_action, etc.)"),
            ],
            content=(
                "Debug issues with run {{run_id}}. Current status: {{run_status || 'unknown'}}. "
                "Issue description: {{issue_description}}. Analyze the run steps, check for errors, "
                "and provide troubleshooting recommendations."
            ),
            category="run",
            tags=["debug", "troubleshooting", "run"],
        ),
        PromptTemplate(
            name="analyze-dataset",
            title="Analyze Dataset",
            description="Perform comprehensive analysis of a dataset",
            arguments=[
                _arg("dataset_description", "Description of the dataset", True),
                _arg("analysis_goals", "What you want to learn from the data", True),
                _arg("data_format", "Format of the data (CSV, JSON, database, etc.)"),
            ],
            content=(
                "Analyze this {{data_format || 'CSV'}} dataset: {{dataset_description}}\n\n"
                "Analysis goals: {{analysis_goals}}\n\n"
                "Perform exploratory data analysis, identify patterns, and provide insights. "
                "Include statistical summaries and visualizations where appropriate."
            ),
            category="data",
            tags=["data", "analysis", "statistics"],
        ),
    )
}


def get_prompt_templates() -> List[PromptTemplate]:
    return list(PROMPT_TEMPLATES.values())


def get_prompt_template(name: str) -> Optional[PromptTemplate]:
    return PROMPT_TEMPLATES.get(name)


def get_prompt_templates_by_category(category: str) -> List[PromptTemplate]:
    wanted = category.lower()
    return [
        template
        for template in PROMPT_TEMPLATES.values()
        if (template.category or "").lower() == wanted
        or template.name.startswith(category)
        or wanted in template.description.lower()
    ]
