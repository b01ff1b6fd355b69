"""Prompt templates and the prompt/completion method handlers."""

from .handlers import (
    CompletionHandler,
    PromptHandler,
    PromptsGetHandler,
    PromptsListHandler,
    create_prompt_handlers,
)
from .templates import PROMPT_TEMPLATES, PromptTemplate, get_prompt_template, get_prompt_templates

__all__ = [
    "CompletionHandler",
    "PROMPT_TEMPLATES",
    "PromptHandler",
    "PromptTemplate",
    "PromptsGetHandler",
    "PromptsListHandler",
    "create_prompt_handlers",
    "get_prompt_template",
    "get_prompt_templates",
]
