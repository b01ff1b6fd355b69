"""Tests for the static resource store."""

from assistants_mcp.prompts.templates import get_prompt_templates_by_category
from assistants_mcp.resources import (
    get_all_resources,
    get_resource,
    get_resource_content,
    get_resources_by_category,
)


class TestResources:
    """Test resource lookup."""

    def test_every_resource_has_content(self):
        resources = get_all_resources()
        assert len(resources) == 9
        for resource in resources:
            assert get_resource_content(resource.uri), resource.uri

    def test_templates_are_json_objects(self):
        content = get_resource_content("assistant://templates/data-analyst")
        assert isinstance(content, dict)
        assert content["model"]

    def test_docs_are_markdown(self):
        resource = get_resource("docs://troubleshooting/common-issues")
        assert resource.mimeType == "text/markdown"
        assert get_resource_content(resource.uri).startswith("#")

    def test_unknown(self):
        assert get_resource("docs://missing") is None
        assert get_resource_content("docs://missing") is None

    def test_by_category(self):
        uris = [resource.uri for resource in get_resources_by_category("templates")]
        assert uris == [
            "assistant://templates/coding-assistant",
            "assistant://templates/data-analyst",
            "assistant://templates/customer-support",
        ]


class TestPromptCategories:
    def test_run_prompts(self):
        names = {template.name for template in get_prompt_templates_by_category("run")}
        assert {"configure-assistant-run", "debug-run-issues"} <= names
