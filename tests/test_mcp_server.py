"""Tests for the template preview MCP server."""

import json

import pytest
from mcp.shared.exceptions import McpError

from mpdtrigger.fact_dictionary import PLAYBACK_FACT_NAMES
from mpdtrigger.mcp_server import RenderTemplateInput, TemplateServer


class TestTemplateServer:
    """Test tool dispatch without a transport."""

    def setup_method(self):
        self.server = TemplateServer()

    def test_list_tools(self):
        assert [tool.name for tool in self.server.list_tools()] == ["render_template", "list_facts"]

    def test_render_template_tool(self):
        """Test that the tool returns the rendered string as JSON."""
        content = self.server.call_tool(
            "render_template",
            {"template": "{title} [{track?{track}:no track}]", "facts": {"title": "Song A", "track": ""}},
        )
        payload = json.loads(content[0].text)
        assert payload == {"template": "{title} [{track?{track}:no track}]", "rendered": "Song A [no track]"}

    def test_render_without_facts(self):
        result = self.server.render_template(RenderTemplateInput(template="<{title}>"))
        assert result.rendered == "<>"

    def test_overflow_is_reported_as_error(self):
        with pytest.raises(McpError):
            self.server.call_tool("render_template", {"template": "abcdef", "max_output_length": 3})

    def test_missing_template_is_reported_as_error(self):
        with pytest.raises(McpError):
            self.server.call_tool("render_template", {"facts": {}})

    def test_list_facts(self):
        content = self.server.call_tool("list_facts", {})
        assert json.loads(content[0].text) == list(PLAYBACK_FACT_NAMES)

    def test_unknown_tool(self):
        with pytest.raises(McpError):
            self.server.call_tool("enrich_music", {})
