"""
MCP server exposing the command template renderer.

Lets an MCP client preview what a template renders to for a given set of
playback facts, without a running MPD server.
"""

import json
from typing import Dict, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, EmbeddedResource, ErrorData, ImageContent, TextContent, Tool
from pydantic import BaseModel, ValidationError

from .expression import RenderOverflowError
from .fact_dictionary import PLAYBACK_FACT_NAMES, FactSnapshot
from .renderer import DEFAULT_MAX_OUTPUT_LENGTH, TemplateRenderer


class RenderTemplateInput(BaseModel):
    """Input for the render_template tool."""

    template: str
    facts: Dict[str, Optional[str]] = {}
    max_output_length: Optional[int] = DEFAULT_MAX_OUTPUT_LENGTH


class RenderTemplateResult(BaseModel):
    """Result of the render_template tool."""

    template: str
    rendered: str


class TemplateServer:
    """MCP server for command template previews."""

    def __init__(self):
        """Initialize the MCP server."""
        self.server = Server("mpd-trigger")

    def render_template(self, request: RenderTemplateInput) -> RenderTemplateResult:
        """Render a template against the given facts."""
        renderer = TemplateRenderer(max_output_length=request.max_output_length)
        rendered = renderer.render(request.template, FactSnapshot(request.facts))
        return RenderTemplateResult(template=request.template, rendered=rendered)

    def list_tools(self) -> list[Tool]:
        """Describe the tools this server offers."""
        return [
            Tool(
                name="render_template",
                description="Render an mpd-trigger command template against playback facts",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "template": {
                            "type": "string",
                            "description": "Template with {name} and {cond?then:else} groups",
                        },
                        "facts": {
                            "type": "object",
                            "description": "Fact name to value, e.g. {\"title\": \"Song A\"}",
                            "additionalProperties": {"type": ["string", "null"]},
                        },
                        "max_output_length": {
                            "type": ["integer", "null"],
                            "description": "Output capacity; null for unbounded",
                        },
                    },
                    "required": ["template"],
                },
            ),
            Tool(
                name="list_facts",
                description="List the fact names available to command templates",
                inputSchema={"type": "object", "properties": {}},
            ),
        ]

    def call_tool(self, name: str, arguments: dict) -> list[TextContent]:
        """Dispatch a tool call."""
        if name == "render_template":
            try:
                request = RenderTemplateInput(**(arguments or {}))
                result = self.render_template(request)
            except ValidationError as e:
                raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Invalid arguments: {e}"))
            except RenderOverflowError as e:
                raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Failed to render template: {e}"))
            return [TextContent(type="text", text=json.dumps(result.model_dump(), indent=2))]

        if name == "list_facts":
            return [TextContent(type="text", text=json.dumps(list(PLAYBACK_FACT_NAMES)))]

        raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Unknown tool: {name}"))

    async def serve(self) -> None:
        """Run the MCP server."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            return self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict) -> list[TextContent | ImageContent | EmbeddedResource]:
            return self.call_tool(name, arguments)

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, self.server.create_initialization_options())


# Global server instance
template_server = TemplateServer()


async def serve_mcp():
    """Entry point for running the MCP server."""
    await template_server.serve()
