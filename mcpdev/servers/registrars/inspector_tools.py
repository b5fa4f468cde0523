"""
Inspector tool registrar.

Registers the six mcpdev_inspector_* tools. Each tool validates its input
through its signature, runs one inspector method and returns the result as
pretty-printed JSON. Inspector failures come back as tool errors carrying
the formatted failure text, never as protocol faults.
"""

from __future__ import annotations

import json
import time
from typing import Annotated, Any, Awaitable, Callable, List, Literal, Optional

from fastmcp.exceptions import ToolError
from mcp.types import TextContent
from pydantic import Field

from mcpdev.inspector import InspectorError, TargetServer, format_error
from mcpdev.logging_config import get_logger
from mcpdev.utils.config import MAX_TIMEOUT_MS, MIN_TIMEOUT_MS

from ..tool_logger import log_tool_call

logger = get_logger("tools.inspector")

LIST_TOOLS = "mcpdev_inspector_list_tools"
CALL_TOOL = "mcpdev_inspector_call_tool"
LIST_RESOURCES = "mcpdev_inspector_list_resources"
READ_RESOURCE = "mcpdev_inspector_read_resource"
LIST_PROMPTS = "mcpdev_inspector_list_prompts"
GET_PROMPT = "mcpdev_inspector_get_prompt"

TOOL_NAMES = (
    LIST_TOOLS,
    CALL_TOOL,
    LIST_RESOURCES,
    READ_RESOURCE,
    LIST_PROMPTS,
    GET_PROMPT,
)

READ_ONLY_HINTS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}

DESTRUCTIVE_HINTS = {
    "readOnlyHint": False,
    "destructiveHint": True,
    "idempotentHint": False,
    "openWorldHint": True,
}

TargetParam = Annotated[
    str,
    Field(
        min_length=1,
        description=(
            "Target MCP server - either a command (e.g., 'node server.js') "
            "or URL (e.g., 'https://example.com/sse')"
        ),
    ),
]
TransportParam = Annotated[
    Optional[Literal["stdio", "sse", "http"]],
    Field(
        description=(
            "Transport type: 'stdio' for local commands, 'sse' for SSE URLs, "
            "'http' for streamable HTTP"
        )
    ),
]
EnvParam = Annotated[
    Optional[dict[str, str]],
    Field(description="Environment variables for the target server (KEY -> VALUE)"),
]
TimeoutParam = Annotated[
    int,
    Field(
        ge=MIN_TIMEOUT_MS,
        le=MAX_TIMEOUT_MS,
        description="Timeout in milliseconds (1000-300000)",
    ),
]


def _to_text(result: Any) -> List[TextContent]:
    return [
        TextContent(
            type="text", text=json.dumps(result, indent=2, ensure_ascii=False)
        )
    ]


class InspectorToolRegistrar:
    """Registers inspector tools with the MCP server."""

    def __init__(self, mcp_server, inspector, config=None):
        """
        Initialize the inspector tool registrar.

        Args:
            mcp_server: FastMCP server instance
            inspector: InspectorCLI instance
            config: Optional ServerConfig with tool metadata overrides
        """
        self.mcp = mcp_server
        self.inspector = inspector
        self.config = config

    @property
    def default_timeout_ms(self) -> int:
        return self.inspector.settings.default_timeout_ms

    def register_all(self):
        """Register all inspector tools."""
        self._register_list_tools()
        self._register_call_tool()
        self._register_list_resources()
        self._register_read_resource()
        self._register_list_prompts()
        self._register_get_prompt()

    def _tool_kwargs(self, name: str, title: str, hints: dict) -> dict:
        """Decorator arguments for a tool, with config overrides applied."""
        description = None
        override = self.config.tools.get(name) if self.config else None
        if override:
            title = override.title or title
            description = override.description
        kwargs: dict[str, Any] = {
            "name": name,
            "annotations": {"title": title, **hints},
        }
        if description:
            kwargs["description"] = description
        return kwargs

    async def _dispatch(
        self,
        tool_name: str,
        params: dict[str, Any],
        call: Callable[[], Awaitable[Any]],
    ) -> List[TextContent]:
        """Run an inspector call and shape its outcome as a tool response."""
        start = time.perf_counter()
        try:
            result = await call()
        except InspectorError as e:
            duration = (time.perf_counter() - start) * 1000
            message = format_error(e)
            log_tool_call(tool_name, params, duration, "error", message)
            raise ToolError(message) from e
        except Exception as e:
            duration = (time.perf_counter() - start) * 1000
            log_tool_call(tool_name, params, duration, "error", str(e))
            logger.error(f"Error in {tool_name}: {e}")
            raise ToolError(f"Error in {tool_name}: {e}") from e

        duration = (time.perf_counter() - start) * 1000
        log_tool_call(tool_name, params, duration, "success")
        return _to_text(result)

    def _register_list_tools(self):
        """Register the mcpdev_inspector_list_tools tool."""
        default_timeout = self.default_timeout_ms

        @self.mcp.tool(
            **self._tool_kwargs(LIST_TOOLS, "List MCP Server Tools", READ_ONLY_HINTS)
        )
        async def list_tools(
            target: TargetParam,
            transport: TransportParam = None,
            env: EnvParam = None,
            timeout_ms: TimeoutParam = default_timeout,
        ) -> List[TextContent]:
            """List all available tools from a target MCP server.

            Use this to discover what tools a target MCP server provides.
            Returns tool names, descriptions, and input schemas.

            Returns:
                JSON object with a 'tools' array containing tool definitions.

            Examples:
                - Local server: {"target": "node dist/index.js", "transport": "stdio"}
                - Remote SSE: {"target": "https://mcp.example.com/sse", "transport": "sse"}
            """
            server = TargetServer.from_params(target, transport, env)
            return await self._dispatch(
                LIST_TOOLS,
                {"target": target, "transport": transport, "env": env},
                lambda: self.inspector.list_tools(server, timeout_ms),
            )

    def _register_call_tool(self):
        """Register the mcpdev_inspector_call_tool tool."""
        default_timeout = self.default_timeout_ms

        @self.mcp.tool(
            **self._tool_kwargs(CALL_TOOL, "Call MCP Server Tool", DESTRUCTIVE_HINTS)
        )
        async def call_tool(
            target: TargetParam,
            tool_name: Annotated[
                str, Field(min_length=1, description="Name of the tool to call")
            ],
            tool_args: Annotated[
                Optional[dict[str, Any]],
                Field(description="Arguments to pass to the tool"),
            ] = None,
            transport: TransportParam = None,
            env: EnvParam = None,
            timeout_ms: TimeoutParam = default_timeout,
        ) -> List[TextContent]:
            """Execute a tool on a target MCP server.

            Use this to invoke a specific tool on the target server with
            provided arguments. Non-string argument values are sent as JSON.

            Returns:
                The tool's response content.

            Examples:
                - {"target": "node server.js", "tool_name": "get_weather", "tool_args": {"city": "Tokyo"}}
            """
            server = TargetServer.from_params(target, transport, env)
            return await self._dispatch(
                CALL_TOOL,
                {
                    "target": target,
                    "tool_name": tool_name,
                    "tool_args": tool_args,
                    "transport": transport,
                    "env": env,
                },
                lambda: self.inspector.call_tool(
                    server, tool_name, tool_args or {}, timeout_ms
                ),
            )

    def _register_list_resources(self):
        """Register the mcpdev_inspector_list_resources tool."""
        default_timeout = self.default_timeout_ms

        @self.mcp.tool(
            **self._tool_kwargs(
                LIST_RESOURCES, "List MCP Server Resources", READ_ONLY_HINTS
            )
        )
        async def list_resources(
            target: TargetParam,
            transport: TransportParam = None,
            env: EnvParam = None,
            timeout_ms: TimeoutParam = default_timeout,
        ) -> List[TextContent]:
            """List all available resources from a target MCP server.

            Use this to discover what resources (data/content) a target MCP
            server exposes.

            Returns:
                JSON object with a 'resources' array containing resource URIs and metadata.
            """
            server = TargetServer.from_params(target, transport, env)
            return await self._dispatch(
                LIST_RESOURCES,
                {"target": target, "transport": transport, "env": env},
                lambda: self.inspector.list_resources(server, timeout_ms),
            )

    def _register_read_resource(self):
        """Register the mcpdev_inspector_read_resource tool."""
        default_timeout = self.default_timeout_ms

        @self.mcp.tool(
            **self._tool_kwargs(
                READ_RESOURCE, "Read MCP Server Resource", READ_ONLY_HINTS
            )
        )
        async def read_resource(
            target: TargetParam,
            uri: Annotated[str, Field(min_length=1, description="Resource URI to read")],
            transport: TransportParam = None,
            env: EnvParam = None,
            timeout_ms: TimeoutParam = default_timeout,
        ) -> List[TextContent]:
            """Read a specific resource from a target MCP server.

            Use this to fetch the content of a resource by its URI.

            Returns:
                The resource content (text or base64-encoded blob).
            """
            server = TargetServer.from_params(target, transport, env)
            return await self._dispatch(
                READ_RESOURCE,
                {"target": target, "uri": uri, "transport": transport, "env": env},
                lambda: self.inspector.read_resource(server, uri, timeout_ms),
            )

    def _register_list_prompts(self):
        """Register the mcpdev_inspector_list_prompts tool."""
        default_timeout = self.default_timeout_ms

        @self.mcp.tool(
            **self._tool_kwargs(LIST_PROMPTS, "List MCP Server Prompts", READ_ONLY_HINTS)
        )
        async def list_prompts(
            target: TargetParam,
            transport: TransportParam = None,
            env: EnvParam = None,
            timeout_ms: TimeoutParam = default_timeout,
        ) -> List[TextContent]:
            """List all available prompts from a target MCP server.

            Use this to discover what prompt templates a target MCP server provides.

            Returns:
                JSON object with a 'prompts' array containing prompt definitions.
            """
            server = TargetServer.from_params(target, transport, env)
            return await self._dispatch(
                LIST_PROMPTS,
                {"target": target, "transport": transport, "env": env},
                lambda: self.inspector.list_prompts(server, timeout_ms),
            )

    def _register_get_prompt(self):
        """Register the mcpdev_inspector_get_prompt tool."""
        default_timeout = self.default_timeout_ms

        @self.mcp.tool(
            **self._tool_kwargs(GET_PROMPT, "Get MCP Server Prompt", READ_ONLY_HINTS)
        )
        async def get_prompt(
            target: TargetParam,
            prompt_name: Annotated[
                str, Field(min_length=1, description="Name of the prompt to get")
            ],
            prompt_args: Annotated[
                Optional[dict[str, str]],
                Field(description="Arguments to pass to the prompt template"),
            ] = None,
            transport: TransportParam = None,
            env: EnvParam = None,
            timeout_ms: TimeoutParam = default_timeout,
        ) -> List[TextContent]:
            """Get a specific prompt from a target MCP server.

            Use this to retrieve and render a prompt template with provided arguments.

            Returns:
                The rendered prompt messages.
            """
            server = TargetServer.from_params(target, transport, env)
            return await self._dispatch(
                GET_PROMPT,
                {
                    "target": target,
                    "prompt_name": prompt_name,
                    "prompt_args": prompt_args,
                    "transport": transport,
                    "env": env,
                },
                lambda: self.inspector.get_prompt(
                    server, prompt_name, prompt_args or {}, timeout_ms
                ),
            )
