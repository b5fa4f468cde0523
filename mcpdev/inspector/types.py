"""
Type definitions for the inspector pipeline.

Covers the target descriptor, the inspector methods, the invocation modes and
the result shapes printed by the MCP Inspector CLI. Result shapes are
TypedDicts: they document what the CLI prints but are never validated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, TypedDict


class TransportType(str, Enum):
    """Transport used by the inspector to reach the target server."""

    STDIO = "stdio"
    SSE = "sse"
    HTTP = "http"


class InspectorMethod(str, Enum):
    """MCP methods the inspector CLI can run against a target."""

    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"
    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"


class InvocationMode(str, Enum):
    """How the inspector CLI is launched.

    DIRECT runs the resolved entry script with the node runtime and no shell;
    the target goes first and method arguments are passed flag by flag.
    PACKAGE_RUNNER runs the package through npx and the shell; method
    arguments are passed as a single --json object and the target goes last.
    """

    DIRECT = "direct"
    PACKAGE_RUNNER = "npx"


@dataclass(frozen=True)
class TargetServer:
    """Target MCP server: a launch command (stdio) or a URL (sse/http)."""

    target: str
    transport: Optional[TransportType] = None
    env: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_params(
        cls,
        target: str,
        transport: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> "TargetServer":
        """Build a target from raw tool parameters."""
        return cls(
            target=target,
            transport=TransportType(transport) if transport else None,
            env=dict(env or {}),
        )


# ---------------------------------------------------------------------------
# Result shapes printed by the inspector CLI
# ---------------------------------------------------------------------------


class McpTool(TypedDict, total=False):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class McpResource(TypedDict, total=False):
    uri: str
    name: str
    description: str
    mimeType: str


class McpPromptArgument(TypedDict, total=False):
    name: str
    description: str
    required: bool


class McpPrompt(TypedDict, total=False):
    name: str
    description: str
    arguments: List[McpPromptArgument]


class ContentItem(TypedDict, total=False):
    type: str
    text: str


class ResourceContents(TypedDict, total=False):
    uri: str
    mimeType: str
    text: str
    blob: str


class PromptMessage(TypedDict, total=False):
    role: str
    content: ContentItem


class ToolsListResult(TypedDict):
    tools: List[McpTool]


class ToolCallResult(TypedDict, total=False):
    content: List[ContentItem]
    isError: bool


class ResourcesListResult(TypedDict):
    resources: List[McpResource]


class ResourceReadResult(TypedDict):
    contents: List[ResourceContents]


class PromptsListResult(TypedDict):
    prompts: List[McpPrompt]


class PromptGetResult(TypedDict, total=False):
    description: str
    messages: List[PromptMessage]
