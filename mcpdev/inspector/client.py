"""
Inspector CLI client.

One coroutine per inspector method. Each call builds the command line,
runs it once and decodes the JSON the inspector prints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from mcpdev.logging_config import get_logger

from .args import InspectorCommand, build_cli_command
from .decode import decode_output
from .process import exec_command
from .types import (
    InspectorMethod,
    InvocationMode,
    PromptGetResult,
    PromptsListResult,
    ResourceReadResult,
    ResourcesListResult,
    TargetServer,
    ToolCallResult,
    ToolsListResult,
)

if TYPE_CHECKING:
    from mcpdev.utils.config import InspectorSettings

logger = get_logger("inspector.client")


class InspectorCLI:
    """Runs MCP Inspector CLI methods against target servers.

    The settings must already be resolved (see
    :func:`mcpdev.inspector.locate.resolve_settings`); the client holds no
    other state, so concurrent calls are independent.
    """

    def __init__(self, settings: "InspectorSettings"):
        if settings.mode is None:
            raise ValueError("InspectorCLI needs resolved settings with a mode")
        self.settings = settings

    @property
    def mode(self) -> InvocationMode:
        return self.settings.mode

    def build_command(
        self,
        method: InspectorMethod,
        target: TargetServer,
        method_args: Optional[Dict[str, Any]] = None,
    ) -> InspectorCommand:
        return build_cli_command(self.mode, self.settings, method, target, method_args)

    async def run(
        self,
        method: InspectorMethod,
        target: TargetServer,
        method_args: Optional[Dict[str, Any]] = None,
        timeout_ms: Optional[int] = None,
    ) -> Any:
        """Run one inspector method and return the decoded result.

        Raises:
            InspectorError: On spawn failure, timeout, nonzero exit or
                unparseable output.
        """
        command = self.build_command(method, target, method_args)
        timeout = timeout_ms if timeout_ms is not None else self.settings.default_timeout_ms

        logger.debug(f"{method.value} -> {target.target} ({self.mode.value} mode)")
        output = await exec_command(
            command.command,
            command.args,
            timeout_ms=timeout,
            shell=command.shell,
        )
        return decode_output(output)

    async def list_tools(
        self, target: TargetServer, timeout_ms: Optional[int] = None
    ) -> ToolsListResult:
        """List tools from the target server."""
        return await self.run(InspectorMethod.TOOLS_LIST, target, None, timeout_ms)

    async def call_tool(
        self,
        target: TargetServer,
        tool_name: str,
        tool_args: Optional[Dict[str, Any]] = None,
        timeout_ms: Optional[int] = None,
    ) -> ToolCallResult:
        """Call a tool on the target server."""
        return await self.run(
            InspectorMethod.TOOLS_CALL,
            target,
            {"name": tool_name, "arguments": tool_args or {}},
            timeout_ms,
        )

    async def list_resources(
        self, target: TargetServer, timeout_ms: Optional[int] = None
    ) -> ResourcesListResult:
        """List resources from the target server."""
        return await self.run(InspectorMethod.RESOURCES_LIST, target, None, timeout_ms)

    async def read_resource(
        self, target: TargetServer, uri: str, timeout_ms: Optional[int] = None
    ) -> ResourceReadResult:
        """Read one resource from the target server."""
        return await self.run(
            InspectorMethod.RESOURCES_READ, target, {"uri": uri}, timeout_ms
        )

    async def list_prompts(
        self, target: TargetServer, timeout_ms: Optional[int] = None
    ) -> PromptsListResult:
        """List prompts from the target server."""
        return await self.run(InspectorMethod.PROMPTS_LIST, target, None, timeout_ms)

    async def get_prompt(
        self,
        target: TargetServer,
        prompt_name: str,
        prompt_args: Optional[Dict[str, str]] = None,
        timeout_ms: Optional[int] = None,
    ) -> PromptGetResult:
        """Render a prompt from the target server."""
        return await self.run(
            InspectorMethod.PROMPTS_GET,
            target,
            {"name": prompt_name, "arguments": prompt_args or {}},
            timeout_ms,
        )
