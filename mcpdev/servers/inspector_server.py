"""
FastMCP server exposing the MCP Inspector CLI as tools.

The server is meant to be run over STDIO by an MCP client (an agent that is
developing or debugging another MCP server).
"""

from __future__ import annotations

from typing import Optional

from fastmcp import FastMCP

from mcpdev import __version__
from mcpdev.inspector import InspectorCLI
from mcpdev.inspector.locate import resolve_settings
from mcpdev.logging_config import get_logger
from mcpdev.utils.config import ServerConfig

from .registrars import InspectorToolRegistrar

logger = get_logger("server")

SERVER_NAME = "mcpdev-mcp-server"


class InspectorMCPServer:
    """MCP server wrapping the MCP Inspector CLI."""

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        inspector: Optional[InspectorCLI] = None,
    ):
        """
        Args:
            config: Server configuration; defaults are used when omitted
            inspector: Pre-built client. When omitted the inspector settings
                       from ``config`` are resolved (this searches the disk)
        """
        self.config = config or ServerConfig()
        if inspector is None:
            inspector = InspectorCLI(resolve_settings(self.config.inspector))
        self.inspector = inspector

        self.mcp = FastMCP(SERVER_NAME)
        self.registrar = InspectorToolRegistrar(self.mcp, self.inspector, self.config)
        self.registrar.register_all()

        logger.info(
            f"{SERVER_NAME} {__version__} initialized "
            f"({self.inspector.mode.value} mode)"
        )

    async def run_stdio(self) -> None:
        """Serve over STDIO until the client disconnects."""
        logger.info(f"{SERVER_NAME} running via stdio")
        await self.mcp.run_async(transport="stdio", show_banner=False)


def create_server(
    config: Optional[ServerConfig] = None,
    inspector: Optional[InspectorCLI] = None,
) -> FastMCP:
    """Create and configure the FastMCP server."""
    return InspectorMCPServer(config, inspector).mcp
