"""mcpdev Servers

MCP server implementations.
"""

from .inspector_server import InspectorMCPServer, create_server

__all__ = [
    "InspectorMCPServer",
    "create_server",
]
