"""
Tool registrars for the mcpdev MCP server.
"""

from .inspector_tools import TOOL_NAMES, InspectorToolRegistrar

__all__ = [
    "InspectorToolRegistrar",
    "TOOL_NAMES",
]
