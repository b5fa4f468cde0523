"""mcpdev

MCP server that helps agents develop and debug MCP servers by wrapping the
MCP Inspector CLI.
"""

__version__ = "0.1.0"
