"""mcpdev Utils

Configuration loading shared by the CLI and the server.
"""

from .config import (
    InspectorSettings,
    ServerConfig,
    ToolOverride,
    load_config,
    save_config,
)

__all__ = [
    "InspectorSettings",
    "ServerConfig",
    "ToolOverride",
    "load_config",
    "save_config",
]
