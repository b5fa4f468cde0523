"""mcpdev inspector pipeline

Argument building, subprocess execution and output decoding for the
MCP Inspector CLI.
"""

from .args import InspectorCommand, build_cli_command
from .client import InspectorCLI
from .decode import decode_output, parse_json
from .errors import InspectorError, InspectorErrorKind, format_error
from .process import exec_command
from .types import InspectorMethod, InvocationMode, TargetServer, TransportType

__all__ = [
    "InspectorCLI",
    "InspectorCommand",
    "InspectorError",
    "InspectorErrorKind",
    "InspectorMethod",
    "InvocationMode",
    "TargetServer",
    "TransportType",
    "build_cli_command",
    "decode_output",
    "exec_command",
    "format_error",
    "parse_json",
]
