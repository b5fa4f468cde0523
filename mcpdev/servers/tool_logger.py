"""Per-call logging for MCP tools."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from mcpdev.logging_config import get_logger

logger = get_logger("tool_calls")

REDACTED = "***"

# Arguments whose values may hold secrets; only the keys are logged
_SENSITIVE_ARGS = {"env"}


def sanitize_args(args: Mapping[str, Any]) -> dict[str, Any]:
    """Copy tool arguments with environment values masked."""
    clean: dict[str, Any] = {}
    for key, value in args.items():
        if key in _SENSITIVE_ARGS and isinstance(value, Mapping):
            clean[key] = {name: REDACTED for name in value}
        else:
            clean[key] = value
    return clean


def log_tool_call(
    tool_name: str,
    args: Mapping[str, Any],
    duration_ms: float,
    status: str,
    error: Optional[str] = None,
) -> None:
    """Log one tool invocation.

    Args:
        tool_name: Registered tool name
        args: Arguments the tool was called with
        duration_ms: Wall-clock duration in milliseconds
        status: "success" or "error"
        error: Error text for failed calls
    """
    payload = json.dumps(sanitize_args(args), default=str, sort_keys=True)
    if status == "success":
        logger.info(f"{tool_name} ok in {duration_ms:.1f}ms args={payload}")
    else:
        first_line = (error or "").splitlines()[0] if error else ""
        logger.warning(
            f"{tool_name} {status} in {duration_ms:.1f}ms args={payload}: {first_line}"
        )
