"""
Configuration for the mcpdev server.

This module provides Pydantic models for the server's launch settings and
tool metadata overrides. Settings are resolved in layers:

1. **Defaults** from the models below.
2. **Config file** (`~/.mcpdev/config.yaml`, or the path given with
   ``--config`` / ``MCPDEV_CONFIG``).
3. **Environment**: ``MCPDEV_INSPECTOR_PATH``, ``MCPDEV_INVOCATION_MODE``,
   ``MCPDEV_NODE``, ``MCPDEV_NPX``.
4. **Command-line flags**, applied by the CLI.

None of these carry per-call data; targets, transports and timeouts arrive
with each tool call.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from mcpdev.inspector.types import InvocationMode
from mcpdev.logging_config import get_logger

logger = get_logger("config")

USER_CONFIG_PATH = Path.home() / ".mcpdev" / "config.yaml"

INSPECTOR_PACKAGE = "@modelcontextprotocol/inspector"

MIN_TIMEOUT_MS = 1000
MAX_TIMEOUT_MS = 300000
DEFAULT_TOOL_TIMEOUT_MS = 60000

ENV_CONFIG_PATH = "MCPDEV_CONFIG"
ENV_INSPECTOR_PATH = "MCPDEV_INSPECTOR_PATH"
ENV_INVOCATION_MODE = "MCPDEV_INVOCATION_MODE"
ENV_NODE = "MCPDEV_NODE"
ENV_NPX = "MCPDEV_NPX"


class InspectorSettings(BaseModel):
    """How the inspector CLI is located and launched.

    Attributes:
        mode: Invocation mode; None picks direct when the entry script can be
              resolved and falls back to npx otherwise
        inspector_path: Inspector CLI entry script (cli/build/cli.js)
        node_command: Runtime used in direct mode
        package_runner: Package runner used in npx mode
        runner_args: Arguments placed before the package name in npx mode
        package: Inspector package specifier for npx mode
        default_timeout_ms: Timeout used when a tool call does not give one
    """

    mode: Optional[InvocationMode] = None
    inspector_path: Optional[str] = None
    node_command: str = "node"
    package_runner: str = "npx"
    runner_args: list[str] = Field(default_factory=lambda: ["--yes"])
    package: str = INSPECTOR_PACKAGE
    default_timeout_ms: int = Field(
        default=DEFAULT_TOOL_TIMEOUT_MS, ge=MIN_TIMEOUT_MS, le=MAX_TIMEOUT_MS
    )


class ToolOverride(BaseModel):
    """Override configuration for a tool's metadata."""

    title: Optional[str] = None
    description: Optional[str] = None

    def model_post_init(self, __context: Any) -> None:
        """Strip trailing whitespace from description (YAML preserves it)."""
        if self.description:
            object.__setattr__(self, "description", self.description.rstrip())


class ServerConfig(BaseModel):
    """Root configuration model.

    Attributes:
        version: Schema version for future compatibility
        strict: If True, unknown tool overrides are errors; otherwise warnings
        inspector: Inspector launch settings
        tools: Tool metadata overrides keyed by tool name
    """

    version: int = 1
    strict: bool = True
    inspector: InspectorSettings = Field(default_factory=InspectorSettings)
    tools: dict[str, ToolOverride] = Field(default_factory=dict)


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return parsed dict.

    Args:
        path: Path to YAML file

    Returns:
        Parsed dict, or empty dict if file doesn't exist or is empty

    Raises:
        ValueError: If YAML parsing fails
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    return raw if raw is not None else {}


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Config file location, honouring MCPDEV_CONFIG."""
    environ = os.environ if environ is None else environ
    override = environ.get(ENV_CONFIG_PATH)
    return Path(override).expanduser() if override else USER_CONFIG_PATH


def apply_env_overrides(
    settings: InspectorSettings, environ: Optional[Mapping[str, str]] = None
) -> InspectorSettings:
    """Return a copy of ``settings`` with MCPDEV_* environment overrides applied."""
    environ = os.environ if environ is None else environ
    updates: dict[str, Any] = {}

    if environ.get(ENV_INSPECTOR_PATH):
        updates["inspector_path"] = environ[ENV_INSPECTOR_PATH]
    if environ.get(ENV_INVOCATION_MODE):
        raw_mode = environ[ENV_INVOCATION_MODE].strip().lower()
        if raw_mode != "auto":
            try:
                updates["mode"] = InvocationMode(raw_mode)
            except ValueError as e:
                raise ValueError(
                    f"{ENV_INVOCATION_MODE} must be 'direct', 'npx' or 'auto', "
                    f"got {raw_mode!r}"
                ) from e
    if environ.get(ENV_NODE):
        updates["node_command"] = environ[ENV_NODE]
    if environ.get(ENV_NPX):
        updates["package_runner"] = environ[ENV_NPX]

    return settings.model_copy(update=updates) if updates else settings


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    """Load server configuration: defaults, config file, then environment.

    Uses yaml.safe_load for security (prevents YAML tag execution).

    Args:
        config_path: Path to the config file. Defaults to ~/.mcpdev/config.yaml
        environ: Environment mapping; defaults to os.environ

    Returns:
        ServerConfig with environment overrides applied

    Raises:
        ValueError: If YAML parsing fails or validation fails
    """
    if config_path is None:
        config_path = default_config_path(environ)

    config = ServerConfig()
    if config_path.exists():
        try:
            raw = _load_yaml_file(config_path)
            if raw:
                config = ServerConfig.model_validate(raw)
                logger.debug(
                    f"Loaded config from {config_path}: "
                    f"{len(config.tools)} tool overrides"
                )
        except Exception as e:
            raise ValueError(f"Invalid config in {config_path}: {e}") from e
    else:
        logger.debug(f"Config not found: {config_path}, using defaults")

    inspector = apply_env_overrides(config.inspector, environ)
    return config.model_copy(update={"inspector": inspector})


def save_config(config: ServerConfig, path: Optional[Path] = None) -> None:
    """Save configuration to a YAML file.

    Creates parent directories if needed. Sets file permissions to 0o600
    (user read/write only).

    Args:
        config: Configuration to save
        path: Path to config file. Defaults to ~/.mcpdev/config.yaml
    """
    if path is None:
        path = USER_CONFIG_PATH

    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_none=True)

    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    os.chmod(path, 0o600)
    logger.info(f"Saved config to {path}")


def validate_config_against_server(
    config: ServerConfig, registered_tools: Mapping[str, Any]
) -> list[str]:
    """Check tool overrides against the tools the server registers.

    Args:
        config: Configuration to validate
        registered_tools: Tool names (mapped to anything) known to the server

    Returns:
        List of error/warning messages. Empty if valid.
        In strict mode, these are errors; in non-strict mode, warnings.
    """
    messages: list[str] = []

    for tool_name in config.tools:
        if tool_name in registered_tools:
            continue
        msg = f"Unknown tool in config: {tool_name}"
        if config.strict:
            messages.append(f"ERROR: {msg}")
        else:
            messages.append(f"WARNING: {msg} (skipped)")

    return messages


def generate_default_config_yaml() -> str:
    """Generate a default config YAML with commented examples."""
    return f"""# mcpdev configuration
# Launch settings for the MCP Inspector CLI and tool metadata overrides.
# Changes require a server restart to take effect.

version: 1
strict: true  # false = warn on unknown tool overrides instead of error

inspector:
  # direct = run the inspector entry script with node (no shell)
  # npx    = run the inspector package through npx and the shell
  # omit   = direct when the entry script is found, npx otherwise
  # mode: direct
  # inspector_path: /path/to/node_modules/{INSPECTOR_PACKAGE}/cli/build/cli.js
  node_command: node
  package_runner: npx
  runner_args: ["--yes"]
  package: "{INSPECTOR_PACKAGE}"
  default_timeout_ms: {DEFAULT_TOOL_TIMEOUT_MS}

# Tool metadata overrides
# tools:
#   mcpdev_inspector_list_tools:
#     title: "List Target Tools"
#     description: "List the tools exposed by the server under development."
"""
