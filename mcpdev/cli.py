"""mcpdev Command Line Interface

Main CLI entry point for the mcpdev MCP server.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

import yaml

from .inspector.types import InvocationMode
from .logging_config import get_logger, setup_logging
from .servers import InspectorMCPServer
from .servers.registrars import TOOL_NAMES
from .utils.config import (
    ServerConfig,
    default_config_path,
    generate_default_config_yaml,
    load_config,
    save_config,
    validate_config_against_server,
)

logger = get_logger("cli")


def build_config(
    config_path: Optional[str] = None,
    mode: Optional[str] = None,
    inspector_path: Optional[str] = None,
    node: Optional[str] = None,
) -> ServerConfig:
    """Load the config file and apply command-line overrides."""
    config = load_config(Path(config_path).expanduser() if config_path else None)

    updates = {}
    if mode and mode != "auto":
        updates["mode"] = InvocationMode(mode)
    if inspector_path:
        updates["inspector_path"] = inspector_path
    if node:
        updates["node_command"] = node
    if updates:
        config = config.model_copy(
            update={"inspector": config.inspector.model_copy(update=updates)}
        )
    return config


async def run_server(config: ServerConfig):
    """Run the mcpdev MCP server over STDIO."""
    server = InspectorMCPServer(config)
    await server.run_stdio()


def _serve(args) -> None:
    setup_logging(debug=args.debug, log_file=args.log_file)
    try:
        config = build_config(args.config, args.mode, args.inspector_path, args.node)
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


def _config_command(args) -> None:
    path = Path(args.config).expanduser() if args.config else default_config_path()

    if args.config_command == "init":
        if path.exists() and not args.force:
            print(f"Config already exists: {path} (use --force to overwrite)")
            sys.exit(1)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generate_default_config_yaml())
        path.chmod(0o600)
        print(f"Wrote default config to {path}")
        return

    try:
        if args.config_command == "save":
            config = build_config(str(path), args.mode, args.inspector_path, args.node)
        else:
            config = load_config(path)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.config_command == "save":
        # Persist the effective settings (file, environment and flags)
        save_config(config, path)
        print(f"Saved config to {path}")
        return

    if args.config_command == "validate":
        messages = validate_config_against_server(
            config, {name: None for name in TOOL_NAMES}
        )
        for message in messages:
            print(message)
        if any(message.startswith("ERROR") for message in messages):
            sys.exit(1)
        print(f"Config OK: {path}")
        return

    print(f"mcpdev configuration ({path}):")
    print(
        yaml.dump(
            config.model_dump(mode="json"), default_flow_style=False, sort_keys=False
        ),
        end="",
    )


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="mcpdev: MCP server for developing and debugging MCP servers",
        prog="mcpdev",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser(
        "serve", help="Run the mcpdev MCP server over STDIO"
    )
    serve_parser.add_argument("--config", help="Path to config file")
    serve_parser.add_argument(
        "--mode",
        choices=["auto", "direct", "npx"],
        help="Inspector invocation mode (default: from config, else auto)",
    )
    serve_parser.add_argument(
        "--inspector-path", help="Path to the inspector CLI entry script (cli.js)"
    )
    serve_parser.add_argument("--node", help="Node runtime used in direct mode")
    serve_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    serve_parser.add_argument(
        "--log-file", type=Path, help="Also write logs to this file"
    )

    # Config command
    config_parser = subparsers.add_parser(
        "config", help="Show, create or validate the configuration file"
    )
    config_parser.add_argument(
        "config_command",
        nargs="?",
        choices=["show", "init", "validate", "save"],
        default="show",
    )
    config_parser.add_argument("--config", help="Path to config file")
    config_parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing file on init"
    )
    config_parser.add_argument(
        "--mode", choices=["auto", "direct", "npx"], help="Invocation mode to save"
    )
    config_parser.add_argument(
        "--inspector-path", help="Inspector CLI entry script to save"
    )
    config_parser.add_argument("--node", help="Node runtime to save")

    # Version command
    subparsers.add_parser("version", help="Show version information")

    args = parser.parse_args()

    if args.command == "serve":
        _serve(args)
    elif args.command == "config":
        _config_command(args)
    elif args.command == "version":
        from . import __version__

        print(f"mcpdev version {__version__}")
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
