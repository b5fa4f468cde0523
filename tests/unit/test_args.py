"""
Unit tests for inspector argument construction.
"""

import json

import pytest

from mcpdev.inspector.args import (
    InspectorCommand,
    build_cli_command,
    build_direct_args,
    build_package_runner_args,
)
from mcpdev.inspector.types import (
    InspectorMethod,
    InvocationMode,
    TargetServer,
    TransportType,
)
from mcpdev.utils.config import InspectorSettings

SCRIPT = "/opt/inspector/cli/build/cli.js"


def _pair_index(args, flag, value):
    """Index of ``flag`` immediately followed by ``value``."""
    for i in range(len(args) - 1):
        if args[i] == flag and args[i + 1] == value:
            return i
    raise AssertionError(f"{flag} {value} not in {args}")


class TestTargetServer:
    """Test TargetServer construction from tool parameters."""

    def test_from_params_defaults(self):
        target = TargetServer.from_params("node server.js")
        assert target.transport is None
        assert target.env == {}

    def test_from_params_full(self):
        target = TargetServer.from_params(
            "https://example.com/sse", "sse", {"TOKEN": "abc"}
        )
        assert target.transport is TransportType.SSE
        assert target.env == {"TOKEN": "abc"}

    def test_invalid_transport(self):
        with pytest.raises(ValueError):
            TargetServer.from_params("x", "websocket")


class TestDirectArgs:
    """Test flag-per-argument construction for direct mode."""

    def test_list_tools_minimal(self):
        args = build_direct_args(
            SCRIPT, InspectorMethod.TOOLS_LIST, TargetServer("node server.js")
        )
        assert args == [SCRIPT, "--cli", "node server.js", "--method", "tools/list"]

    def test_target_is_first_positional(self):
        target = TargetServer(
            "node server.js", TransportType.STDIO, {"A": "1", "B": "2"}
        )
        args = build_direct_args(
            SCRIPT,
            InspectorMethod.TOOLS_CALL,
            target,
            {"name": "get_weather", "arguments": {"city": "Tokyo"}},
        )
        assert args[:3] == [SCRIPT, "--cli", "node server.js"]

    def test_call_tool_order(self):
        args = build_direct_args(
            SCRIPT,
            InspectorMethod.TOOLS_CALL,
            TargetServer("node server.js"),
            {"name": "get_weather", "arguments": {"city": "Tokyo"}},
        )
        name_at = _pair_index(args, "--tool-name", "get_weather")
        arg_at = _pair_index(args, "--tool-arg", "city=Tokyo")
        assert name_at < arg_at

    def test_call_tool_non_string_values_are_json(self):
        args = build_direct_args(
            SCRIPT,
            InspectorMethod.TOOLS_CALL,
            TargetServer("node server.js"),
            {
                "name": "configure",
                "arguments": {"count": 3, "flags": {"a": True}, "tags": ["x"], "note": "hi"},
            },
        )
        assert "count=3" in args
        assert 'flags={"a": true}' in args
        assert 'tags=["x"]' in args
        assert "note=hi" in args

    def test_call_tool_without_arguments(self):
        args = build_direct_args(
            SCRIPT,
            InspectorMethod.TOOLS_CALL,
            TargetServer("node server.js"),
            {"name": "ping", "arguments": {}},
        )
        assert args[-2:] == ["--tool-name", "ping"]
        assert "--tool-arg" not in args

    def test_transport_and_env(self):
        target = TargetServer(
            "https://example.com/mcp", TransportType.HTTP, {"API_KEY": "k=v", "DEBUG": "1"}
        )
        args = build_direct_args(SCRIPT, InspectorMethod.TOOLS_LIST, target)
        assert args[3:] == [
            "--method",
            "tools/list",
            "--transport",
            "http",
            "-e",
            "API_KEY=k=v",
            "-e",
            "DEBUG=1",
        ]

    def test_read_resource(self):
        args = build_direct_args(
            SCRIPT,
            InspectorMethod.RESOURCES_READ,
            TargetServer("node server.js"),
            {"uri": "file:///tmp/a.txt"},
        )
        assert args[-2:] == ["--uri", "file:///tmp/a.txt"]

    def test_get_prompt(self):
        args = build_direct_args(
            SCRIPT,
            InspectorMethod.PROMPTS_GET,
            TargetServer("node server.js"),
            {"name": "greet", "arguments": {"who": "Ada", "tone": "warm"}},
        )
        assert args[-6:] == [
            "--prompt-name",
            "greet",
            "--prompt-args",
            "who=Ada",
            "--prompt-args",
            "tone=warm",
        ]


class TestPackageRunnerArgs:
    """Test JSON-blob construction for package-runner mode."""

    def test_target_is_last(self):
        target = TargetServer("node server.js", TransportType.STDIO, {"A": "1"})
        args = build_package_runner_args(
            "@modelcontextprotocol/inspector",
            InspectorMethod.TOOLS_LIST,
            target,
            runner_args=("--yes",),
        )
        assert args == [
            "--yes",
            "@modelcontextprotocol/inspector",
            "--cli",
            "--method",
            "tools/list",
            "--transport",
            "stdio",
            "-e",
            "A=1",
            "node server.js",
        ]

    def test_method_args_as_single_json(self):
        args = build_package_runner_args(
            "@modelcontextprotocol/inspector",
            InspectorMethod.TOOLS_CALL,
            TargetServer("node server.js"),
            {"name": "get_weather", "arguments": {"city": "Tokyo", "days": 3}},
        )
        json_at = args.index("--json")
        assert json.loads(args[json_at + 1]) == {
            "name": "get_weather",
            "arguments": {"city": "Tokyo", "days": 3},
        }
        assert args[-1] == "node server.js"
        assert "--tool-name" not in args

    def test_no_json_without_method_args(self):
        args = build_package_runner_args(
            "pkg", InspectorMethod.PROMPTS_LIST, TargetServer("t")
        )
        assert "--json" not in args


class TestBuildCliCommand:
    """Test mode selection in build_cli_command."""

    def test_direct_mode(self):
        settings = InspectorSettings(inspector_path=SCRIPT, node_command="node")
        command = build_cli_command(
            InvocationMode.DIRECT,
            settings,
            InspectorMethod.RESOURCES_LIST,
            TargetServer("node server.js"),
        )
        assert isinstance(command, InspectorCommand)
        assert command.command == "node"
        assert command.shell is False
        assert command.args[0] == SCRIPT

    def test_direct_mode_requires_path(self):
        with pytest.raises(ValueError):
            build_cli_command(
                InvocationMode.DIRECT,
                InspectorSettings(),
                InspectorMethod.TOOLS_LIST,
                TargetServer("t"),
            )

    def test_package_runner_mode(self):
        settings = InspectorSettings()
        command = build_cli_command(
            InvocationMode.PACKAGE_RUNNER,
            settings,
            InspectorMethod.RESOURCES_READ,
            TargetServer("node server.js"),
            {"uri": "demo://a"},
        )
        assert command.command == "npx"
        assert command.shell is True
        assert command.args[:3] == ("--yes", "@modelcontextprotocol/inspector", "--cli")
        assert command.args[-1] == "node server.js"

    def test_pure(self):
        settings = InspectorSettings(inspector_path=SCRIPT)
        target = TargetServer("node server.js", env={"A": "1"})
        first = build_cli_command(
            InvocationMode.DIRECT, settings, InspectorMethod.TOOLS_LIST, target
        )
        second = build_cli_command(
            InvocationMode.DIRECT, settings, InspectorMethod.TOOLS_LIST, target
        )
        assert first == second
