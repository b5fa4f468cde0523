"""
Command-line construction for the MCP Inspector CLI.

The inspector's argument parser treats ``-e`` and the method flags as
variadic, so where the target sits matters. In direct mode the target must be
the first positional argument; in package-runner mode it goes last, after the
single ``--json`` object. Each mode keeps its own ordering.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .types import InspectorMethod, InvocationMode, TargetServer


@dataclass(frozen=True)
class InspectorCommand:
    """A fully built inspector invocation."""

    command: str
    args: Tuple[str, ...]
    shell: bool = False


def _stringify(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def _target_flags(target: TargetServer) -> List[str]:
    """Transport and environment flags shared by both modes."""
    flags: List[str] = []
    if target.transport:
        flags += ["--transport", target.transport.value]
    for key, value in target.env.items():
        flags += ["-e", f"{key}={value}"]
    return flags


def _method_flags(
    method: InspectorMethod, method_args: Optional[Mapping[str, Any]]
) -> List[str]:
    """Encode method arguments one flag per argument."""
    if not method_args:
        return []

    flags: List[str] = []
    if method == InspectorMethod.TOOLS_CALL:
        flags += ["--tool-name", method_args["name"]]
        for key, value in (method_args.get("arguments") or {}).items():
            flags += ["--tool-arg", f"{key}={_stringify(value)}"]
    elif method == InspectorMethod.RESOURCES_READ:
        flags += ["--uri", method_args["uri"]]
    elif method == InspectorMethod.PROMPTS_GET:
        flags += ["--prompt-name", method_args["name"]]
        for key, value in (method_args.get("arguments") or {}).items():
            flags += ["--prompt-args", f"{key}={value}"]
    return flags


def build_direct_args(
    inspector_path: str,
    method: InspectorMethod,
    target: TargetServer,
    method_args: Optional[Mapping[str, Any]] = None,
) -> List[str]:
    """Arguments for running the inspector entry script with node.

    The target comes right after ``--cli`` so the variadic ``-e`` and
    ``--tool-arg`` flags cannot swallow it.
    """
    args = [inspector_path, "--cli", target.target, "--method", method.value]
    args += _target_flags(target)
    args += _method_flags(method, method_args)
    return args


def build_package_runner_args(
    package: str,
    method: InspectorMethod,
    target: TargetServer,
    method_args: Optional[Mapping[str, Any]] = None,
    runner_args: Tuple[str, ...] = (),
) -> List[str]:
    """Arguments for running the inspector package through a package runner.

    All method arguments travel as one ``--json`` object and the target is
    appended last.
    """
    args = [*runner_args, package, "--cli", "--method", method.value]
    args += _target_flags(target)
    if method_args:
        args += ["--json", json.dumps(dict(method_args))]
    args.append(target.target)
    return args


def build_cli_command(
    mode: InvocationMode,
    settings: Any,
    method: InspectorMethod,
    target: TargetServer,
    method_args: Optional[Dict[str, Any]] = None,
) -> InspectorCommand:
    """Build the command for one inspector call.

    Args:
        mode: Invocation strategy
        settings: Resolved InspectorSettings (executables, script path, package)
        method: Inspector method to run
        target: Server to inspect
        method_args: Method-specific arguments, e.g. ``{"name": ..., "arguments": {...}}``
            for tools/call, ``{"uri": ...}`` for resources/read

    Returns:
        InspectorCommand ready for :func:`exec_command`
    """
    if mode == InvocationMode.DIRECT:
        if not settings.inspector_path:
            raise ValueError("Direct invocation requires a resolved inspector_path")
        return InspectorCommand(
            command=settings.node_command,
            args=tuple(
                build_direct_args(settings.inspector_path, method, target, method_args)
            ),
            shell=False,
        )

    return InspectorCommand(
        command=settings.package_runner,
        args=tuple(
            build_package_runner_args(
                settings.package,
                method,
                target,
                method_args,
                runner_args=tuple(settings.runner_args),
            )
        ),
        shell=True,
    )
