"""
Startup resolution of the inspector CLI.

Finds the inspector entry script and picks the invocation mode once, before
the server starts. The result is an InspectorSettings value that is injected
into the client; nothing here runs per call.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from mcpdev.logging_config import get_logger

from .types import InvocationMode

if TYPE_CHECKING:
    from mcpdev.utils.config import InspectorSettings

logger = get_logger("inspector.locate")

CLI_ENTRY = Path("cli") / "build" / "cli.js"


def _package_name(package: str) -> str:
    """Strip a version suffix: ``@scope/name@1.2`` -> ``@scope/name``."""
    at = package.rfind("@")
    return package[:at] if at > 0 else package


def entry_script_relpath(package: str) -> Path:
    """Path of the inspector entry script relative to a node_modules parent."""
    return Path("node_modules") / _package_name(package) / CLI_ENTRY


def find_local_inspector(package: str, start: Optional[Path] = None) -> Optional[Path]:
    """Look for the entry script in node_modules, walking up from ``start``."""
    start = (start or Path.cwd()).resolve()
    relpath = entry_script_relpath(package)
    for directory in (start, *start.parents):
        candidate = directory / relpath
        if candidate.is_file():
            return candidate
    return None


def find_global_inspector(package: str, npm_command: str = "npm") -> Optional[Path]:
    """Look for the entry script under ``npm root -g``."""
    try:
        proc = subprocess.run(
            [npm_command, "root", "-g"],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"npm root -g failed: {e}")
        return None

    if proc.returncode != 0 or not proc.stdout.strip():
        return None

    candidate = Path(proc.stdout.strip()) / _package_name(package) / CLI_ENTRY
    return candidate if candidate.is_file() else None


def resolve_settings(
    settings: "InspectorSettings",
    cwd: Optional[Path] = None,
    which: Callable[[str], Optional[str]] = shutil.which,
    search_global: bool = True,
) -> "InspectorSettings":
    """Fix the invocation mode and entry script for this process.

    Args:
        settings: Settings from config, environment and flags
        cwd: Directory to start the node_modules search from
        which: Executable lookup, replaceable in tests
        search_global: Also try ``npm root -g``

    Returns:
        Settings with ``mode`` set and, for direct mode, ``inspector_path``
        pointing at an existing script.

    Raises:
        FileNotFoundError: If an explicit inspector_path does not exist, or
            no usable inspector can be found for the requested mode.
    """
    if settings.inspector_path:
        path = Path(settings.inspector_path).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"Inspector entry script not found: {path}")
        script: Optional[Path] = path.resolve()
    elif settings.mode == InvocationMode.PACKAGE_RUNNER:
        script = None
    else:
        script = find_local_inspector(settings.package, cwd)
        if script is None and search_global:
            script = find_global_inspector(settings.package)

    if settings.mode == InvocationMode.PACKAGE_RUNNER:
        if which(settings.package_runner) is None:
            raise FileNotFoundError(
                f"Package runner '{settings.package_runner}' not found on PATH"
            )
        logger.info(f"Using {settings.package_runner} to run {settings.package}")
        return settings.model_copy(update={"mode": InvocationMode.PACKAGE_RUNNER})

    if script is not None:
        if which(settings.node_command) is None:
            raise FileNotFoundError(
                f"Node runtime '{settings.node_command}' not found on PATH"
            )
        logger.info(f"Using inspector entry script {script}")
        return settings.model_copy(
            update={"mode": InvocationMode.DIRECT, "inspector_path": str(script)}
        )

    if settings.mode == InvocationMode.DIRECT:
        raise FileNotFoundError(
            f"Could not find {entry_script_relpath(settings.package)}. "
            f"Install {settings.package} or set inspector_path / MCPDEV_INSPECTOR_PATH."
        )

    if which(settings.package_runner) is None:
        raise FileNotFoundError(
            f"Inspector not installed and '{settings.package_runner}' not found on PATH. "
            f"Install {settings.package} or Node.js."
        )
    logger.warning(
        f"Inspector entry script not found, falling back to {settings.package_runner}"
    )
    return settings.model_copy(update={"mode": InvocationMode.PACKAGE_RUNNER})
