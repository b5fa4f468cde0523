"""
Subprocess execution for the inspector CLI.

Runs one external command per call, collects its output and maps the exit
status to either the stdout text or an :class:`InspectorError`.
"""

from __future__ import annotations

import asyncio
import os
import shlex
import signal
import subprocess
from typing import Dict, List, Optional, Sequence

from mcpdev.logging_config import get_logger

from .errors import InspectorError, InspectorErrorKind

logger = get_logger("inspector.process")

DEFAULT_TIMEOUT_MS = 30000

# Seconds to wait for a terminated child before escalating to SIGKILL
KILL_GRACE_SECONDS = 2.0

_READ_CHUNK = 65536


def _join_command(parts: Sequence[str]) -> str:
    """Join a command line for the platform shell."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(parts))
    return shlex.join(parts)


def _decode(chunks: List[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


async def _drain(stream: asyncio.StreamReader, chunks: List[bytes]) -> None:
    while True:
        data = await stream.read(_READ_CHUNK)
        if not data:
            return
        chunks.append(data)


def _signal_child(proc: asyncio.subprocess.Process, force: bool = False) -> None:
    """Signal the child and, on POSIX, everything in its process group."""
    try:
        if os.name == "posix":
            os.killpg(proc.pid, signal.SIGKILL if force else signal.SIGTERM)
        elif force:
            proc.kill()
        else:
            proc.terminate()
    except ProcessLookupError:
        pass


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Send SIGTERM and reap the child, escalating to SIGKILL after the grace period."""
    _signal_child(proc)
    try:
        await asyncio.wait_for(proc.wait(), timeout=KILL_GRACE_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(
            f"Process {proc.pid} ignored SIGTERM for {KILL_GRACE_SECONDS}s, killing"
        )
        _signal_child(proc, force=True)
        await proc.wait()


async def _reap(proc: asyncio.subprocess.Process, readers: List[asyncio.Future]) -> None:
    """Wait for a killed child and its output readers to finish."""
    await proc.wait()
    await asyncio.gather(*readers, return_exceptions=True)


async def _spawn(
    command: str,
    args: Sequence[str],
    cwd: Optional[str],
    env: Dict[str, str],
    shell: bool,
) -> asyncio.subprocess.Process:
    kwargs = dict(
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=env,
    )
    if os.name == "posix":
        # Own process group so a timeout also reaches grandchildren (npx, sh -c)
        kwargs["start_new_session"] = True

    if shell:
        return await asyncio.create_subprocess_shell(
            _join_command([command, *args]), **kwargs
        )
    return await asyncio.create_subprocess_exec(command, *args, **kwargs)


async def exec_command(
    command: str,
    args: Sequence[str],
    *,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    shell: bool = False,
) -> str:
    """Run a command to completion and return its stdout.

    Args:
        command: Executable to run (looked up on PATH unless ``shell`` is set)
        args: Arguments passed to the command
        cwd: Working directory for the child
        env: Variables added on top of the current environment
        timeout_ms: Wall-clock limit in milliseconds
        shell: Run the quoted command line through the system shell

    Returns:
        Everything the child wrote to stdout, untrimmed.

    Raises:
        InspectorError: SPAWN_FAILED if the process cannot be started,
            TIMEOUT if the deadline passes before the child exits (the child
            is terminated), EXECUTION_FAILED on a nonzero exit status.

    Note:
        The first observed outcome wins. Once the deadline fires the result is
        TIMEOUT, even if the child exits on its own while being terminated.
    """
    full_env = {**os.environ, **(env or {})}

    logger.debug(f"Running {_join_command([command, *args])} (timeout {timeout_ms}ms)")
    try:
        proc = await _spawn(command, args, cwd, full_env, shell)
    except (OSError, ValueError) as e:
        # ValueError: arguments the OS cannot carry, e.g. an embedded NUL byte
        raise InspectorError(
            InspectorErrorKind.SPAWN_FAILED,
            f"Failed to spawn command: {command}",
            str(e),
        ) from e

    stdout_chunks: List[bytes] = []
    stderr_chunks: List[bytes] = []
    readers = [
        asyncio.ensure_future(_drain(proc.stdout, stdout_chunks)),
        asyncio.ensure_future(_drain(proc.stderr, stderr_chunks)),
    ]

    try:
        returncode = await asyncio.wait_for(proc.wait(), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError:
        stderr_text = _decode(stderr_chunks)
        logger.warning(f"Command {command} timed out after {timeout_ms}ms")
        await _terminate(proc)
        for reader in readers:
            reader.cancel()
        await asyncio.gather(*readers, return_exceptions=True)
        raise InspectorError(
            InspectorErrorKind.TIMEOUT,
            f"Command timed out after {timeout_ms}ms",
            stderr_text,
        )
    except asyncio.CancelledError:
        _signal_child(proc, force=True)
        for reader in readers:
            reader.cancel()
        await asyncio.shield(_reap(proc, readers))
        raise

    await asyncio.gather(*readers)
    stdout_text = _decode(stdout_chunks)
    stderr_text = _decode(stderr_chunks)

    if returncode != 0:
        raise InspectorError(
            InspectorErrorKind.EXECUTION_FAILED,
            f"Command exited with code {returncode}",
            stderr_text or stdout_text,
        )
    return stdout_text
