"""
Unit tests for process.py module.

Runs short Python child processes to check output capture, exit status
mapping, environment handling and timeouts.
"""

import asyncio
import sys
import time
from unittest.mock import patch

import pytest

from mcpdev.inspector import process
from mcpdev.inspector.errors import InspectorError, InspectorErrorKind
from mcpdev.inspector.process import exec_command

PY = sys.executable


class TestExecCommand:
    """Test exec_command outcomes."""

    @pytest.mark.asyncio
    async def test_success_returns_stdout_untrimmed(self):
        output = await exec_command(PY, ["-c", "print('  hello  ')"])
        assert output.rstrip("\r\n") == "  hello  "
        assert output.endswith("\n")

    @pytest.mark.asyncio
    async def test_stderr_ignored_on_success(self):
        output = await exec_command(
            PY, ["-c", "import sys; sys.stderr.write('noise'); print('ok')"]
        )
        assert output.strip() == "ok"

    @pytest.mark.asyncio
    async def test_nonzero_exit_uses_stderr(self):
        with pytest.raises(InspectorError) as exc_info:
            await exec_command(
                PY,
                ["-c", "import sys; print('out'); sys.stderr.write('boom'); sys.exit(3)"],
            )

        error = exc_info.value
        assert error.kind == InspectorErrorKind.EXECUTION_FAILED
        assert error.message == "Command exited with code 3"
        assert error.details == "boom"

    @pytest.mark.asyncio
    async def test_nonzero_exit_falls_back_to_stdout(self):
        with pytest.raises(InspectorError) as exc_info:
            await exec_command(PY, ["-c", "import sys; print('only out'); sys.exit(1)"])

        assert exc_info.value.kind == InspectorErrorKind.EXECUTION_FAILED
        assert exc_info.value.details.strip() == "only out"

    @pytest.mark.asyncio
    async def test_spawn_failure(self):
        with pytest.raises(InspectorError) as exc_info:
            await exec_command("mcpdev-definitely-not-a-command", ["--cli"])

        error = exc_info.value
        assert error.kind == InspectorErrorKind.SPAWN_FAILED
        assert error.message == "Failed to spawn command: mcpdev-definitely-not-a-command"
        assert error.details

    @pytest.mark.asyncio
    @pytest.mark.parametrize("shell", [False, True])
    async def test_nul_byte_argument_is_spawn_failure(self, shell):
        with pytest.raises(InspectorError) as exc_info:
            await exec_command(PY, ["-c", "print(1)", "node a\x00b.js"], shell=shell)

        error = exc_info.value
        assert error.kind == InspectorErrorKind.SPAWN_FAILED
        assert error.message == f"Failed to spawn command: {PY}"
        assert "null" in error.details

    @pytest.mark.asyncio
    async def test_cancel_reaps_child(self):
        spawned = []
        real_spawn = process._spawn

        async def recording_spawn(*args):
            proc = await real_spawn(*args)
            spawned.append(proc)
            return proc

        with patch.object(process, "_spawn", recording_spawn):
            task = asyncio.ensure_future(
                exec_command(PY, ["-c", "import time; time.sleep(30)"], timeout_ms=60000)
            )
            while not spawned:
                await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert spawned[0].returncode is not None

    @pytest.mark.asyncio
    async def test_timeout_is_prompt(self):
        start = time.monotonic()
        with pytest.raises(InspectorError) as exc_info:
            await exec_command(PY, ["-c", "import time; time.sleep(5)"], timeout_ms=50)
        elapsed = time.monotonic() - start

        assert exc_info.value.kind == InspectorErrorKind.TIMEOUT
        assert exc_info.value.message == "Command timed out after 50ms"
        assert elapsed < 0.5

    @pytest.mark.asyncio
    async def test_timeout_details_carry_stderr(self):
        script = (
            "import sys, time; sys.stderr.write('still connecting'); "
            "sys.stderr.flush(); time.sleep(5)"
        )
        with pytest.raises(InspectorError) as exc_info:
            await exec_command(PY, ["-c", script], timeout_ms=1000)

        assert exc_info.value.kind == InspectorErrorKind.TIMEOUT
        assert "still connecting" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_timeout_wins_over_sigterm_exit_code(self):
        # A child that exits with status 0 on SIGTERM still reports TIMEOUT
        script = (
            "import signal, sys, time\n"
            "signal.signal(signal.SIGTERM, lambda *a: sys.exit(0))\n"
            "time.sleep(5)\n"
        )
        with pytest.raises(InspectorError) as exc_info:
            await exec_command(PY, ["-c", script], timeout_ms=200)
        assert exc_info.value.kind == InspectorErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_env_overrides_added(self):
        output = await exec_command(
            PY,
            ["-c", "import os; print(os.environ['MCPDEV_TEST_VAR'], 'PATH' in os.environ)"],
            env={"MCPDEV_TEST_VAR": "from-test"},
        )
        assert output.split() == ["from-test", "True"]

    @pytest.mark.asyncio
    async def test_cwd(self, temp_dir):
        output = await exec_command(
            PY, ["-c", "import os; print(os.getcwd())"], cwd=str(temp_dir)
        )
        assert output.strip() == str(temp_dir.resolve())

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell quoting")
    @pytest.mark.asyncio
    async def test_shell_keeps_arguments_intact(self):
        output = await exec_command(
            PY,
            ["-c", "import sys; print(sys.argv[1:])", "a b", '{"k": "v w"}'],
            shell=True,
        )
        assert output.strip() == str(["a b", '{"k": "v w"}'])

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")
    @pytest.mark.asyncio
    async def test_shell_missing_command_is_execution_failure(self):
        with pytest.raises(InspectorError) as exc_info:
            await exec_command("mcpdev-definitely-not-a-command", [], shell=True)
        assert exc_info.value.kind == InspectorErrorKind.EXECUTION_FAILED
        assert exc_info.value.message == "Command exited with code 127"

    @pytest.mark.asyncio
    async def test_large_output_not_truncated(self):
        output = await exec_command(PY, ["-c", "print('x' * 500000)"])
        assert len(output.strip()) == 500000
