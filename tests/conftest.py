"""
Pytest configuration and shared fixtures for mcpdev tests.

Provides inspector settings that point at the stand-in inspector script in
tests/fixtures, run with the current Python interpreter.
"""

import shutil
import sys
import tempfile
from pathlib import Path

import pytest

from mcpdev.inspector import InspectorCLI, InvocationMode
from mcpdev.utils.config import InspectorSettings

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_INSPECTOR = FIXTURES_DIR / "fake_inspector.py"
STUB_SERVER = FIXTURES_DIR / "stub_server.py"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def fake_inspector_path():
    return str(FAKE_INSPECTOR)


@pytest.fixture
def stub_target():
    """A target string the stand-in inspector treats as a healthy server."""
    return f"{sys.executable} {STUB_SERVER}"


@pytest.fixture
def direct_settings(fake_inspector_path):
    """Direct-mode settings running the stand-in inspector with Python."""
    return InspectorSettings(
        mode=InvocationMode.DIRECT,
        inspector_path=fake_inspector_path,
        node_command=sys.executable,
    )


@pytest.fixture
def runner_settings(fake_inspector_path):
    """Package-runner settings: Python plays npx and the script plays the package."""
    return InspectorSettings(
        mode=InvocationMode.PACKAGE_RUNNER,
        package_runner=sys.executable,
        runner_args=[],
        package=fake_inspector_path,
    )


@pytest.fixture
def direct_inspector(direct_settings):
    return InspectorCLI(direct_settings)


@pytest.fixture
def runner_inspector(runner_settings):
    return InspectorCLI(runner_settings)
