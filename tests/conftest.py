"""
Pytest configuration and shared fixtures for swiftdevkit tests.
"""

import pytest
from pathlib import Path

from swiftdevkit.core.environment import Environment


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def local_app_data(tmp_path: Path) -> Path:
    """Create a per-user LOCALAPPDATA directory."""
    path = tmp_path / "AppData" / "Local"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def win_env(local_app_data: Path) -> Environment:
    """Windows-style session environment on an x64 host."""
    return Environment(
        {
            "PATH": r"C:\Windows\system32;C:\Windows",
            "PROCESSOR_ARCHITECTURE": "AMD64",
            "LOCALAPPDATA": str(local_app_data),
        },
        pathsep=";",
    )


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch) -> Path:
    """Run the test from an empty working directory."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir
