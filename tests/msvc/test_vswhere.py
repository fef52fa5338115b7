"""
Tests for Visual Studio discovery.
"""

import json
import pytest
from unittest.mock import MagicMock, patch

from swiftdevkit.core.exceptions import ToolNotFoundError
from swiftdevkit.msvc.vswhere import find_latest_installation, find_vswhere


@pytest.fixture
def vs_env(tmp_path, win_env):
    """Environment with a vswhere.exe under a fake ProgramFiles(x86)."""
    installer = tmp_path / "pfx86" / "Microsoft Visual Studio" / "Installer"
    installer.mkdir(parents=True)
    (installer / "vswhere.exe").touch()
    win_env["ProgramFiles(x86)"] = str(tmp_path / "pfx86")
    return win_env


def vswhere_result(instances, returncode=0):
    return MagicMock(returncode=returncode, stdout=json.dumps(instances), stderr="")


class TestFindVswhere:
    def test_found(self, vs_env):
        assert find_vswhere(vs_env).name == "vswhere.exe"

    def test_missing(self, tmp_path, win_env):
        win_env["ProgramFiles(x86)"] = str(tmp_path / "empty")

        with pytest.raises(ToolNotFoundError, match="Visual Studio installer"):
            find_vswhere(win_env)


class TestFindLatestInstallation:
    """Tests for find_latest_installation()."""

    @patch("swiftdevkit.msvc.vswhere.subprocess.run")
    def test_latest_installation(self, mock_run, vs_env, tmp_path):
        """Test the first reported installation is returned."""
        vs_dir = tmp_path / "VS" / "2022" / "Community"
        vs_dir.mkdir(parents=True)
        mock_run.return_value = vswhere_result([{"installationPath": str(vs_dir)}])

        assert find_latest_installation(vs_env) == vs_dir

        command = mock_run.call_args[0][0]
        assert command[1:] == ["-latest", "-products", "*", "-format", "json"]

    @patch("swiftdevkit.msvc.vswhere.subprocess.run")
    def test_no_installations(self, mock_run, vs_env):
        """Test an empty result is reported as missing."""
        mock_run.return_value = vswhere_result([])

        with pytest.raises(ToolNotFoundError, match="did not report"):
            find_latest_installation(vs_env)

    @patch("swiftdevkit.msvc.vswhere.subprocess.run")
    def test_reported_directory_missing(self, mock_run, vs_env, tmp_path):
        """Test a stale installation path is reported as missing."""
        mock_run.return_value = vswhere_result(
            [{"installationPath": str(tmp_path / "gone")}]
        )

        with pytest.raises(ToolNotFoundError, match="does not exist"):
            find_latest_installation(vs_env)

    @patch("swiftdevkit.msvc.vswhere.subprocess.run")
    def test_vswhere_fails(self, mock_run, vs_env):
        """Test a failing vswhere is reported."""
        mock_run.return_value = MagicMock(returncode=87, stdout="", stderr="bad")

        with pytest.raises(ToolNotFoundError, match="exit code 87"):
            find_latest_installation(vs_env)

    @patch("swiftdevkit.msvc.vswhere.subprocess.run")
    def test_unparseable_output(self, mock_run, vs_env):
        """Test non-JSON output is reported."""
        mock_run.return_value = MagicMock(returncode=0, stdout="<xml/>", stderr="")

        with pytest.raises(ToolNotFoundError, match="parse"):
            find_latest_installation(vs_env)
