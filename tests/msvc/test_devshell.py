"""
Tests for developer shell activation.
"""

import pytest
from unittest.mock import MagicMock, patch

from swiftdevkit.core.exceptions import (
    ShellActivationError,
    ToolNotFoundError,
    UnrecognizedArchitectureError,
)
from swiftdevkit.msvc.devshell import (
    DevShellOptions,
    build_devshell_arguments,
    enter_devshell,
    find_devshell_script,
    parse_set_output,
)

SET_OUTPUT = "\n".join(
    [
        r"PATH=C:\VS\VC\Tools\MSVC\14.40\bin\Hostx64\x64;C:\Windows",
        r"INCLUDE=C:\SDK\Include\10.0.19041.0\ucrt",
        "VSCMD_ARG_TGT_ARCH=x64",
        "=C:=C:\\src",
    ]
)


@pytest.fixture
def vs_install(tmp_path):
    """Visual Studio installation directory with a developer shell script."""
    install = tmp_path / "VS"
    tools = install / "Common7" / "Tools"
    tools.mkdir(parents=True)
    (tools / "VsDevCmd.bat").touch()
    return install


@pytest.fixture
def script(vs_install):
    return find_devshell_script(vs_install)


class TestDevShellOptions:
    def test_defaults(self):
        options = DevShellOptions()
        assert not options.has_sdk_version
        assert not options.has_toolset_version

    def test_empty_string_is_unset(self):
        options = DevShellOptions(sdk_version="", toolset_version="14.40")
        assert not options.has_sdk_version
        assert options.has_toolset_version


class TestBuildDevshellArguments:
    """Tests for build_devshell_arguments()."""

    def test_minimal(self, win_env):
        """Test only the banner and host flags without pins."""
        arguments, target = build_devshell_arguments(DevShellOptions(), win_env)

        assert arguments == "-no_logo -host_arch=amd64"
        assert target == "amd64"

    def test_all_options(self, win_env):
        """Test SDK and toolset flags in order."""
        options = DevShellOptions(
            sdk_version="10.0.22621.0",
            toolset_version="14.40",
            host_arch="amd64",
            target_arch="arm64",
        )

        arguments, target = build_devshell_arguments(options, win_env)

        assert arguments == (
            "-no_logo -winsdk=10.0.22621.0 -vcvars_ver=14.40 -host_arch=amd64"
        )
        assert target == "arm64"

    def test_arm64_host(self, win_env):
        """Test host and target default to an ARM64 host."""
        win_env["PROCESSOR_ARCHITECTURE"] = "ARM64"

        arguments, target = build_devshell_arguments(DevShellOptions(), win_env)

        assert arguments.endswith("-host_arch=arm64")
        assert target == "arm64"

    def test_unknown_host(self, win_env):
        """Test an unknown host architecture is reported."""
        win_env["PROCESSOR_ARCHITECTURE"] = "x86"

        with pytest.raises(UnrecognizedArchitectureError):
            build_devshell_arguments(DevShellOptions(), win_env)

    def test_explicit_arches_skip_host_lookup(self, win_env):
        """Test explicit architectures work on an unknown host."""
        win_env["PROCESSOR_ARCHITECTURE"] = "x86"
        options = DevShellOptions(host_arch="amd64", target_arch="amd64")

        assert build_devshell_arguments(options, win_env)[1] == "amd64"


class TestParseSetOutput:
    def test_parse(self):
        variables = parse_set_output(SET_OUTPUT)

        assert variables["VSCMD_ARG_TGT_ARCH"] == "x64"
        assert variables["INCLUDE"] == r"C:\SDK\Include\10.0.19041.0\ucrt"
        assert len(variables) == 3

    def test_value_with_equals(self):
        assert parse_set_output("FLAGS=-DA=1") == {"FLAGS": "-DA=1"}


class TestEnterDevshell:
    """Tests for enter_devshell()."""

    def test_missing_script(self, tmp_path, win_env):
        with pytest.raises(ToolNotFoundError, match="VsDevCmd.bat"):
            find_devshell_script(tmp_path)

    @patch("swiftdevkit.msvc.devshell.subprocess.run")
    def test_success_replaces_environment(self, mock_run, script, win_env):
        """Test the activated environment replaces the session's."""
        mock_run.return_value = MagicMock(returncode=0, stdout=SET_OUTPUT, stderr="")
        win_env.cwd = "S:\\"

        enter_devshell(win_env, script, "arm64", "-no_logo -host_arch=amd64")

        assert win_env["VSCMD_ARG_TGT_ARCH"] == "x64"
        assert "LOCALAPPDATA" not in win_env
        assert win_env.cwd == "S:\\"

        command = mock_run.call_args[0][0]
        assert command.startswith('cmd.exe /s /c ""')
        assert "VsDevCmd.bat\" -no_logo -host_arch=amd64 -arch=arm64 && set\"" in command
        assert mock_run.call_args[1]["env"]["PROCESSOR_ARCHITECTURE"] == "AMD64"

    @patch("swiftdevkit.msvc.devshell.subprocess.run")
    def test_nonzero_exit(self, mock_run, script, win_env):
        """Test a failing script raises and keeps the environment."""
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="boom")
        before = dict(win_env)

        with pytest.raises(ShellActivationError) as exc_info:
            enter_devshell(win_env, script, "amd64", "-no_logo")

        assert exc_info.value.returncode == 1
        assert dict(win_env) == before

    @patch("swiftdevkit.msvc.devshell.subprocess.run")
    def test_error_marker_with_zero_exit(self, mock_run, script, win_env):
        """Test an [ERROR:...] report fails even when the exit code is 0."""
        mock_run.return_value = MagicMock(
            returncode=0,
            stdout="[ERROR:winsdk.bat] Windows SDK 10.0.1 : not found\nPATH=C:\\x",
            stderr="",
        )

        with pytest.raises(ShellActivationError, match="winsdk.bat"):
            enter_devshell(win_env, script, "amd64", "-winsdk=10.0.1")

    @patch("swiftdevkit.msvc.devshell.subprocess.run")
    def test_empty_output(self, mock_run, script, win_env):
        """Test a shell that prints no environment is a failure."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

        with pytest.raises(ShellActivationError, match="no environment"):
            enter_devshell(win_env, script, "amd64", "-no_logo")
