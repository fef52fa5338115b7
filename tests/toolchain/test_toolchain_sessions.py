"""
Tests for the build, repro and bootstrap session setups.
"""

import os
import zipfile
import pytest
from unittest.mock import patch

from swiftdevkit.config import DevKitConfig, parse_config
from swiftdevkit.core.exceptions import (
    AliasCreationError,
    DownloadOrExtractError,
    ToolNotFoundError,
)
from swiftdevkit.toolchain.environment import (
    initialize_bootstrap_environment,
    initialize_build_environment,
    initialize_repro_environment,
    remove_global_toolchain,
    runtime_entry_for,
)

MODULE = "swiftdevkit.toolchain.environment"


@pytest.fixture
def installed_swift(tmp_path):
    """An installed Swift toolchain with swift.exe in its bin directory."""
    root = tmp_path / "Swift"
    toolchain_bin = root / "Toolchains" / "6.0.3+Asserts" / "usr" / "bin"
    runtime_bin = root / "Runtimes" / "6.0.3" / "usr" / "bin"
    toolchain_bin.mkdir(parents=True)
    runtime_bin.mkdir(parents=True)
    (toolchain_bin / "swift.exe").touch()
    return str(toolchain_bin), str(runtime_bin)


@pytest.fixture
def sessions():
    """Patch the CMake, drive alias and MSVC initializers."""
    with patch(f"{MODULE}.initialize_cmake_environment") as cmake, patch(
        f"{MODULE}.initialize_drive_alias"
    ) as drive, patch(f"{MODULE}.initialize_msvc_environment") as msvc:
        yield {"cmake": cmake, "drive": drive, "msvc": msvc}


class TestRemoveGlobalToolchain:
    """Tests for remove_global_toolchain()."""

    def test_runtime_entry_for(self):
        entry = r"C:\Swift\Toolchains\6.0.3+Asserts\usr\bin" + "\\"
        assert runtime_entry_for(entry) == r"C:\Swift\Runtimes\6.0.3\usr\bin" + "\\"

    def test_removes_toolchain_and_runtime(self, win_env, installed_swift):
        """Test both bin directories leave PATH and SDKROOT is cleared."""
        toolchain_bin, runtime_bin = installed_swift
        win_env.prepend_path(toolchain_bin, runtime_bin)
        win_env["SDKROOT"] = "C:\\Swift\\Platforms\\6.0.3"

        assert remove_global_toolchain(win_env) is True

        assert win_env.path_entries() == [r"C:\Windows\system32", r"C:\Windows"]
        assert "SDKROOT" not in win_env

    def test_no_toolchain(self, win_env):
        """Test nothing changes when no swift.exe is on PATH."""
        win_env["SDKROOT"] = "kept"
        before = dict(win_env)

        assert remove_global_toolchain(win_env) is False
        assert dict(win_env) == before

    def test_only_matching_runtime_removed(self, win_env, installed_swift, tmp_path):
        """Test other runtime versions stay on PATH."""
        toolchain_bin, _ = installed_swift
        other_runtime = str(tmp_path / "Swift" / "Runtimes" / "5.10.1" / "usr" / "bin")
        win_env.prepend_path(toolchain_bin, other_runtime)

        remove_global_toolchain(win_env)

        assert other_runtime in win_env.path_entries()
        assert toolchain_bin not in win_env.path_entries()


class TestBuildEnvironment:
    """Tests for initialize_build_environment()."""

    def test_order_and_defaults(self, sessions, win_env, installed_swift):
        """Test global Swift is removed before CMake and the drive alias."""
        win_env.prepend_path(installed_swift[0])
        seen_path = []
        sessions["cmake"].side_effect = lambda env, **kw: seen_path.extend(
            env.path_entries()
        )

        initialize_build_environment(win_env, r"D:\src")

        assert installed_swift[0] not in seen_path
        sessions["cmake"].assert_called_once_with(
            win_env, version="3.29", patch="2", sha256=None
        )
        sessions["drive"].assert_called_once_with(win_env, r"D:\src", drive="S:")

    def test_config_overrides(self, sessions, win_env):
        """Test configured CMake version and drive are used."""
        config = parse_config({"cmake": {"version": "3.30", "patch": "5"}, "drive": "T"})

        initialize_build_environment(win_env, r"D:\src", config)

        sessions["cmake"].assert_called_once_with(
            win_env, version="3.30", patch="5", sha256=None
        )
        sessions["drive"].assert_called_once_with(win_env, r"D:\src", drive="T:")

    def test_cmake_failure_stops(self, sessions, win_env):
        """Test a CMake failure stops before the drive alias."""
        sessions["cmake"].side_effect = DownloadOrExtractError("offline")

        with pytest.raises(DownloadOrExtractError):
            initialize_build_environment(win_env, r"D:\src")

        sessions["drive"].assert_not_called()


class TestReproEnvironment:
    """Tests for initialize_repro_environment()."""

    def test_repro(self, sessions, win_env):
        """Test the locally built toolchain is put on PATH."""
        layout = initialize_repro_environment(win_env, r"D:\src")

        assert layout.version == "0.0.0"
        assert win_env.path_entries()[:2] == [layout.toolchain_bin, layout.runtime_bin]
        assert win_env["SDKROOT"] == layout.sdkroot
        assert "0.0.0+Asserts" in win_env["PATH"]

        options = sessions["msvc"].call_args[0][1]
        assert options.target_arch == "amd64"
        assert options.sdk_version is None

    def test_msvc_pins_from_config(self, sessions, win_env):
        """Test configured SDK and toolset reach the developer shell."""
        config = parse_config(
            {"msvc": {"sdk_version": "10.0.22621.0", "toolset_version": "14.40"}}
        )

        initialize_repro_environment(win_env, r"D:\src", "arm64", config)

        options = sessions["msvc"].call_args[0][1]
        assert options.sdk_version == "10.0.22621.0"
        assert options.toolset_version == "14.40"
        assert options.target_arch == "arm64"

    def test_msvc_failure_leaves_toolchain_off_path(self, sessions, win_env):
        """Test an MSVC failure stops before the toolchain is activated."""
        sessions["msvc"].side_effect = ToolNotFoundError("no VS")

        with pytest.raises(ToolNotFoundError):
            initialize_repro_environment(win_env, r"D:\src")

        assert "SDKROOT" not in win_env


class TestBootstrapEnvironment:
    """Tests for initialize_bootstrap_environment()."""

    def test_bootstrap_defaults(self, sessions, win_env, installed_swift):
        """Test the pinned release replaces an installed toolchain."""
        win_env.prepend_path(*installed_swift)

        layout = initialize_bootstrap_environment(win_env, r"D:\src")

        assert layout.version == "6.1.2"
        assert "swift-6.1.2-RELEASE-windows10" in win_env["SDKROOT"]
        assert "swift-6.1.2-RELEASE-windows10" in win_env.path_entries()[0]
        assert installed_swift[0] not in win_env.path_entries()
        assert installed_swift[1] not in win_env.path_entries()

    def test_bootstrap_version_and_cache(self, sessions, win_env):
        config = DevKitConfig.default()
        config.binary_cache = "T:\\b"

        layout = initialize_bootstrap_environment(
            win_env, r"D:\src", toolchain_version="6.0.3", config=config
        )

        assert layout.root.startswith("T:\\b")
        assert "6.0.3+Asserts" in win_env.path_entries()[0]


class TestSessionsEndToEnd:
    """Build environment with the real CMake installer and PATH handling."""

    @patch(f"{MODULE}.initialize_msvc_environment")
    @patch(f"{MODULE}.initialize_drive_alias")
    @patch("swiftdevkit.tools.cmake.download_file")
    def test_bootstrap_session(self, mock_download, mock_drive, mock_msvc, win_env):
        """Test changes made before a failing step stay applied."""

        def fake_release(url, destination, **kwargs):
            name = destination.name[: -len(".zip")]
            with zipfile.ZipFile(destination, "w") as zf:
                zf.writestr(f"{name}/bin/cmake.exe", "")
            return destination

        mock_download.side_effect = fake_release
        mock_drive.side_effect = AliasCreationError("S:", "in use")

        with pytest.raises(AliasCreationError):
            initialize_bootstrap_environment(win_env, r"D:\src")

        # CMake stays applied even though the alias failed
        assert os.path.basename(os.path.dirname(win_env.path_entries()[0])) == (
            "cmake-3.29.2-windows-x86_64"
        )
        assert "CMAKE_ROOT" in win_env
        mock_msvc.assert_not_called()
