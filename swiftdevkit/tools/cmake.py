"""
CMake installation for swiftdevkit.

Downloads a pinned CMake release from GitHub into the per-user programs
directory and exposes it to the session through PATH and CMAKE_ROOT.

An installation is keyed by version, patch and architecture. Once its
``bin\\cmake.exe`` exists it is reused as-is; nothing here updates or
evicts it.
"""

import logging
from pathlib import Path
from typing import Optional

from swiftdevkit.core.download import download_file, format_progress
from swiftdevkit.core.environment import Environment
from swiftdevkit.core.exceptions import DownloadOrExtractError
from swiftdevkit.core.filesystem import (
    extract_archive,
    safe_rmtree,
    temporary_directory,
)
from swiftdevkit.core.locking import LockManager
from swiftdevkit.core.paths import get_local_programs_dir, join_path
from swiftdevkit.core.platform import get_host_arch, get_package_arch

logger = logging.getLogger(__name__)

DEFAULT_CMAKE_VERSION = "3.29"
DEFAULT_CMAKE_PATCH = "2"
CMAKE_EXECUTABLE = "cmake.exe"


class CMakeInstaller:
    """
    Install a pinned CMake release for Windows.

    Attributes:
        programs_dir: Directory that receives the extracted release
        version: Major.minor version (e.g. '3.29')
        patch: Patch number (e.g. '2')
        arch: Package architecture ('x86_64' or 'arm64')
    """

    def __init__(
        self,
        programs_dir: str,
        version: str = DEFAULT_CMAKE_VERSION,
        patch: str = DEFAULT_CMAKE_PATCH,
        arch: str = "x86_64",
    ):
        self.programs_dir = programs_dir
        self.version = version
        self.patch = patch
        self.arch = arch

    @classmethod
    def for_environment(
        cls,
        env: Environment,
        version: str = DEFAULT_CMAKE_VERSION,
        patch: str = DEFAULT_CMAKE_PATCH,
    ) -> "CMakeInstaller":
        """Create an installer for the session's host and programs directory."""
        return cls(
            programs_dir=get_local_programs_dir(env),
            version=version,
            patch=patch,
            arch=get_package_arch(get_host_arch(env)),
        )

    @property
    def full_version(self) -> str:
        return f"{self.version}.{self.patch}"

    @property
    def install_name(self) -> str:
        """Directory name of the release, e.g. 'cmake-3.29.2-windows-x86_64'."""
        return f"cmake-{self.full_version}-windows-{self.arch}"

    @property
    def install_dir(self) -> str:
        return join_path([self.programs_dir, self.install_name])

    @property
    def bin_dir(self) -> str:
        return join_path([self.install_dir, "bin"])

    @property
    def module_root(self) -> str:
        """CMake shared data directory, the value for CMAKE_ROOT."""
        return join_path([self.install_dir, "share", f"cmake-{self.version}"])

    @property
    def download_url(self) -> str:
        return (
            "https://github.com/Kitware/CMake/releases/download/"
            f"v{self.full_version}/{self.install_name}.zip"
        )

    def is_installed(self) -> bool:
        return Path(self.bin_dir, CMAKE_EXECUTABLE).is_file()

    def install(self, expected_sha256: Optional[str] = None) -> bool:
        """
        Download and extract the release unless it is already present.

        The archive is downloaded and extracted into a staging directory
        inside the programs directory. The release tree is renamed into
        place only once it holds ``bin\\cmake.exe``, so a failed run leaves
        nothing that looks installed.

        Args:
            expected_sha256: SHA256 of the release zip, verified when given

        Returns:
            True if a download happened, False if the installation existed

        Raises:
            DownloadOrExtractError: If the download or extraction fails
        """
        programs_dir = Path(self.programs_dir)
        lock_manager = LockManager(programs_dir / ".locks")
        with lock_manager.install_lock(self.install_name):
            if self.is_installed():
                logger.debug(f"CMake {self.full_version} found at {self.install_dir}")
                return False

            install_dir = Path(self.install_dir)
            if install_dir.exists():
                logger.warning(f"Removing incomplete CMake installation: {install_dir}")
                safe_rmtree(install_dir, require_prefix=programs_dir)

            logger.info(f"Installing CMake {self.full_version} ({self.arch})")
            programs_dir.mkdir(parents=True, exist_ok=True)
            with temporary_directory(
                prefix=".swiftdevkit_cmake_", parent=programs_dir
            ) as staging_dir:
                archive_path = staging_dir / f"{self.install_name}.zip"
                download_file(
                    self.download_url,
                    archive_path,
                    expected_sha256=expected_sha256,
                    progress_callback=lambda p: logger.debug(format_progress(p)),
                )

                logger.info(f"Extracting CMake to {self.programs_dir}")
                extract_dir = staging_dir / "extract"
                extract_archive(archive_path, extract_dir)

                extracted = extract_dir / self.install_name
                if not (extracted / "bin" / CMAKE_EXECUTABLE).is_file():
                    raise DownloadOrExtractError(
                        f"{archive_path.name} does not contain "
                        f"{self.install_name}/bin/{CMAKE_EXECUTABLE}",
                        url=self.download_url,
                    )
                try:
                    extracted.rename(install_dir)
                except OSError as e:
                    raise DownloadOrExtractError(
                        f"Failed to move CMake into {install_dir}: {e}",
                        url=self.download_url,
                    ) from e

            logger.info(f"CMake {self.full_version} installed at {self.install_dir}")
            return True

    def apply(self, env: Environment) -> None:
        """Prepend the CMake bin directory to PATH and set CMAKE_ROOT."""
        env.prepend_path(self.bin_dir)
        env["CMAKE_ROOT"] = self.module_root
        logger.debug(f"CMAKE_ROOT={self.module_root}")


def initialize_cmake_environment(
    env: Environment,
    version: str = DEFAULT_CMAKE_VERSION,
    patch: str = DEFAULT_CMAKE_PATCH,
    sha256: Optional[str] = None,
) -> CMakeInstaller:
    """
    Make a pinned CMake available in the session.

    Installs it on first use, then prepends its bin directory to PATH and
    points CMAKE_ROOT at its modules. Calling this again prepends PATH again;
    entries are not de-duplicated.

    Args:
        env: Session environment to mutate
        version: Major.minor version
        patch: Patch number
        sha256: Expected SHA256 of the release zip, checked on download

    Returns:
        The installer, for callers that want the computed paths

    Raises:
        UnrecognizedArchitectureError: If the host architecture is unknown
        DownloadOrExtractError: If installation fails
    """
    installer = CMakeInstaller.for_environment(env, version=version, patch=patch)
    installer.install(expected_sha256=sha256)
    installer.apply(env)
    return installer


__all__ = [
    "DEFAULT_CMAKE_VERSION",
    "DEFAULT_CMAKE_PATCH",
    "CMakeInstaller",
    "initialize_cmake_environment",
]
