"""
File system utilities for swiftdevkit.

This module provides:
- Zip extraction with directory traversal checks
- Safe directory removal
- Temporary directories with automatic cleanup
- Executable lookup over an explicit search list
"""

import os
import shutil
import sys
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Optional, Union

from .exceptions import DownloadOrExtractError

IS_WINDOWS = os.name == "nt"


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(DownloadOrExtractError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """Check whether path is inside parent."""
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def find_executable_entry(name: str, search_paths: Iterable[str]) -> Optional[str]:
    """
    Find the search path entry that holds an executable.

    Entries are searched in order; empty entries are skipped. On Windows the
    usual executable extensions are tried when name has none.

    Args:
        name: Executable name (e.g. 'swift.exe' or 'swift')
        search_paths: Directories to search, typically PATH entries

    Returns:
        The matching entry exactly as given (trailing separator included),
        or None

    Example:
        >>> find_executable_entry("swift.exe", env.path_entries())
        'C:\\\\...\\\\Toolchains\\\\6.0.3+Asserts\\\\usr\\\\bin\\\\'
    """
    extensions = [""]
    if IS_WINDOWS and not Path(name).suffix:
        extensions += [".exe", ".bat", ".cmd"]

    for directory in search_paths:
        if not directory:
            continue
        for ext in extensions:
            if (Path(directory) / f"{name}{ext}").is_file():
                return directory
    return None


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(member: str, destination: Path) -> None:
    member_path = (destination / member).resolve()
    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{member}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Extract a zip archive to a destination directory.

    Raises:
        ArchiveExtractionError: If the archive is missing, not a zip or broken
        InsecureArchiveError: If a member escapes the destination
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    if not archive_path.name.lower().endswith(".zip"):
        raise ArchiveExtractionError(
            f"Unsupported archive format: {archive_path.name}. Supported: .zip"
        )

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            for member in zf.namelist():
                _validate_archive_path(member, destination)
            zf.extractall(destination)
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, target, exc):
        # Read-only files (common in extracted archives on Windows)
        if not os.access(target, os.W_OK):
            os.chmod(target, 0o777)
            func(target)
        else:
            raise exc

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(
                path,
                onerror=lambda func, target, exc_info: handle_remove_readonly(
                    func, target, exc_info[1]
                ),
            )
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


@contextmanager
def temporary_directory(
    prefix: str = "swiftdevkit_", parent: Optional[Union[str, Path]] = None
):
    """
    Context manager for a temporary directory removed on exit.

    Args:
        prefix: Directory name prefix
        parent: Directory to create it in (system temp directory if None)

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "is_relative_to",
    "find_executable_entry",
    "extract_archive",
    "safe_rmtree",
    "temporary_directory",
]
