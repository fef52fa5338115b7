"""
Visual Studio installation discovery through vswhere.exe.
"""

import json
import logging
import subprocess
from pathlib import Path
from typing import Mapping

from swiftdevkit.core.exceptions import ToolNotFoundError
from swiftdevkit.core.paths import join_path

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM_FILES_X86 = "C:\\Program Files (x86)"


def find_vswhere(env: Mapping[str, str]) -> Path:
    """
    Locate vswhere.exe in the Visual Studio installer directory.

    Raises:
        ToolNotFoundError: If vswhere.exe is absent
    """
    program_files = env.get("ProgramFiles(x86)") or DEFAULT_PROGRAM_FILES_X86
    vswhere = Path(
        join_path([program_files, "Microsoft Visual Studio", "Installer", "vswhere.exe"])
    )
    if not vswhere.is_file():
        raise ToolNotFoundError(
            f"Visual Studio installer not found: {vswhere} does not exist"
        )
    return vswhere


def find_latest_installation(env: Mapping[str, str]) -> Path:
    """
    Ask vswhere for the latest Visual Studio installation.

    Returns:
        Installation directory

    Raises:
        ToolNotFoundError: If vswhere is missing, reports nothing, or reports
            a directory that does not exist
    """
    vswhere = find_vswhere(env)
    command = [str(vswhere), "-latest", "-products", "*", "-format", "json"]
    logger.debug(f"Running: {' '.join(command)}")

    result = subprocess.run(command, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        raise ToolNotFoundError(
            f"vswhere failed with exit code {result.returncode}: {result.stderr.strip()}"
        )

    try:
        instances = json.loads(result.stdout or "[]")
    except json.JSONDecodeError as e:
        raise ToolNotFoundError(f"Could not parse vswhere output: {e}") from e

    if not instances or not instances[0].get("installationPath"):
        raise ToolNotFoundError("vswhere did not report a Visual Studio installation")

    install_path = Path(instances[0]["installationPath"])
    if not install_path.is_dir():
        raise ToolNotFoundError(
            f"Visual Studio installation not found: {install_path} does not exist"
        )

    logger.debug(f"Found Visual Studio at {install_path}")
    return install_path


__all__ = ["find_vswhere", "find_latest_installation"]
