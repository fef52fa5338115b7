"""
Visual Studio developer shell activation.

Runs ``Common7\\Tools\\VsDevCmd.bat`` from a Visual Studio installation in a
child ``cmd.exe``, dumps the resulting environment with ``set`` and loads it
into the session :class:`Environment`.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from swiftdevkit.core.environment import Environment
from swiftdevkit.core.exceptions import ShellActivationError, ToolNotFoundError
from swiftdevkit.core.platform import get_build_tool_arch, get_host_arch

logger = logging.getLogger(__name__)

DEVSHELL_SCRIPT = Path("Common7") / "Tools" / "VsDevCmd.bat"


@dataclass
class DevShellOptions:
    """
    Developer shell selection. None or empty means "let Visual Studio choose".

    Attributes:
        sdk_version: Windows SDK version (e.g. '10.0.22621.0')
        toolset_version: MSVC toolset version (e.g. '14.40')
        host_arch: Host architecture in developer shell naming ('amd64')
        target_arch: Target architecture in developer shell naming ('arm64')
    """

    sdk_version: Optional[str] = None
    toolset_version: Optional[str] = None
    host_arch: Optional[str] = None
    target_arch: Optional[str] = None

    @property
    def has_sdk_version(self) -> bool:
        return bool(self.sdk_version)

    @property
    def has_toolset_version(self) -> bool:
        return bool(self.toolset_version)


def find_devshell_script(install_path: Path) -> Path:
    """
    Locate the developer shell script of an installation.

    Raises:
        ToolNotFoundError: If the script is missing
    """
    script = Path(install_path) / DEVSHELL_SCRIPT
    if not script.is_file():
        raise ToolNotFoundError(f"Developer shell script not found: {script}")
    return script


def build_devshell_arguments(options: DevShellOptions, env: Environment) -> tuple:
    """
    Build the developer shell argument string and resolve the target.

    The banner is always suppressed and the host architecture is always
    passed. SDK and toolset flags appear only when requested.

    Returns:
        Tuple of (argument string, target architecture)

    Raises:
        UnrecognizedArchitectureError: If an architecture must be resolved
            from an unknown host
    """
    arguments = ["-no_logo"]
    if options.has_sdk_version:
        arguments.append(f"-winsdk={options.sdk_version}")
    if options.has_toolset_version:
        arguments.append(f"-vcvars_ver={options.toolset_version}")

    host_arch = options.host_arch or get_build_tool_arch(get_host_arch(env))
    arguments.append(f"-host_arch={host_arch}")

    target_arch = options.target_arch or get_build_tool_arch(get_host_arch(env))
    return " ".join(arguments), target_arch


def parse_set_output(output: str) -> Dict[str, str]:
    """Parse the output of cmd's ``set`` into a variable mapping."""
    variables = {}
    for line in output.splitlines():
        name, sep, value = line.partition("=")
        if sep and name and not name.startswith(" "):
            variables[name] = value
    return variables


def enter_devshell(
    env: Environment, script: Path, target_arch: str, arguments: str
) -> None:
    """
    Activate the developer shell and load its environment into ``env``.

    Args:
        env: Session environment, used as the starting environment and
            replaced by the activated one
        script: Developer shell script from :func:`find_devshell_script`
        target_arch: Target architecture ('amd64', 'arm64', ...)
        arguments: Argument string from :func:`build_devshell_arguments`

    Raises:
        ShellActivationError: If the script fails or reports an error
    """
    command = f'cmd.exe /s /c ""{script}" {arguments} -arch={target_arch} && set"'
    logger.info(f"Entering Visual Studio developer shell ({target_arch})")
    logger.debug(f"Running: {command}")

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            errors="replace",
            env=dict(env),
            check=False,
        )
    except OSError as e:
        raise ShellActivationError(f"Failed to start developer shell: {e}") from e

    # VsDevCmd reports bad arguments as [ERROR:...] and may still exit 0
    if result.returncode != 0 or "[ERROR:" in result.stdout:
        details = "\n".join(
            line for line in result.stdout.splitlines() if line.startswith("[ERROR:")
        )
        raise ShellActivationError(
            f"Developer shell activation failed (exit code {result.returncode}): "
            f"{details or result.stderr.strip()}",
            returncode=result.returncode,
        )

    variables = parse_set_output(result.stdout)
    if not variables:
        raise ShellActivationError(
            "Developer shell activation produced no environment",
            returncode=result.returncode,
        )

    env.replace(variables)
    logger.debug(f"Developer shell environment loaded ({len(variables)} variables)")


__all__ = [
    "DevShellOptions",
    "find_devshell_script",
    "build_devshell_arguments",
    "parse_set_output",
    "enter_devshell",
]
