"""
Shared utilities for CLI commands.

Provides the common run wrapper and the environment script formatting used
by every command.
"""

import json
import logging
import sys
from typing import Callable, Dict, Optional

from swiftdevkit.config import DevKitConfig, load_config
from swiftdevkit.core.environment import Environment
from swiftdevkit.core.exceptions import SwiftDevKitError

logger = logging.getLogger(__name__)


# ============================================================================
# Output Formatting
# ============================================================================


def _quote_powershell(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def format_environment_script(
    changes: Dict[str, Optional[str]], cwd: Optional[str], output_format: str
) -> str:
    """
    Render environment changes for a shell to evaluate.

    Args:
        changes: Variable name to new value, None for removed variables
        cwd: Working directory to change into, or None
        output_format: 'cmd', 'powershell' or 'json'

    Returns:
        Script text (without trailing newline)

    Example:
        >>> format_environment_script({"SDKROOT": None}, None, "cmd")
        'set "SDKROOT="'
    """
    if output_format == "json":
        return json.dumps({"variables": changes, "cwd": cwd}, indent=2, sort_keys=True)

    lines = []
    for name in sorted(changes, key=str.upper):
        value = changes[name]
        if output_format == "powershell":
            if value is None:
                lines.append(
                    f"Remove-Item -LiteralPath {_quote_powershell('Env:' + name)} "
                    "-ErrorAction SilentlyContinue"
                )
            else:
                lines.append(
                    f"Set-Item -LiteralPath {_quote_powershell('Env:' + name)} "
                    f"-Value {_quote_powershell(value)}"
                )
        else:
            lines.append(f'set "{name}={value or ""}"')

    if cwd:
        if output_format == "powershell":
            lines.append(f"Set-Location -LiteralPath {_quote_powershell(cwd)}")
        else:
            lines.append(f'cd /d "{cwd}"')

    return "\n".join(lines)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


# ============================================================================
# Command Runner
# ============================================================================


def run_initializer(
    args, initializer: Callable[[Environment, DevKitConfig], None]
) -> int:
    """
    Run an environment initializer on a copy of the process environment.

    Loads configuration, applies ``initializer`` and prints the resulting
    changes in ``args.format``.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config = load_config(args.config)
    except SwiftDevKitError as e:
        print_error("Failed to load configuration", str(e))
        return 1

    env = Environment.from_os()
    baseline = dict(env)

    try:
        initializer(env, config)
    except SwiftDevKitError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print_error(str(e))
        return 1

    changes = env.changes(baseline)
    logger.debug(f"{len(changes)} environment variables changed")
    print(format_environment_script(changes, env.cwd, args.format))
    return 0


__all__ = ["format_environment_script", "print_error", "run_initializer"]
