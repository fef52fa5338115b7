"""
Core functionality for swiftdevkit.

This package contains the foundational modules that the environment
initializers depend on.
"""

from .environment import Environment

from .paths import (
    join_path,
    get_local_programs_dir,
)

from .platform import (
    get_build_tool_arch,
    get_package_arch,
    get_host_arch,
)

from .exceptions import (
    SwiftDevKitError,
    ConfigurationError,
    UnrecognizedArchitectureError,
    ToolNotFoundError,
    DownloadOrExtractError,
    AliasCreationError,
    ShellActivationError,
)

__all__ = [
    "Environment",
    "join_path",
    "get_local_programs_dir",
    "get_build_tool_arch",
    "get_package_arch",
    "get_host_arch",
    "SwiftDevKitError",
    "ConfigurationError",
    "UnrecognizedArchitectureError",
    "ToolNotFoundError",
    "DownloadOrExtractError",
    "AliasCreationError",
    "ShellActivationError",
]
