"""
Centralized exception hierarchy for swiftdevkit.

Every operation either completes fully or raises one of these. Nothing is
retried or rolled back: environment changes applied before the failure
stay in place.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class SwiftDevKitError(Exception):
    """Base exception for all swiftdevkit errors."""

    pass


class ConfigurationError(SwiftDevKitError):
    """Raised when configuration or required environment is invalid."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnrecognizedArchitectureError(SwiftDevKitError):
    """Raised for a hardware architecture token outside the known set."""

    def __init__(self, architecture: str):
        self.architecture = architecture
        super().__init__(f"Unrecognized architecture: {architecture}")


# ============================================================================
# Tool Exceptions
# ============================================================================


class ToolNotFoundError(SwiftDevKitError):
    """Raised when an installer, installation or registry key is missing."""

    pass


class DownloadOrExtractError(SwiftDevKitError):
    """Raised when fetching or unpacking a release archive fails."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


# ============================================================================
# Session Exceptions
# ============================================================================


class AliasCreationError(SwiftDevKitError):
    """Raised when the drive alias cannot be created."""

    def __init__(self, drive: str, message: str):
        self.drive = drive
        super().__init__(f"Failed to create drive alias {drive}: {message}")


class ShellActivationError(SwiftDevKitError):
    """Raised when the developer shell script fails."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(message)
