"""
Path helpers for swiftdevkit.

Paths composed here end up in environment variables, so they are plain
strings built with the platform join rules rather than ``Path`` objects.
"""

import os
from typing import Mapping, Sequence

from .exceptions import ConfigurationError


def join_path(segments: Sequence[str]) -> str:
    """
    Join path segments, treating the first as the base.

    Each following segment is appended as a child with ``os.path.join``.
    Nothing is normalized beyond what ``os.path.join`` does.

    Args:
        segments: Non-empty ordered sequence of segments

    Returns:
        Joined path

    Raises:
        ValueError: If segments is empty

    Example:
        >>> join_path(["a", "b", "c"]) == os.path.join("a", "b", "c")
        True
    """
    if not segments:
        raise ValueError("Cannot join an empty sequence of path segments")

    result = str(segments[0])
    for segment in segments[1:]:
        result = os.path.join(result, str(segment))
    return result


def get_local_programs_dir(env: Mapping[str, str]) -> str:
    """
    Get the per-user programs directory (``%LOCALAPPDATA%\\Programs``).

    Falls back to ``%USERPROFILE%\\AppData\\Local`` when LOCALAPPDATA is unset.

    Raises:
        ConfigurationError: If neither variable is set
    """
    local_app_data = env.get("LOCALAPPDATA")
    if not local_app_data:
        user_profile = env.get("USERPROFILE")
        if not user_profile:
            raise ConfigurationError(
                "Neither LOCALAPPDATA nor USERPROFILE is set. "
                "Cannot determine the local programs directory."
            )
        local_app_data = join_path([user_profile, "AppData", "Local"])
    return join_path([local_app_data, "Programs"])


__all__ = ["join_path", "get_local_programs_dir"]
