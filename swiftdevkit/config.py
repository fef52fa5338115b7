"""YAML configuration for swiftdevkit.

Every setting has a pinned default, so the configuration file is optional.
A ``swiftdevkit.yaml`` overrides the defaults:

    cmake:
      version: "3.29"
      patch: "2"
      sha256: "<hex digest of the release zip>"
    drive: "S:"
    binary_cache: "S:\\\\b"
    toolchain:
      version: "6.1.2"
      target_arch: amd64
    msvc:
      sdk_version: "10.0.22621.0"
      toolset_version: "14.40"
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "swiftdevkit.yaml"


@dataclass
class CMakeConfig:
    """Pinned CMake release."""

    version: str = "3.29"
    patch: str = "2"
    sha256: Optional[str] = None


@dataclass
class ToolchainConfig:
    """Swift toolchain selection for the convenience initializers."""

    version: str = "6.1.2"
    target_arch: str = "amd64"


@dataclass
class MSVCConfig:
    """Optional Visual Studio developer shell pins."""

    sdk_version: Optional[str] = None
    toolset_version: Optional[str] = None


@dataclass
class DevKitConfig:
    """Complete swiftdevkit configuration."""

    cmake: CMakeConfig
    toolchain: ToolchainConfig
    msvc: MSVCConfig
    drive: str = "S:"
    binary_cache: str = "S:\\b"

    @classmethod
    def default(cls) -> "DevKitConfig":
        return cls(cmake=CMakeConfig(), toolchain=ToolchainConfig(), msvc=MSVCConfig())


def load_config(config_path: Optional[Path] = None) -> DevKitConfig:
    """
    Load configuration, falling back to defaults.

    Args:
        config_path: Path to YAML file. None means "./swiftdevkit.yaml if it
            exists". An explicit path must exist.

    Returns:
        Parsed configuration

    Raises:
        ConfigurationError: If the file is missing (when explicit), not valid
            YAML, or has the wrong shape
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            logger.debug(f"No configuration file at {config_path}, using defaults")
            return DevKitConfig.default()
    elif not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    return parse_config(data or {})


def parse_config(data: Dict[str, Any]) -> DevKitConfig:
    """
    Build a configuration from a parsed YAML document.

    Raises:
        ConfigurationError: On unknown keys or non-mapping sections
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")

    known = {"cmake", "toolchain", "msvc", "drive", "binary_cache"}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}"
        )

    config = DevKitConfig(
        cmake=CMakeConfig(
            **_section(data, "cmake", ("version", "patch", "sha256"))
        ),
        toolchain=ToolchainConfig(
            **_section(data, "toolchain", ("version", "target_arch"))
        ),
        msvc=MSVCConfig(**_section(data, "msvc", ("sdk_version", "toolset_version"))),
    )
    if "drive" in data:
        config.drive = _normalize_drive(str(data["drive"]))
    if "binary_cache" in data:
        config.binary_cache = str(data["binary_cache"])
    return config


def _section(data: Dict[str, Any], name: str, fields: tuple) -> Dict[str, str]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{name}' must be a mapping")

    unknown = set(section) - set(fields)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in '{name}': {', '.join(sorted(unknown))}"
        )
    for key, value in section.items():
        # 3.30 would load as the float 3.3
        if isinstance(value, float):
            raise ConfigurationError(
                f"'{name}.{key}' must be quoted: YAML read it as the number {value!r}"
            )
    return {key: str(value) for key, value in section.items() if value is not None}


def _normalize_drive(drive: str) -> str:
    """Accept 'S', 'S:' or 'S:\\' and return 'S:'."""
    letter = drive.strip().rstrip("\\/").rstrip(":")
    if len(letter) != 1 or not letter.isalpha():
        raise ConfigurationError(f"Invalid drive letter: {drive}")
    return f"{letter.upper()}:"


__all__ = [
    "CMakeConfig",
    "ToolchainConfig",
    "MSVCConfig",
    "DevKitConfig",
    "load_config",
    "parse_config",
]
