"""
Machine-level session state (drive aliases).
"""

from .drive import DEFAULT_DRIVE, alias_root, initialize_drive_alias

__all__ = ["DEFAULT_DRIVE", "alias_root", "initialize_drive_alias"]
