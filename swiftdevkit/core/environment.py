"""
Session environment for swiftdevkit.

All operations read and mutate an explicit :class:`Environment` owned by the
caller instead of ``os.environ``. This keeps them testable in isolation and
lets the CLI run them on a copy and report what changed.

Variable names compare case-insensitively, as on Windows, while the
spelling used when a variable was first set is preserved.

Usage:
    from swiftdevkit.core.environment import Environment

    env = Environment.from_os()
    env.prepend_path(r"C:\\tools\\bin")
    env.apply_to_os()
"""

import logging
import os
from typing import Dict, Iterable, Iterator, List, Mapping, MutableMapping, Optional

logger = logging.getLogger(__name__)


class Environment(MutableMapping):
    """
    Case-insensitive environment variable table.

    Attributes:
        pathsep: Separator for list variables such as PATH and INCLUDE
        cwd: Working directory the session should end up in, or None
    """

    def __init__(
        self,
        variables: Optional[Mapping[str, str]] = None,
        pathsep: str = os.pathsep,
        cwd: Optional[str] = None,
    ):
        self._data: Dict[str, tuple] = {}
        self.pathsep = pathsep
        self.cwd = cwd
        if variables:
            for name, value in variables.items():
                self[name] = value

    @classmethod
    def from_os(cls) -> "Environment":
        """Snapshot the current process environment."""
        return cls(dict(os.environ), pathsep=os.pathsep)

    # MutableMapping protocol

    def __getitem__(self, name: str) -> str:
        return self._data[name.upper()][1]

    def __setitem__(self, name: str, value: str) -> None:
        key = name.upper()
        existing = self._data.get(key)
        self._data[key] = (existing[0] if existing else name, str(value))

    def __delitem__(self, name: str) -> None:
        del self._data[name.upper()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and name.upper() in self._data

    def __repr__(self) -> str:
        return f"Environment({len(self)} variables, cwd={self.cwd!r})"

    def copy(self) -> "Environment":
        """Return an independent copy with the same separator and cwd."""
        return Environment(dict(self.items()), pathsep=self.pathsep, cwd=self.cwd)

    def unset(self, name: str) -> bool:
        """
        Remove a variable if present.

        Returns:
            True if the variable existed
        """
        if name in self:
            del self[name]
            return True
        return False

    def replace(self, variables: Mapping[str, str]) -> None:
        """Replace the whole table, as a developer shell activation does."""
        self._data.clear()
        for name, value in variables.items():
            self[name] = value

    # List variables

    def path_entries(self, name: str = "PATH") -> List[str]:
        """
        Split a list variable into its entries.

        Empty entries are kept so that rewriting a list round-trips.
        An unset or empty variable yields an empty list.
        """
        value = self.get(name, "")
        if not value:
            return []
        return value.split(self.pathsep)

    def set_path_entries(self, entries: Iterable[str], name: str = "PATH") -> None:
        """Join entries with the list separator and store them."""
        self[name] = self.pathsep.join(entries)

    def prepend_path(self, *directories: str, name: str = "PATH") -> None:
        """
        Prepend directories to a list variable.

        Directories keep the order given: the first argument ends up first.
        Existing entries are not de-duplicated.
        """
        entries = [str(d) for d in directories] + self.path_entries(name)
        self.set_path_entries(entries, name)
        logger.debug(f"Prepended to {name}: {', '.join(str(d) for d in directories)}")

    def remove_path_entries(self, *entries: str, name: str = "PATH") -> int:
        """
        Remove entries from a list variable by exact string match.

        Returns:
            Number of entries removed
        """
        targets = set(entries)
        current = self.path_entries(name)
        kept = [entry for entry in current if entry not in targets]
        removed = len(current) - len(kept)
        if removed:
            self.set_path_entries(kept, name)
            logger.debug(f"Removed {removed} entries from {name}")
        return removed

    # Reporting

    def changes(self, baseline: Mapping[str, str]) -> Dict[str, Optional[str]]:
        """
        Compute the variables that differ from a baseline.

        Returns:
            Mapping of variable name to new value, or None when removed
        """
        baseline_env = Environment(baseline, pathsep=self.pathsep)
        result: Dict[str, Optional[str]] = {}
        for name, value in self.items():
            if baseline_env.get(name) != value:
                result[name] = value
        for name in baseline_env:
            if name not in self:
                result[name] = None
        return result

    def apply_to_os(self) -> None:
        """Write this table into ``os.environ`` and drop missing variables."""
        for name in list(os.environ):
            if name not in self:
                del os.environ[name]
        for name, value in self.items():
            os.environ[name] = value


__all__ = ["Environment"]
