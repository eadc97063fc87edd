"""Exception hierarchy shared by the gorn services."""

from __future__ import annotations


class GornError(Exception):
    """Base class for failures that stop a launcher session."""


class SelectionCancelled(GornError):
    """Raised when the menu produced an empty selection."""


class UnresolvedExecutableError(GornError):
    """Raised when the selected executable is not found on the search path."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name


class MenuUnavailableError(GornError):
    """Raised when the external menu program cannot be started."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"{command}: {reason}")
        self.command = command
        self.reason = reason


class LaunchError(GornError):
    """Raised when spawning the selected executable fails."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
