"""Exception types raised by regedit.

Every failure propagates to the caller; nothing here is recovered locally.
"""

from collections.abc import Sequence
from pathlib import Path


class RegEditError(Exception):
    """Base class for all regedit errors."""


class InvalidNameError(RegEditError, ValueError):
    """A package name cannot be mapped to a storage path."""


class InvalidIdentifierError(RegEditError, ValueError):
    """A value does not parse as a 128-bit UUID."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid UUID: {value!r}")
        self.value = value


class MalformedRegistryError(RegEditError, ValueError):
    """A registry document is missing a required field or is not valid TOML."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    @classmethod
    def missing_field(cls, field: str) -> "MalformedRegistryError":
        return cls(f"Registry is missing required field '{field}'", field=field)


class DefaultBranchResolutionError(RegEditError):
    """The remote did not report a HEAD branch."""

    def __init__(self, repo: Path) -> None:
        super().__init__(f"Failed to get default branch of registry at {repo}")
        self.repo = repo


class ExternalToolError(RegEditError, RuntimeError):
    """An external command exited with a non-zero status (or never started)."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str],
        returncode: int | None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class FilesystemError(RegEditError, OSError):
    """Creating, removing or moving a cache directory failed."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path
