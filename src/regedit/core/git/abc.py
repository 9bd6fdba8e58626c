"""Git operations interface used by the registry synchronizer.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- PrintingGit: Wrapper that echoes mutating operations before delegating
- FakeGit (tests/fakes/git.py): Fixture-directory implementation for tests
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path


def parse_head_branch(remote_show_output: str) -> str | None:
    """Extract the default branch from `git remote show <remote>` output.

    Scans for the line containing "HEAD branch", e.g. "  HEAD branch: main".

    Returns:
        The branch name, or None if no usable HEAD branch line is present
    """
    for line in remote_show_output.splitlines():
        if "HEAD branch" not in line:
            continue
        _, sep, value = line.partition(":")
        branch = value.strip()
        if not sep or not branch or branch == "(unknown)":
            return None
        return branch
    return None


class Git(ABC):
    """Abstract interface for the git operations regedit needs.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def with_config(self, overlay: Mapping[str, str]) -> "Git":
        """Return a Git that passes `-c key=value` for every overlay entry.

        Args:
            overlay: Per-invocation git configuration (e.g. user.name)
        """
        ...

    @abstractmethod
    def clone(self, url: str, destination: Path) -> None:
        """Clone `url` into `destination`.

        Raises:
            ExternalToolError: If git clone fails
        """
        ...

    @abstractmethod
    def set_remote_url(self, repo: Path, remote: str, url: str) -> None:
        """Point `remote` of the repository at `url`."""
        ...

    @abstractmethod
    def get_remote_default_branch(self, repo: Path, remote: str) -> str:
        """Ask the remote which branch its HEAD points to.

        Raises:
            DefaultBranchResolutionError: If the remote does not report a HEAD branch
        """
        ...

    @abstractmethod
    def checkout(self, repo: Path, branch: str, *, force: bool) -> None:
        """Check out `branch`, discarding local modifications when `force` is set."""
        ...

    @abstractmethod
    def fetch(self, repo: Path, remote: str, branch: str, *, prune_tags: bool) -> None:
        """Fetch `branch` from `remote`."""
        ...

    @abstractmethod
    def reset_hard(self, repo: Path, ref: str) -> None:
        """Reset the current branch and working tree to `ref`."""
        ...
