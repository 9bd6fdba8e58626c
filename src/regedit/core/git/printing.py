"""Printing Git wrapper for verbose output.

This module provides a Git wrapper that prints styled output for operations
before delegating to the wrapped implementation.
"""

from collections.abc import Mapping
from pathlib import Path

import click

from regedit.core.git.abc import Git

# ============================================================================
# Printing Wrapper Implementation
# ============================================================================


class PrintingGit(Git):
    """Wrapper that prints operations before delegating to inner implementation.

    Usage:
        printing_git = PrintingGit(RealGit())
    """

    def __init__(self, wrapped: Git) -> None:
        self._wrapped = wrapped

    def _emit(self, repo: Path | None, command: str) -> None:
        location = f" ({repo})" if repo is not None else ""
        click.echo(click.style(f"  $ {command}", dim=True) + location, err=True)

    def with_config(self, overlay: Mapping[str, str]) -> Git:
        return PrintingGit(self._wrapped.with_config(overlay))

    # Read-only operations: delegate without printing

    def get_remote_default_branch(self, repo: Path, remote: str) -> str:
        """Query default branch (read-only, no printing)."""
        return self._wrapped.get_remote_default_branch(repo, remote)

    # Operations that change the working tree: print, then delegate

    def clone(self, url: str, destination: Path) -> None:
        self._emit(None, f"git clone {url} {destination}")
        self._wrapped.clone(url, destination)

    def set_remote_url(self, repo: Path, remote: str, url: str) -> None:
        self._emit(repo, f"git config remote.{remote}.url {url}")
        self._wrapped.set_remote_url(repo, remote, url)

    def checkout(self, repo: Path, branch: str, *, force: bool) -> None:
        force_flag = " -f" if force else ""
        self._emit(repo, f"git checkout{force_flag} {branch}")
        self._wrapped.checkout(repo, branch, force=force)

    def fetch(self, repo: Path, remote: str, branch: str, *, prune_tags: bool) -> None:
        self._emit(repo, f"git fetch {remote} {branch}")
        self._wrapped.fetch(repo, remote, branch, prune_tags=prune_tags)

    def reset_hard(self, repo: Path, ref: str) -> None:
        self._emit(repo, f"git reset --hard {ref}")
        self._wrapped.reset_hard(repo, ref)
