"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

from collections.abc import Mapping
from pathlib import Path

from regedit.core.errors import DefaultBranchResolutionError
from regedit.core.git.abc import Git, parse_head_branch
from regedit.core.subprocess import run_subprocess_with_context

# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess. Commands run
    against a repository use `git -C <repo>` so the caller's working directory
    never matters.
    """

    def __init__(
        self,
        *,
        config: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        """Create a RealGit.

        Args:
            config: Overlay passed as `-c key=value` to every invocation
            timeout: Seconds to wait for each git invocation (None waits forever)
        """
        self._config = dict(config or {})
        self._timeout = timeout

    def _git(self, repo: Path | None, *args: str) -> list[str]:
        cmd = ["git"]
        if repo is not None:
            cmd += ["-C", str(repo)]
        for key, value in self._config.items():
            cmd += ["-c", f"{key}={value}"]
        return cmd + list(args)

    def _run(self, cmd: list[str], operation_context: str) -> str:
        result = run_subprocess_with_context(
            cmd, operation_context=operation_context, timeout=self._timeout
        )
        return result.stdout

    def with_config(self, overlay: Mapping[str, str]) -> Git:
        """Return a RealGit whose overlay extends this one."""
        return RealGit(config={**self._config, **overlay}, timeout=self._timeout)

    def clone(self, url: str, destination: Path) -> None:
        """Clone `url` into `destination`."""
        self._run(
            self._git(None, "clone", url, str(destination)),
            f"clone '{url}' into {destination}",
        )

    def set_remote_url(self, repo: Path, remote: str, url: str) -> None:
        """Set remote.<remote>.url in the repository config."""
        self._run(
            self._git(repo, "config", f"remote.{remote}.url", url),
            f"set url of remote '{remote}' to '{url}'",
        )

    def get_remote_default_branch(self, repo: Path, remote: str) -> str:
        """Read the HEAD branch from `git remote show <remote>`."""
        output = self._run(
            self._git(repo, "remote", "show", remote),
            f"query remote '{remote}'",
        )
        branch = parse_head_branch(output)
        if branch is None:
            raise DefaultBranchResolutionError(repo)
        return branch

    def checkout(self, repo: Path, branch: str, *, force: bool) -> None:
        """Check out `branch` quietly."""
        args = ["checkout", "-q"]
        if force:
            args.append("-f")
        self._run(self._git(repo, *args, branch), f"checkout branch '{branch}'")

    def fetch(self, repo: Path, remote: str, branch: str, *, prune_tags: bool) -> None:
        """Fetch `branch` from `remote` quietly."""
        # fetch.pruneTags instead of -P, which older git versions lack
        cmd = self._git(repo)
        if prune_tags:
            cmd += ["-c", "fetch.pruneTags=true"]
        cmd += ["fetch", "-q", remote, branch]
        self._run(cmd, f"fetch '{branch}' from '{remote}'")

    def reset_hard(self, repo: Path, ref: str) -> None:
        """Hard-reset to `ref` quietly."""
        self._run(self._git(repo, "reset", "-q", "--hard", ref), f"reset to '{ref}'")
