"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes and verbose output via wrappers.
"""

from regedit.core.git.abc import Git, parse_head_branch
from regedit.core.git.printing import PrintingGit
from regedit.core.git.real import RealGit

__all__ = [
    "Git",
    "PrintingGit",
    "RealGit",
    "parse_head_branch",
]
