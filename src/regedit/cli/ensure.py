"""CLI error handling utilities with styled output.

All errors use a red "Error:" prefix and exit with status 1.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import click

from regedit.cli.output import user_output
from regedit.core.errors import RegEditError


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def fail(error_message: str) -> NoReturn:
        """Output styled error and exit.

        Raises:
            SystemExit: Always (with exit code 1)
        """
        user_output(click.style("Error: ", fg="red") + error_message)
        raise SystemExit(1)

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit."""
        if not condition:
            Ensure.fail(error_message)

    @staticmethod
    @contextmanager
    def reported_errors() -> Iterator[None]:
        """Turn library, config and I/O errors into a styled error and exit 1."""
        try:
            yield
        except (RegEditError, ValueError, OSError) as e:
            Ensure.fail(str(e))
