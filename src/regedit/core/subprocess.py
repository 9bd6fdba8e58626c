"""Subprocess execution with rich error context.

Every external command regedit runs goes through run_subprocess_with_context so
that failures surface as ExternalToolError carrying the command, exit status and
captured output.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from regedit.core.errors import ExternalToolError

logger = logging.getLogger(__name__)


def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    timeout: float | None = None,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Execute subprocess with enriched error reporting.

    Wraps subprocess.run() and re-raises CalledProcessError, TimeoutExpired and
    FileNotFoundError as ExternalToolError with operation context, stderr output
    and command details.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of operation
        cwd: Working directory for command execution
        timeout: Seconds to wait before giving up (None waits forever)
        **kwargs: Additional arguments passed to subprocess.run()

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        ExternalToolError: If the command fails, times out or is not found
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    logger.debug("Running: %s", cmd_str)

    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
            timeout=timeout,
            **kwargs,
        )

    except subprocess.CalledProcessError as e:
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"

        stdout_stripped = _decode(e.stdout).strip()
        if stdout_stripped:
            error_msg += f"\nstdout: {stdout_stripped}"

        stderr_stripped = _decode(e.stderr).strip()
        if stderr_stripped:
            error_msg += f"\nstderr: {stderr_stripped}"

        raise ExternalToolError(
            error_msg, command=cmd, returncode=e.returncode, stderr=stderr_stripped or None
        ) from e

    except subprocess.TimeoutExpired as e:
        error_msg = f"Timed out after {e.timeout}s while trying to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        raise ExternalToolError(error_msg, command=cmd, returncode=None) from e

    except FileNotFoundError as e:
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise ExternalToolError(error_msg, command=cmd, returncode=None) from e
